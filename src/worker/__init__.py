"""Background workers for billing service"""
from .payment_reconciler import PaymentReconcilerWorker
from .slot_payment_generator import SlotPaymentGeneratorWorker

__all__ = ["PaymentReconcilerWorker", "SlotPaymentGeneratorWorker"]
