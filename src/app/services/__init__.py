from .unit_of_work import UnitOfWork
from .due_calculator import PeriodDueCalculator, DueComputation, OneOffCharge, RecurringCharge

__all__ = [
    "UnitOfWork",
    "PeriodDueCalculator",
    "DueComputation",
    "OneOffCharge",
    "RecurringCharge",
]
