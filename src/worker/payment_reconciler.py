"""Payment reconciliation worker

Runs ReconcilePayments on a schedule and logs every summary whose paid
amount disagrees with its transactions. Never writes.

    python -m src.worker.payment_reconciler --once [--year 2026 --month 2]
    python -m src.worker.payment_reconciler --interval 3600
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.monthly_payment_repository import SqlAlchemyMonthlyPaymentRepository
from src.adapter.repositories.payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import PaymentDiscrepancyDTO, ReconcilePayments, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def describe(d: PaymentDiscrepancyDTO) -> str:
    return (
        f"customer {d.customer_id} {d.month}/{d.year} (monthly_payment_id={d.monthly_payment_id}): "
        f"recorded={d.recorded_paid}, transactions={d.transaction_sum}, diff={d.discrepancy}"
    )


class PaymentReconcilerWorker:
    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("PaymentReconcilerWorker initialized")

    async def run_once(
        self, month: Optional[int] = None, year: Optional[int] = None
    ) -> ReconciliationResultDTO:
        """
        Reconcile one period, or every period when month/year are omitted

        Raises:
            RuntimeError: The use case returned an error result
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Payment reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_summaries_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcilePayments(
                uow=SqlAlchemyUnitOfWork(session),
                monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
                transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
            )
            result = await use_case.execute(month=month, year=year)

        if result.is_err():
            logger.error(f"Reconciliation failed: {result.error.message}")
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value
        if response.discrepancies_found:
            logger.error(f"ALERT: {response.discrepancies_found} payment discrepancies found")
            for d in response.discrepancies:
                logger.error(f"  - {describe(d)}")

        return response

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting continuous payment reconciliation every {interval_seconds}s")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete: {result.total_summaries_checked} checked, "
                    f"{result.discrepancies_found} out of balance"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("PaymentReconcilerWorker shutdown complete")


async def main():
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Payment Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument("--year", type=int, help="Restrict to one billing year")
    parser.add_argument("--month", type=int, help="Restrict to one billing month")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs",
    )
    args = parser.parse_args()

    worker = PaymentReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once(month=args.month, year=args.year)
            print(
                f"Checked {result.total_summaries_checked} summaries, "
                f"{result.discrepancies_found} out of balance ({result.execution_time_ms}ms)"
            )
            for d in result.discrepancies:
                print(f"  - {describe(d)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
