"""Slot Payment Record Generation Background Worker

Materializes slot payment records for every active recurring booking at
the start of each billing period. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
import time
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.booking_repository import SqlAlchemyRecurringBookingRepository
from src.adapter.repositories.recurring_booking_payment_repository import (
    SqlAlchemyRecurringBookingPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    EnsureSlotRecords,
    EnsureSlotRecordsCommandDTO,
    SlotRecordGenerationResultDTO,
)
from src.domain.billing_period import BillingPeriod
from src.domain.pricing import RateTable

logger = logging.getLogger(__name__)


class SlotPaymentGeneratorWorker:
    """
    Background worker for slot payment record generation

    Features:
    - Creates one pending record per active recurring booking and period
    - Idempotent: safe to re-run, existing records are never touched
    - Can run once or continuously (generates once per new period)

    Usage:
        # Run once for the current period
        worker = SlotPaymentGeneratorWorker()
        result = await worker.run_once()

        # Run once for a specific period
        result = await worker.run_once(year=2026, month=2)

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        rate_table: Optional[RateTable] = None,
        timezone: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            rate_table: Rates (defaults to ApplicationConfig.RATE_TABLE)
            timezone: Billing timezone (defaults to ApplicationConfig.BILLING_TIMEZONE)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.rate_table = rate_table or RateTable.from_config(ApplicationConfig.RATE_TABLE)
        self.timezone = timezone or ApplicationConfig.BILLING_TIMEZONE

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("SlotPaymentGeneratorWorker initialized")

    def _get_billing_period(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> BillingPeriod:
        """Requested period, or the current one in the billing timezone"""
        if year is None or month is None:
            return BillingPeriod.current(self.timezone)
        return BillingPeriod(month=month, year=year)

    async def run_once(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> SlotRecordGenerationResultDTO:
        """
        Generate records once for the given period

        Args:
            year: Year (optional, defaults to current period)
            month: Month (optional, defaults to current period)

        Returns:
            SlotRecordGenerationResultDTO with counts
        """
        start_time = time.time()
        period = self._get_billing_period(year, month)

        if not ApplicationConfig.SLOT_RECORDS_ENABLED:
            logger.info("Slot payment record generation is disabled, skipping")
            return SlotRecordGenerationResultDTO(
                month=period.month,
                year=period.year,
                total_slots=0,
                created=0,
                existing=0,
                skipped=0,
                execution_time_ms=0,
            )

        logger.info(f"Starting slot payment record generation for period {period}")

        async with self.async_session_factory() as session:
            recurring_repo = SqlAlchemyRecurringBookingRepository(session)
            slot_ids = await recurring_repo.get_active_ids()

            logger.info(f"Found {len(slot_ids)} active recurring bookings")

            use_case = EnsureSlotRecords(
                uow=SqlAlchemyUnitOfWork(session),
                recurring_repo=recurring_repo,
                slot_payment_repo=SqlAlchemyRecurringBookingPaymentRepository(session),
                rate_table=self.rate_table,
                timezone=self.timezone,
            )

            result = await use_case.execute(
                EnsureSlotRecordsCommandDTO(slot_ids=slot_ids, month=period.month, year=period.year)
            )

            if result.is_err():
                logger.error(f"Slot record generation failed: {result.error.message}")
                raise RuntimeError(f"Slot record generation failed: {result.error.message}")

            response = result.value

        execution_time_ms = int((time.time() - start_time) * 1000)

        summary = SlotRecordGenerationResultDTO(
            month=period.month,
            year=period.year,
            total_slots=len(slot_ids),
            created=response.created,
            existing=response.existing,
            skipped=len(response.skipped_slot_ids),
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Slot record generation complete for {period}: "
            f"{summary.created} created, {summary.existing} existing, "
            f"{summary.skipped} skipped, {execution_time_ms}ms"
        )

        return summary

    async def run_forever(self, check_interval_seconds: int = 86400):
        """
        Run generation continuously, once per new billing period

        Args:
            check_interval_seconds: Seconds between checks (default: 24 hours)
        """
        logger.info(
            f"Starting continuous slot record generation with {check_interval_seconds}s interval"
        )

        last_processed: Optional[BillingPeriod] = None

        while True:
            try:
                current = BillingPeriod.current(self.timezone)
                if last_processed != current:
                    result = await self.run_once(year=current.year, month=current.month)
                    last_processed = current
                    logger.info(f"Processed period {current}: {result.created} records created")
                else:
                    logger.debug(f"Period {current} already processed")

            except Exception as e:
                logger.error(f"Slot record generation cycle failed: {e}")

            await asyncio.sleep(check_interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("SlotPaymentGeneratorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for the current period
        python -m src.worker.slot_payment_generator

        # Run for specific month
        python -m src.worker.slot_payment_generator --year 2026 --month 2

        # Run continuously
        python -m src.worker.slot_payment_generator --continuous
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Slot Payment Record Generation Worker")
    parser.add_argument("--year", type=int, help="Year of the billing period")
    parser.add_argument("--month", type=int, help="Month of the billing period")
    parser.add_argument("--continuous", action="store_true", help="Run continuously")
    args = parser.parse_args()

    worker = SlotPaymentGeneratorWorker()

    try:
        if args.continuous:
            await worker.run_forever(
                check_interval_seconds=ApplicationConfig.SLOT_RECORDS_INTERVAL_SECONDS
            )
        else:
            result = await worker.run_once(year=args.year, month=args.month)
            print("Slot record generation complete:")
            print(f"  Period: {result.month}/{result.year}")
            print(f"  Active slots: {result.total_slots}")
            print(f"  Created: {result.created}")
            print(f"  Existing: {result.existing}")
            print(f"  Skipped: {result.skipped}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
