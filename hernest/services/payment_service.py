"""Simulated payment processing.

No gateway is contacted: the processor waits a fixed delay and approves the
charge. The wait is bounded by the configured timeout.
"""

import asyncio
from decimal import Decimal
from uuid import UUID, uuid4

import structlog

from hernest.config import settings
from hernest.core.exceptions import AppException
from hernest.schemas.appointments import PaymentRequest

logger = structlog.get_logger(__name__)


class PaymentTimeoutException(AppException):
    """Payment processor did not answer in time."""

    def __init__(self, message: str = "Payment processing timed out"):
        """Initialize with 504 status code."""
        super().__init__(message, status_code=504)


class PaymentService:
    """Simulated card payment processor."""

    def __init__(
        self,
        delay_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ):
        """Initialize processor, defaulting delay and timeout from settings."""
        self.delay_seconds = (
            settings.payment_processing_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.timeout_seconds = (
            settings.payment_timeout_seconds if timeout_seconds is None else timeout_seconds
        )

    async def _authorize(self) -> None:
        await asyncio.sleep(self.delay_seconds)

    async def charge(self, appointment_id: UUID, amount: Decimal, card: PaymentRequest) -> str:
        """
        Charge a card for an appointment.

        Args:
            appointment_id: Appointment being paid
            amount: Amount to charge
            card: Card details (only the last four digits are logged)

        Returns:
            Simulated transaction reference

        Raises:
            PaymentTimeoutException: If processing exceeds the timeout
        """
        try:
            await asyncio.wait_for(self._authorize(), timeout=self.timeout_seconds)
        except TimeoutError as e:
            logger.error(
                "payment_timed_out",
                appointment_id=str(appointment_id),
                timeout=self.timeout_seconds,
            )
            raise PaymentTimeoutException() from e

        reference = f"sim_{uuid4().hex[:16]}"
        logger.info(
            "payment_captured",
            appointment_id=str(appointment_id),
            amount=str(amount),
            card_last4=card.card_number[-4:],
            reference=reference,
        )
        return reference
