"""Payment gateway adapters.

Only a mock gateway exists today. ``PAYMENT_GATEWAY_MODE`` decides its
behaviour: ``decline`` refuses every charge (the historical checkout
behaviour) and ``approve`` accepts every charge with a generated
transaction reference.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeResult:
    success: bool
    transaction_id: str = ""
    error_message: str = ""


class MockGateway:
    name = "mock"

    def __init__(self, mode: str = "decline", decline_message: str = ""):
        if mode not in ("approve", "decline"):
            raise ImproperlyConfigured(f"Unknown PAYMENT_GATEWAY_MODE: {mode!r}")
        self.mode = mode
        self.decline_message = decline_message or "Payment declined."

    def charge(self, *, amount: Decimal, currency: str, reference: str, card_last4: str) -> ChargeResult:
        logger.info(f"Mock gateway ({self.mode}) charging {amount} {currency} for {reference}, card *{card_last4}")
        if self.mode == "decline":
            return ChargeResult(success=False, error_message=self.decline_message)
        return ChargeResult(success=True, transaction_id=f"MOCK-{uuid.uuid4().hex[:12].upper()}")


def get_gateway() -> MockGateway:
    """Return the gateway configured in settings."""
    processor = settings.PAYMENT_PROCESSOR_NAME
    if processor != MockGateway.name:
        raise ImproperlyConfigured(f"Unsupported PAYMENT_PROCESSOR_NAME: {processor!r}")
    return MockGateway(
        mode=settings.PAYMENT_GATEWAY_MODE,
        decline_message=settings.PAYMENT_DECLINE_MESSAGE,
    )
