"""Mock in-app payment flow: summary, processing, success and a system banner."""

from payment_demo.core.coordinator import PaymentSessionCoordinator
from payment_demo.core.registry import SessionRegistry
from payment_demo.core.stage import Stage, StageContext, StageSignal
from payment_demo.core.transaction import PaymentStatus, TransactionOutcome, TransactionRequest
from payment_demo.facade import PaymentFramework

__all__ = [
    "PaymentFramework",
    "PaymentSessionCoordinator",
    "PaymentStatus",
    "SessionRegistry",
    "Stage",
    "StageContext",
    "StageSignal",
    "TransactionOutcome",
    "TransactionRequest",
]
