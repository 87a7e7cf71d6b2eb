"""Stages of a payment session and the signals that move it between them."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

from payment_demo.core.transaction import TransactionOutcome, TransactionRequest


class Stage(str, Enum):
    """Where in its lifecycle a payment session currently is."""

    AWAITING_PRESENTATION = "awaiting_presentation"
    SUMMARY = "summary"
    RETRYING = "retrying"
    PROCESSING = "processing"
    SUCCESS = "success"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self is Stage.COMPLETED


class StageSignal(str, Enum):
    """User intents and timer events delivered to a session."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DISMISSED = "dismissed"
    TIMER_ELAPSED = "timer_elapsed"
    ACKNOWLEDGED = "acknowledged"
    PRESENTATION_UNAVAILABLE = "presentation_unavailable"
    PRESENTATION_BUSY = "presentation_busy"
    BACKOFF_ELAPSED = "backoff_elapsed"


ALLOWED_TRANSITIONS: Dict[Stage, FrozenSet[Stage]] = {
    Stage.AWAITING_PRESENTATION: frozenset({Stage.SUMMARY, Stage.RETRYING, Stage.COMPLETED}),
    Stage.RETRYING: frozenset({Stage.AWAITING_PRESENTATION}),
    Stage.SUMMARY: frozenset({Stage.PROCESSING, Stage.RETRYING, Stage.COMPLETED}),
    Stage.PROCESSING: frozenset({Stage.SUCCESS, Stage.COMPLETED}),
    Stage.SUCCESS: frozenset({Stage.COMPLETED}),
    Stage.COMPLETED: frozenset(),
}


@dataclass(frozen=True)
class StageContext:
    """What a presentation surface needs to show one stage of a session.

    `reply` delivers a signal back to the owning session. It never runs the
    resulting transition inline, so it is safe to call from inside `present`.
    """

    stage: Stage
    request: TransactionRequest
    reply: Callable[[StageSignal], None]
    outcome: Optional[TransactionOutcome] = None
    attempt: int = 1

    @property
    def transaction_id(self) -> str:
        return self.request.id
