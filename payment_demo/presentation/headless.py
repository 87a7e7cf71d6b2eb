"""A presentation surface with no UI, for demos and tests.

It records which stages were shown for which transaction and lets the caller
play the user's part, either by hand through `send` or automatically through
an autopilot script mapping each stage to the signal the "user" answers with.
"""

import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Tuple

from payment_demo.core.stage import Stage, StageContext, StageSignal
from payment_demo.core.transaction import format_amount
from payment_demo.exceptions import NoPresentationContextError, PresentationBusyError

logger = logging.getLogger(__name__)


class HeadlessSurface:
    """In-memory presentation surface.

    Attributes:
        available: When False, every presentation fails with NoPresentationContextError.
        busy_attempts: Number of upcoming summary presentations to reject as busy.
        exclusive: When True, a summary cannot be shown while another
            transaction's screens are still up, the way a single modal stack behaves.
        autopilot: Stage to reply signal; stages not listed wait for `send`.
        reply_delay: Seconds between showing a stage and the autopilot reply.
        presented: (transaction_id, stage) pairs in presentation order.
        dismissed: Transaction ids whose screens were dismissed, in order.
    """

    def __init__(
        self,
        autopilot: Optional[Mapping[Stage, StageSignal]] = None,
        reply_delay: float = 0.0,
        exclusive: bool = True,
    ) -> None:
        self.available = True
        self.busy_attempts = 0
        self.exclusive = exclusive
        self.autopilot: Dict[Stage, StageSignal] = dict(autopilot or {})
        self.reply_delay = reply_delay
        self.presented: List[Tuple[str, Stage]] = []
        self.dismissed: List[str] = []
        self._active: Dict[str, StageContext] = {}

    def present(self, stage: Stage, context: StageContext) -> None:
        transaction_id = context.transaction_id
        if not self.available:
            raise NoPresentationContextError("no foreground window", transaction_id=transaction_id)
        if stage is Stage.SUMMARY:
            if self.busy_attempts > 0:
                self.busy_attempts -= 1
                raise PresentationBusyError("another modal is showing", transaction_id=transaction_id)
            if self.exclusive and any(tid != transaction_id for tid in self._active):
                raise PresentationBusyError("another payment is showing", transaction_id=transaction_id)

        self._active[transaction_id] = context
        self.presented.append((transaction_id, stage))
        logger.info(f"[{transaction_id}] Showing {stage.value} screen ({format_amount(context.request.amount)})")

        signal = self.autopilot.get(stage)
        if signal is not None:
            asyncio.get_running_loop().call_later(self.reply_delay, context.reply, signal)

    def dismiss(self, transaction_id: str) -> None:
        self._active.pop(transaction_id, None)
        self.dismissed.append(transaction_id)

    def send(self, transaction_id: str, signal: StageSignal) -> None:
        """Deliver `signal` as if the user acted on the screen showing `transaction_id`.

        Raises:
            KeyError: Nothing is showing for `transaction_id`.
        """
        context = self._active.get(transaction_id)
        if context is None:
            raise KeyError(f"No screen is showing for transaction {transaction_id}")
        context.reply(signal)

    def stages_for(self, transaction_id: str) -> List[Stage]:
        return [stage for tid, stage in self.presented if tid == transaction_id]

    def current_stage(self, transaction_id: str) -> Optional[Stage]:
        context = self._active.get(transaction_id)
        return context.stage if context else None
