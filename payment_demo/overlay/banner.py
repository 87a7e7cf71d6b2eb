import asyncio
import logging
from typing import List, Optional

from payment_demo.core.transaction import TransactionOutcome

logger = logging.getLogger(__name__)

BANNER_TITLE = "Payment Successful"


class BannerOverlayNotifier:
    """Shows a system-style "Payment Successful" banner that hides itself after a while.

    At most one banner is visible; a new announcement replaces the current one
    and restarts the auto-dismiss timer.
    """

    def __init__(self, display_seconds: float = 8.0) -> None:
        self.display_seconds = display_seconds
        self.visible: Optional[TransactionOutcome] = None
        self.history: List[TransactionOutcome] = []
        self._dismiss_handle: Optional[asyncio.TimerHandle] = None

    def announce_success(self, outcome: TransactionOutcome) -> None:
        loop = asyncio.get_running_loop()
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
        self.visible = outcome
        self.history.append(outcome)
        logger.info(f"{BANNER_TITLE} | {outcome.banner_text()}")
        self._dismiss_handle = loop.call_later(self.display_seconds, self.dismiss)

    def dismiss(self) -> None:
        """Hide the banner, if one is showing."""
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None
        if self.visible is not None:
            logger.debug(f"Dismissed banner for {self.visible.transaction_id}")
        self.visible = None
