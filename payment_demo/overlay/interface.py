from typing import Protocol, runtime_checkable

from payment_demo.core.transaction import TransactionOutcome


@runtime_checkable
class OverlayNotifier(Protocol):
    """Protocol for the best-effort banner announcing a successful payment."""

    def announce_success(self, outcome: TransactionOutcome) -> None:
        """Announce `outcome`. Fire-and-forget: the return value and any failure are ignored."""
        raise NotImplementedError(f"Notifier {self.__class__.__name__} must implement the announce_success method.")
