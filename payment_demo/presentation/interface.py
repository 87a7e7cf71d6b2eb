from typing import Protocol, runtime_checkable

from payment_demo.core.stage import Stage, StageContext


@runtime_checkable
class PresentationSurface(Protocol):
    """Protocol for whatever shows payment screens to the user."""

    def present(self, stage: Stage, context: StageContext) -> None:
        """
        Show `stage` for the session described by `context`.

        User actions and stage events are reported back through `context.reply`.

        Raises:
            NoPresentationContextError: There is no window or root screen to present into.
            PresentationBusyError: Another modal is already showing.
        """
        raise NotImplementedError(f"Surface {self.__class__.__name__} must implement the present method.")

    def dismiss(self, transaction_id: str) -> None:
        """Tear down every screen shown for `transaction_id`."""
        raise NotImplementedError(f"Surface {self.__class__.__name__} must implement the dismiss method.")
