from decimal import Decimal
from typing import Optional, Union

from payment_demo.core.coordinator import PaymentSessionCoordinator, ResultCallback
from payment_demo.core.dependency_container import DependencyContainer
from payment_demo.core.registry import SessionRegistry
from payment_demo.core.transaction import TransactionRequest
from payment_demo.overlay.interface import OverlayNotifier
from payment_demo.presentation.interface import PresentationSurface
from payment_demo.settings import Settings


class PaymentFramework:
    """Entry point for starting mock in-app payments."""

    def __init__(self, registry: SessionRegistry) -> None:
        self.registry = registry

    @classmethod
    def create(
        cls,
        surface: PresentationSurface,
        notifier: OverlayNotifier,
        settings: Optional[Settings] = None,
    ) -> "PaymentFramework":
        """Build a framework with its own registry around the given collaborators."""
        container = DependencyContainer(settings=settings or Settings(), surface=surface, notifier=notifier)
        return cls(SessionRegistry(container))

    def initiate_payment(
        self,
        request: TransactionRequest,
        on_result: Optional[ResultCallback] = None,
    ) -> PaymentSessionCoordinator:
        """Begin a payment session for `request` and return immediately.

        The outcome is delivered to `on_result` and through `await session.wait()`.

        Raises:
            DuplicateTransactionError: A session for `request.id` is already in progress.
        """
        return self.registry.begin(request, on_result=on_result)

    def start_payment(
        self,
        amount: Union[Decimal, float, int, str],
        description: str,
        merchant_name: str,
        on_result: Optional[ResultCallback] = None,
    ) -> PaymentSessionCoordinator:
        """Convenience wrapper building the TransactionRequest from its parts."""
        request = TransactionRequest(amount=amount, description=description, merchant_name=merchant_name)
        return self.initiate_payment(request, on_result=on_result)
