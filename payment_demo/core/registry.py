# Registry of in-flight payment sessions keyed by transaction id.

import logging
import threading
from typing import Dict, List, Optional

from payment_demo.core.coordinator import PaymentSessionCoordinator, ResultCallback
from payment_demo.core.dependency_container import DependencyContainer
from payment_demo.core.transaction import TransactionRequest
from payment_demo.exceptions import DuplicateTransactionError

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Keeps payment sessions reachable from the moment they begin until they complete.

    Only `begin` and `end` mutate the registry. A session removes its own
    entry as the last step of completing, so callers never need to call `end`.
    """

    def __init__(self, container: DependencyContainer) -> None:
        self.container = container
        self._sessions: Dict[str, PaymentSessionCoordinator] = {}
        self._lock = threading.Lock()

    def begin(self, request: TransactionRequest, on_result: Optional[ResultCallback] = None) -> PaymentSessionCoordinator:
        """Register and start a session for `request`. Must be called with a running event loop.

        Raises:
            DuplicateTransactionError: A session for `request.id` is already registered.
        """
        coordinator = PaymentSessionCoordinator(request, self.container, registry=self, on_result=on_result)
        with self._lock:
            if request.id in self._sessions:
                raise DuplicateTransactionError(
                    f"Transaction {request.id} is already in progress",
                    transaction_id=request.id,
                )
            self._sessions[request.id] = coordinator
        logger.debug(f"[{request.id}] Registered payment session ({len(self)} active)")
        try:
            coordinator.start()
        except Exception:
            self.end(request.id)
            raise
        return coordinator

    def end(self, transaction_id: str) -> None:
        """Remove the session for `transaction_id`. Does nothing if it is not registered."""
        with self._lock:
            removed = self._sessions.pop(transaction_id, None)
        if removed is not None:
            logger.debug(f"[{transaction_id}] Removed payment session ({len(self)} active)")

    def lookup(self, transaction_id: str) -> Optional[PaymentSessionCoordinator]:
        with self._lock:
            return self._sessions.get(transaction_id)

    def active_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, transaction_id: object) -> bool:
        with self._lock:
            return transaction_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
