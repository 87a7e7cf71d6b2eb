"""Per-transaction state machine driving a payment session from summary to completion."""

import asyncio
import logging
from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from psygnal import Signal, SignalInstance

from payment_demo.core.dependency_container import DependencyContainer
from payment_demo.core.logging import log_stage_transition
from payment_demo.core.stage import ALLOWED_TRANSITIONS, Stage, StageContext, StageSignal
from payment_demo.core.transaction import PaymentStatus, TransactionOutcome, TransactionRequest
from payment_demo.exceptions import (
    CompletionAlreadySettledError,
    InvalidStageTransitionError,
    NoPresentationContextError,
    PresentationBusyError,
    PresentationTimeoutError,
)

if TYPE_CHECKING:
    from payment_demo.core.registry import SessionRegistry

logger = logging.getLogger(__name__)

ResultCallback = Callable[[TransactionOutcome], None]

SUCCESS_MESSAGE = "Payment completed successfully"
CANCELLED_MESSAGE = "Payment cancelled by user"
DISMISSED_MESSAGE = "Payment dismissed by user"
DEFAULT_NO_CONTEXT_REASON = "no presentation context"


class PaymentSessionCoordinator:
    """Drives one payment attempt through its stages.

    The session starts in AWAITING_PRESENTATION, shows the summary, runs the
    fixed-length processing stage once the user confirms, shows the success
    screen and finally settles exactly one `TransactionOutcome`. Every
    transition runs on the event loop the session was started on; signals
    arriving through `send` are queued on that loop, never handled inline.

    Attributes:
        stage_changed: Emitted with (old_stage, new_stage) on every transition.
        completed: Emitted once with the final outcome.
    """

    stage_changed = Signal(Stage, Stage)
    completed = Signal(TransactionOutcome)

    def __init__(
        self,
        request: TransactionRequest,
        container: DependencyContainer,
        registry: Optional["SessionRegistry"] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> None:
        self.request = request
        self._surface = container.surface
        self._notifier = container.notifier
        self._registry = registry
        self._on_result = on_result

        # Read once so a bad setting fails the caller of begin(), not a running session.
        settings = container.settings
        self._processing_seconds = settings.get_processing_seconds()
        self._retry_interval_seconds = settings.get_retry_interval_seconds()
        self._max_attempts = settings.get_max_presentation_attempts()
        self._announce_delay_seconds = settings.get_announce_delay_seconds()

        self._stage = Stage.AWAITING_PRESENTATION
        self._outcome: Optional[TransactionOutcome] = None
        self._settled = False
        self._attempts = 0
        self._unavailable_reason = DEFAULT_NO_CONTEXT_REASON
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._result: Optional[asyncio.Future] = None

        self._handlers: Dict[Tuple[Stage, StageSignal], Callable[[], None]] = {
            (Stage.AWAITING_PRESENTATION, StageSignal.PRESENTATION_UNAVAILABLE): self._fail_without_context,
            (Stage.AWAITING_PRESENTATION, StageSignal.PRESENTATION_BUSY): self._back_off,
            (Stage.RETRYING, StageSignal.BACKOFF_ELAPSED): self._retry_presentation,
            (Stage.SUMMARY, StageSignal.CONFIRMED): self._begin_processing,
            (Stage.SUMMARY, StageSignal.CANCELLED): partial(self._cancel, CANCELLED_MESSAGE),
            (Stage.SUMMARY, StageSignal.DISMISSED): partial(self._cancel, DISMISSED_MESSAGE),
            (Stage.SUMMARY, StageSignal.PRESENTATION_UNAVAILABLE): self._fail_without_context,
            (Stage.SUMMARY, StageSignal.PRESENTATION_BUSY): self._back_off,
            (Stage.PROCESSING, StageSignal.TIMER_ELAPSED): self._show_success,
            (Stage.SUCCESS, StageSignal.ACKNOWLEDGED): self._finish_success,
            (Stage.SUCCESS, StageSignal.DISMISSED): self._finish_success,
        }

    # --- Public API ---

    @property
    def transaction_id(self) -> str:
        return self.request.id

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def outcome(self) -> Optional[TransactionOutcome]:
        """The outcome, once it has been determined."""
        return self._outcome

    @property
    def is_completed(self) -> bool:
        return self._stage is Stage.COMPLETED

    @property
    def attempts(self) -> int:
        """Number of times the summary presentation has been attempted."""
        return self._attempts

    def start(self) -> None:
        """Schedule the first presentation attempt on the running event loop.

        Raises:
            RuntimeError: If called without a running loop, or twice.
        """
        if self._loop is not None:
            raise RuntimeError(f"Payment session {self.transaction_id} has already been started")
        self._loop = asyncio.get_running_loop()
        self._result = self._loop.create_future()
        logger.info(f"[{self.transaction_id}] Starting payment session for {self.request.merchant_name}")
        self._loop.call_soon(self._attempt_presentation)

    def send(self, signal: StageSignal) -> None:
        """Queue `signal` for this session. Safe to call from any thread."""
        if self._loop is None:
            raise RuntimeError(f"Payment session {self.transaction_id} has not been started")
        self._loop.call_soon_threadsafe(self._handle_signal, signal)

    async def wait(self) -> TransactionOutcome:
        """Wait until the session completes and return its outcome."""
        if self._result is None:
            raise RuntimeError(f"Payment session {self.transaction_id} has not been started")
        return await asyncio.shield(self._result)

    # --- Signal dispatch ---

    def _handle_signal(self, signal: StageSignal) -> None:
        handler = self._handlers.get((self._stage, signal))
        if handler is None:
            logger.warning(f"[{self.transaction_id}] Ignoring {signal.value} signal during {self._stage.value} stage")
            return
        handler()

    def _transition(self, new_stage: Stage) -> None:
        old_stage = self._stage
        if new_stage not in ALLOWED_TRANSITIONS[old_stage]:
            raise InvalidStageTransitionError(
                f"Cannot move from {old_stage.value} to {new_stage.value}",
                transaction_id=self.transaction_id,
            )
        self._stage = new_stage
        log_stage_transition(self.transaction_id, old_stage.value, new_stage.value, {"attempt": self._attempts})
        self._emit(self.stage_changed, old_stage, new_stage)

    def _context(self, stage: Stage) -> StageContext:
        return StageContext(
            stage=stage,
            request=self.request,
            reply=self.send,
            outcome=self._outcome,
            attempt=self._attempts,
        )

    def _schedule(self, delay: float, signal: StageSignal) -> None:
        if self._loop is None:
            raise RuntimeError(f"Payment session {self.transaction_id} has not been started")
        self._timer = self._loop.call_later(delay, self._handle_signal, signal)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _dismiss_screens(self) -> None:
        try:
            self._surface.dismiss(self.transaction_id)
        except Exception as e:
            logger.exception(f"[{self.transaction_id}] Failed to dismiss payment screens: {e}")

    def _emit(self, signal: SignalInstance, *args) -> None:
        try:
            signal.emit(*args)
        except Exception as e:
            logger.exception(f"[{self.transaction_id}] Listener failed while handling session event: {e}")

    # --- Stage handlers ---

    def _attempt_presentation(self) -> None:
        self._attempts += 1
        try:
            self._surface.present(Stage.SUMMARY, self._context(Stage.SUMMARY))
        except NoPresentationContextError as e:
            self._unavailable_reason = str(e.detail or DEFAULT_NO_CONTEXT_REASON)
            self._handle_signal(StageSignal.PRESENTATION_UNAVAILABLE)
            return
        except PresentationBusyError:
            self._handle_signal(StageSignal.PRESENTATION_BUSY)
            return
        except Exception as e:
            logger.exception(f"[{self.transaction_id}] Summary presentation failed: {e}")
            self._fail(f"Summary presentation failed: {e}")
            return
        self._transition(Stage.SUMMARY)

    def _fail_without_context(self) -> None:
        logger.error(f"[{self.transaction_id}] Cannot present payment summary: {self._unavailable_reason}")
        self._fail(f"No presentation context: {self._unavailable_reason}")

    def _back_off(self) -> None:
        if self._max_attempts is not None and self._attempts >= self._max_attempts:
            error = PresentationTimeoutError(self._attempts, transaction_id=self.transaction_id)
            logger.error(f"[{self.transaction_id}] {error}")
            self._fail(str(error))
            return
        logger.info(
            f"[{self.transaction_id}] Surface busy, retrying presentation in {self._retry_interval_seconds}s "
            f"(attempt {self._attempts})"
        )
        if self._stage is Stage.SUMMARY:
            # The surface withdrew a summary it had already shown.
            self._dismiss_screens()
        self._transition(Stage.RETRYING)
        self._schedule(self._retry_interval_seconds, StageSignal.BACKOFF_ELAPSED)

    def _retry_presentation(self) -> None:
        self._cancel_timer()
        self._transition(Stage.AWAITING_PRESENTATION)
        self._attempt_presentation()

    def _begin_processing(self) -> None:
        self._transition(Stage.PROCESSING)
        try:
            self._surface.present(Stage.PROCESSING, self._context(Stage.PROCESSING))
        except Exception as e:
            logger.exception(f"[{self.transaction_id}] Processing presentation failed: {e}")
            self._fail(f"Processing presentation failed: {e}")
            return
        logger.info(f"[{self.transaction_id}] Processing payment for {self._processing_seconds}s")
        self._schedule(self._processing_seconds, StageSignal.TIMER_ELAPSED)

    def _show_success(self) -> None:
        self._cancel_timer()
        self._outcome = TransactionOutcome.for_request(self.request, PaymentStatus.SUCCESS, SUCCESS_MESSAGE)
        self._transition(Stage.SUCCESS)
        try:
            self._surface.present(Stage.SUCCESS, self._context(Stage.SUCCESS))
        except Exception as e:
            # The payment already succeeded; complete without waiting for an acknowledgement.
            logger.exception(f"[{self.transaction_id}] Success presentation failed: {e}")
            self._complete(self._outcome)

    def _finish_success(self) -> None:
        if self._outcome is None:
            raise RuntimeError(f"Payment session {self.transaction_id} has no outcome to finish with")
        self._complete(self._outcome)

    def _cancel(self, message: str) -> None:
        self._complete(TransactionOutcome.for_request(self.request, PaymentStatus.CANCELLED, message))

    def _fail(self, message: str) -> None:
        self._complete(TransactionOutcome.for_request(self.request, PaymentStatus.FAILED, message))

    # --- Completion ---

    def _complete(self, outcome: TransactionOutcome) -> None:
        if self._loop is None or self._result is None:
            raise RuntimeError(f"Payment session {self.transaction_id} has not been started")
        if self._settled:
            raise CompletionAlreadySettledError(
                f"Payment session {self.transaction_id} has already completed",
                transaction_id=self.transaction_id,
            )
        self._settled = True
        self._outcome = outcome
        self._cancel_timer()
        self._transition(Stage.COMPLETED)
        logger.info(f"[{self.transaction_id}] Payment {outcome.status.value}: {outcome.message}")

        self._dismiss_screens()

        if outcome.succeeded:
            self._loop.call_later(self._announce_delay_seconds, self._announce, outcome)

        self._result.set_result(outcome)
        self._emit(self.completed, outcome)

        if self._on_result is not None:
            try:
                self._on_result(outcome)
            except Exception as e:
                logger.exception(f"[{self.transaction_id}] Result callback raised: {e}")

        if self._registry is not None:
            self._registry.end(self.transaction_id)

    def _announce(self, outcome: TransactionOutcome) -> None:
        try:
            self._notifier.announce_success(outcome)
        except Exception as e:
            logger.warning(f"[{self.transaction_id}] Overlay announcement failed: {e}")
