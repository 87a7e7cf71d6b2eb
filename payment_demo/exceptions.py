# Payment demo exceptions


class PaymentDemoError(Exception):
    """Base exception for all payment demo errors."""

    def __init__(self, *args, transaction_id: str | None = None, detail: str | None = None):
        super().__init__(*args)
        self.transaction_id = transaction_id
        # Use the first arg as detail if detail kwarg is not provided and args exist
        self.detail = detail or (args[0] if args else None)


class NoPresentationContextError(PaymentDemoError):
    """Raised by a surface that has no foreground window or root screen to present into."""

    pass


class PresentationBusyError(PaymentDemoError):
    """Raised by a surface that is already showing another modal."""

    pass


class PresentationTimeoutError(PaymentDemoError):
    """The surface stayed busy for more presentation attempts than allowed."""

    def __init__(self, attempts: int, transaction_id: str | None = None):
        self.attempts = attempts
        super().__init__(f"Presentation timed out after {attempts} attempts", transaction_id=transaction_id)


class DuplicateTransactionError(ValueError, PaymentDemoError):
    """A session for this transaction id is already registered."""

    def __init__(self, *args, transaction_id: str | None = None, detail: str | None = None):
        PaymentDemoError.__init__(self, *args, transaction_id=transaction_id, detail=detail)


class CompletionAlreadySettledError(RuntimeError, PaymentDemoError):
    """A session tried to produce a second outcome."""

    def __init__(self, *args, transaction_id: str | None = None, detail: str | None = None):
        PaymentDemoError.__init__(self, *args, transaction_id=transaction_id, detail=detail)


class InvalidStageTransitionError(RuntimeError, PaymentDemoError):
    """A session attempted a stage change its lifecycle does not allow."""

    def __init__(self, *args, transaction_id: str | None = None, detail: str | None = None):
        PaymentDemoError.__init__(self, *args, transaction_id=transaction_id, detail=detail)


class PaymentConfigurationError(ValueError, PaymentDemoError):
    """An environment setting has an invalid value."""

    def __init__(self, *args, transaction_id: str | None = None, detail: str | None = None):
        PaymentDemoError.__init__(self, *args, transaction_id=transaction_id, detail=detail)
