class LedgerError(Exception):
    """
    Base class for recoverable ledger failures surfaced to the caller.
    """

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    status_code = 404


class ValidationError(LedgerError):
    status_code = 400


class ConflictError(LedgerError):
    status_code = 409
