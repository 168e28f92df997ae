"""Exceptions raised by :mod:`ijsds.submission.services.store`."""


class StoreBaseException(RuntimeError):
    """Base for submission store exceptions."""


class NoSuchSubmission(StoreBaseException):
    """A request was made for a submission that does not exist."""


class NoSuchNotification(StoreBaseException):
    """A request was made for a notification that does not exist."""


class TransactionFailed(StoreBaseException):
    """Raised when there was a problem committing changes to the database."""


class Unavailable(StoreBaseException):
    """The submission database is not available."""
