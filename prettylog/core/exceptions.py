"""
Exceptions raised while handling a log record.
"""


class PrettyLogException(Exception):
    """Base exception for record handling errors."""
    pass


class EncodingError(PrettyLogException):
    """
    Raised when the inner handler fails to serialize a record.

    The inner handler's exception is available as ``__cause__``.
    """
    pass


class DecodingError(PrettyLogException):
    """
    Raised when the shared buffer does not hold a JSON object after encoding.

    Indicates the inner handler broke its one-object-per-record contract.
    """
    pass


class MarshalError(PrettyLogException):
    """Raised when the flattened attributes cannot be rendered back to JSON."""
    pass
