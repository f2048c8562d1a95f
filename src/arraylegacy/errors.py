from typing import Any


class ArrayLegacyError(Exception):
    """Base class for every error raised by ``arraylegacy``."""


class ConfigurationError(ArrayLegacyError):
    """Raised when an entity's backing store is missing or is not a mapping.

    This is a programming error in a subclass, e.g. declaring
    ``default_attributes = None`` or forgetting to call ``super().__init__``.
    """


class ConfigValidationError(ConfigurationError):
    """Raised when settings fail validation."""


class UndefinedOperationError(ArrayLegacyError, AttributeError):
    """Raised when a dispatched name is neither an accessor nor a supported
    catalog operation.

    Subclasses :class:`AttributeError` so ``hasattr`` and ``getattr`` with a
    default keep their usual behaviour on entities.
    """

    def __init__(self, method: str) -> None:
        super().__init__(f'Undefined {method} method')
        self.method = method


class UnderlyingOperationError(ArrayLegacyError):
    """Raised when a catalog operation fails or emits a warning.

    The error is attributed to the call site that invoked the operation,
    not to the dispatcher.

    Attributes
    ----------
    operation : str
        Canonical name of the catalog operation.
    filename : str
        File of the calling frame.
    lineno : int
        Line of the calling frame.
    """

    def __init__(self, operation: str, cause: Any, filename: str, lineno: int) -> None:
        super().__init__(f'{operation}(): {cause} in {filename} on line {lineno}')
        self.operation = operation
        self.filename = filename
        self.lineno = lineno
