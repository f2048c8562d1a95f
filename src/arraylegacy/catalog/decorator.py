from typing import Any, Callable, TypeAlias, overload

from arraylegacy.catalog.registry import Operation, OperationKind, register

Handler: TypeAlias = Callable[..., Any]


@overload
def operation(*names: str, kind: OperationKind = OperationKind.READ) -> Callable[[Handler], Handler]: ...
@overload
def operation(func: Handler, /) -> Handler: ...


def operation(*names: Any, kind: OperationKind = OperationKind.READ) -> Any:
    """Register the decorated function as a catalog operation.

    Used bare (``@operation``) the function name becomes the operation name.
    Otherwise every positional name is registered against the same handler,
    which is how aliases such as ``count``/``sizeof`` are declared.

    The function itself is returned unchanged so handlers stay callable and
    testable without going through the dispatcher.
    """
    if len(names) == 1 and callable(names[0]):
        func = names[0]
        register(Operation(func.__name__, kind, func))
        return func

    def decorator(func: Handler) -> Handler:
        for name in names or (func.__name__,):
            register(Operation(name, kind, func))
        return func

    return decorator


def unsupported(*names: str) -> None:
    """Register names which must be rejected instead of dispatched."""
    for name in names:
        register(Operation(name, OperationKind.UNSUPPORTED))
