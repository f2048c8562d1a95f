"""Name-based dispatch for entity methods that are not declared on the class.

A name resolves either to an attribute accessor (``getFooBar``/``setFooBar``)
or to a catalog operation. Catalog operations are invoked against the
entity's store with the argument order their kind requires, and any failure
is reported against the caller's own file and line.
"""

import inspect
import warnings
from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType
from typing import Any

from arraylegacy.catalog import Operation, OperationKind, lookup
from arraylegacy.errors import UndefinedOperationError, UnderlyingOperationError
from arraylegacy.naming import parse_accessor
from arraylegacy.settings import resolve_setting

logger = getLogger(__name__)

_ALIASES = {'in': 'in_array'}


@dataclass(frozen=True)
class CallSite:
    filename: str
    lineno: int

    @classmethod
    def capture(cls, depth: int = 1) -> 'CallSite':
        """Locate the frame ``depth`` levels above the function calling this."""
        frame = inspect.currentframe()
        try:
            for _ in range(depth + 1):
                if frame is None:
                    break
                frame = frame.f_back
            if frame is None:
                return cls('<unknown>', 0)
            return cls(frame.f_code.co_filename, frame.f_lineno)
        finally:
            del frame


@dataclass(frozen=True)
class Accessor:
    verb: str
    attribute: str


@dataclass(frozen=True)
class OperationResult:
    value: Any
    mutated: bool = False


def find_operation(method: str) -> Operation | None:
    if method in _ALIASES:
        return lookup(_ALIASES[method])
    return lookup(method) or lookup(f'array_{method}')


def resolve(method: str) -> Accessor | Operation:
    """Resolve ``method`` to an accessor or a supported catalog operation.

    Raises
    ------
    UndefinedOperationError
        When the name is private, unknown, or names an unsupported operation.
    """
    if method.startswith('_'):
        raise UndefinedOperationError(method)

    accessor = parse_accessor(method)
    if accessor is not None:
        return Accessor(*accessor)

    operation = find_operation(method)
    if operation is None or operation.kind is OperationKind.UNSUPPORTED:
        raise UndefinedOperationError(method)

    return operation


def invoke(
    operation: Operation, store: dict[Any, Any], args: tuple[Any, ...], site: CallSite
) -> OperationResult:
    """Run a catalog operation against ``store``.

    Mutating operations work on a copy which replaces the store's contents
    only after the handler succeeded, so a failed call leaves the store as
    it was.

    Raises
    ------
    UndefinedOperationError
        If ``operation`` has no handler.
    UnderlyingOperationError
        If the handler (or a callback it runs) raises, or emits a warning
        while ``warnings_as_errors`` is set. An ``UndefinedOperationError``
        raised by a callback propagates unchanged.
    """
    if operation.handler is None:
        raise UndefinedOperationError(operation.name)

    working = dict(store) if operation.kind is OperationKind.MUTATING else None
    target = working if working is not None else MappingProxyType(store)
    if operation.kind is OperationKind.NEEDLE_FIRST:
        call_args = (*args[:1], target, *args[1:])
    else:
        call_args = (target, *args)

    logger.debug(
        'Invoking %s (%s) from %s:%d', operation.name, operation.kind.value, site.filename, site.lineno
    )

    strict = resolve_setting('warnings_as_errors')
    with warnings.catch_warnings(record=not strict) as caught:
        warnings.simplefilter('error' if strict else 'always')
        try:
            value = operation.handler(*call_args)
        except UndefinedOperationError:
            raise
        except Exception as exc:
            logger.debug('%s failed: %s', operation.name, exc)
            raise UnderlyingOperationError(operation.name, exc, site.filename, site.lineno) from exc

    for warning in caught or ():
        warnings.warn_explicit(warning.message, warning.category, site.filename, site.lineno)

    mutated = working is not None and _changed(store, working)
    if mutated:
        store.clear()
        store.update(working)

    return OperationResult(value, mutated)


def _changed(before: dict[Any, Any], after: dict[Any, Any]) -> bool:
    if list(before) != list(after):
        return True
    return any(before[key] is not after[key] for key in after)
