from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List


class OperationKind(Enum):
    """How the dispatcher marshals arguments for an operation."""

    READ = 'read'
    NEEDLE_FIRST = 'needle-first'
    MUTATING = 'mutating'
    UNSUPPORTED = 'unsupported'


@dataclass(frozen=True)
class Operation:
    """A catalog entry.

    Attributes
    ----------
    name:
        Canonical operation name, e.g. ``array_filter`` or ``asort``.
    kind:
        Argument marshalling category. ``READ`` handlers receive a read-only
        view of the store first; ``NEEDLE_FIRST`` handlers receive the
        caller's first argument before the store; ``MUTATING`` handlers
        receive a working copy of the store which they change in place.
    handler:
        The implementation, or ``None`` for ``UNSUPPORTED`` entries.
    """

    name: str
    kind: OperationKind
    handler: Callable[..., Any] | None = None


_REGISTRY: dict[str, Operation] = {}


def register(entry: Operation, *, allow_override: bool = False) -> None:
    """Add ``entry`` to the catalog.

    Raises
    ------
    RuntimeError
        When ``allow_override`` is false and the name is already registered.
    """
    if not allow_override and entry.name in _REGISTRY:
        raise RuntimeError(f'Operation "{entry.name}" already registered.')

    _REGISTRY[entry.name] = entry


def unregister(name: str) -> None:
    _REGISTRY.pop(name, None)


def lookup(name: str) -> Operation | None:
    return _REGISTRY.get(name)


def all_registered() -> List[Operation]:
    """Return a copy of the catalog entries in registration order."""
    return list(_REGISTRY.values())
