from logging import getLogger
from typing import Any, Mapping, Protocol, runtime_checkable

import cloudpickle as pickle  # pyright: ignore[reportMissingTypeStubs]

from arraylegacy.errors import ConfigurationError
from arraylegacy.settings import resolve_setting

logger = getLogger(__name__)


@runtime_checkable
class Arrayable(Protocol):
    def to_array(self) -> dict[Any, Any]: ...


def flatten(value: Any) -> Any:
    """Deep-copy ``value`` into plain dicts, lists and tuples.

    Nested entities are replaced by their own ``to_array()``. Cyclic
    structures are not detected and recurse until the interpreter's
    recursion limit is hit.
    """
    if isinstance(value, Arrayable):
        return value.to_array()
    if isinstance(value, Mapping):
        return {key: flatten(item) for key, item in value.items()}
    if isinstance(value, list):
        return [flatten(item) for item in value]
    if isinstance(value, tuple):
        return tuple(flatten(item) for item in value)
    return value


def dumps(store: dict[Any, Any]) -> bytes:
    payload = pickle.dumps(store, protocol=resolve_setting('pickle_protocol'))
    logger.debug('Serialized %d attribute(s) into %d bytes', len(store), len(payload))
    return payload


def loads(payload: bytes) -> dict[Any, Any]:
    store = pickle.loads(payload)
    if not isinstance(store, dict):
        raise ConfigurationError(f'Serialized payload holds {type(store).__name__}, not a mapping')
    return store
