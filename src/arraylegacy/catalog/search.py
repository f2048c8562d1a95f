"""Operations whose first argument is a needle or callback rather than the store."""

from typing import Any, Callable, Mapping

from arraylegacy.catalog.decorator import operation
from arraylegacy.catalog.registry import OperationKind
from arraylegacy.catalog.values import Key, as_dict, equality, normalize_key

NEEDLE_FIRST = OperationKind.NEEDLE_FIRST


@operation('in_array', kind=NEEDLE_FIRST)
def in_array(needle: Any, haystack: Mapping[Key, Any], strict: bool = False) -> bool:
    equals = equality(strict)
    return any(equals(value, needle) for value in haystack.values())


@operation('array_search', kind=NEEDLE_FIRST)
def search(needle: Any, haystack: Mapping[Key, Any], strict: bool = False) -> Key | bool:
    """Return the first key holding ``needle``, or ``False``."""
    equals = equality(strict)
    for key, value in haystack.items():
        if equals(value, needle):
            return key
    return False


@operation('array_key_exists', 'key_exists', kind=NEEDLE_FIRST)
def key_exists(key: Any, array: Mapping[Key, Any]) -> bool:
    return normalize_key(key) in array


@operation('array_map', kind=NEEDLE_FIRST)
def map_values(
    callback: Callable[..., Any] | None, array: Mapping[Key, Any], *arrays: Any
) -> dict[Key, Any] | list[Any]:
    """Apply ``callback`` to every value.

    With a single array the keys are kept. With several arrays the values are
    zipped positionally, shorter arrays padded with ``None``, and the result
    is a list; a ``None`` callback then yields the zipped rows themselves.
    """
    if not arrays:
        if callback is None:
            return dict(array)
        return {key: callback(value) for key, value in array.items()}

    columns = [list(array.values())]
    columns.extend(list(as_dict(other, position).values()) for position, other in enumerate(arrays, start=3))
    width = max(len(column) for column in columns)
    rows = [[column[index] if index < len(column) else None for column in columns] for index in range(width)]

    if callback is None:
        return rows
    return [callback(*row) for row in rows]
