"""Operations which change the store in place.

Handlers receive a working copy of the store and mutate it; the dispatcher
commits the copy once the handler returns.
"""

import random
from functools import cmp_to_key
from typing import Any, Callable, Iterable, TypeAlias

from arraylegacy.catalog.constants import SORT_FLAG_CASE, SORT_NATURAL, SORT_REGULAR
from arraylegacy.catalog.decorator import operation
from arraylegacy.catalog.registry import OperationKind
from arraylegacy.catalog.values import Key, as_dict, comparator, is_array, next_index, renumber, sort_key

MUTATING = OperationKind.MUTATING

Store: TypeAlias = dict[Key, Any]


def _replace(array: Store, items: Iterable[tuple[Key, Any]]) -> None:
    items = list(items)
    array.clear()
    array.update(items)


# Sorting


@operation('sort', kind=MUTATING)
def sort(array: Store, flags: int = SORT_REGULAR) -> bool:
    _replace(array, enumerate(sorted(array.values(), key=sort_key(flags))))
    return True


@operation('rsort', kind=MUTATING)
def rsort(array: Store, flags: int = SORT_REGULAR) -> bool:
    _replace(array, enumerate(sorted(array.values(), key=sort_key(flags), reverse=True)))
    return True


@operation('usort', kind=MUTATING)
def usort(array: Store, callback: Callable[[Any, Any], Any]) -> bool:
    _replace(array, enumerate(sorted(array.values(), key=cmp_to_key(comparator(callback)))))
    return True


@operation('asort', kind=MUTATING)
def asort(array: Store, flags: int = SORT_REGULAR) -> bool:
    key = sort_key(flags)
    _replace(array, sorted(array.items(), key=lambda item: key(item[1])))
    return True


@operation('arsort', kind=MUTATING)
def arsort(array: Store, flags: int = SORT_REGULAR) -> bool:
    key = sort_key(flags)
    _replace(array, sorted(array.items(), key=lambda item: key(item[1]), reverse=True))
    return True


@operation('uasort', kind=MUTATING)
def uasort(array: Store, callback: Callable[[Any, Any], Any]) -> bool:
    compare = comparator(callback)
    _replace(array, sorted(array.items(), key=cmp_to_key(lambda left, right: compare(left[1], right[1]))))
    return True


@operation('ksort', kind=MUTATING)
def ksort(array: Store, flags: int = SORT_REGULAR) -> bool:
    key = sort_key(flags)
    _replace(array, sorted(array.items(), key=lambda item: key(item[0])))
    return True


@operation('krsort', kind=MUTATING)
def krsort(array: Store, flags: int = SORT_REGULAR) -> bool:
    key = sort_key(flags)
    _replace(array, sorted(array.items(), key=lambda item: key(item[0]), reverse=True))
    return True


@operation('uksort', kind=MUTATING)
def uksort(array: Store, callback: Callable[[Any, Any], Any]) -> bool:
    compare = comparator(callback)
    _replace(array, sorted(array.items(), key=cmp_to_key(lambda left, right: compare(left[0], right[0]))))
    return True


@operation('natsort', kind=MUTATING)
def natsort(array: Store) -> bool:
    return asort(array, SORT_NATURAL)


@operation('natcasesort', kind=MUTATING)
def natcasesort(array: Store) -> bool:
    return asort(array, SORT_NATURAL | SORT_FLAG_CASE)


@operation('shuffle', kind=MUTATING)
def shuffle(array: Store) -> bool:
    values = list(array.values())
    random.shuffle(values)
    _replace(array, enumerate(values))
    return True


# Stack and queue operations


@operation('array_push', kind=MUTATING)
def push(array: Store, *values: Any) -> int:
    for value in values:
        array[next_index(array)] = value
    return len(array)


@operation('array_pop', kind=MUTATING)
def pop(array: Store) -> Any:
    if not array:
        return None
    return array.pop(list(array)[-1])


@operation('array_shift', kind=MUTATING)
def shift(array: Store) -> Any:
    if not array:
        return None
    value = array.pop(next(iter(array)))
    _replace(array, renumber(array.items()).items())
    return value


@operation('array_unshift', kind=MUTATING)
def unshift(array: Store, *values: Any) -> int:
    _replace(array, renumber([*((0, value) for value in values), *array.items()]).items())
    return len(array)


@operation('array_splice', kind=MUTATING)
def splice(array: Store, offset: int, length: int | None = None, replacement: Any = ()) -> list[Any]:
    """Remove a slice of entries, insert ``replacement`` in its place and
    return the removed values. Integer keys are renumbered afterwards.

    A scalar ``replacement`` is inserted as one entry; ``None`` inserts nothing.
    """
    items = list(array.items())
    size = len(items)
    start = min(offset, size) if offset >= 0 else max(size + offset, 0)

    if length is None:
        stop = size
    elif length < 0:
        stop = max(size + length, start)
    else:
        stop = min(start + length, size)

    inserted: Iterable[Any] = ()
    if is_array(replacement):
        inserted = as_dict(replacement).values()
    elif replacement is not None:
        inserted = [replacement]
    removed = [value for _, value in items[start:stop]]
    _replace(array, renumber([*items[:start], *((0, value) for value in inserted), *items[stop:]]).items())
    return removed
