# pyright: reportUnusedImport=false
from arraylegacy.catalog import mutating, read, search
from arraylegacy.catalog.constants import (
    ARRAY_FILTER_USE_BOTH,
    ARRAY_FILTER_USE_KEY,
    CASE_LOWER,
    CASE_UPPER,
    COUNT_NORMAL,
    COUNT_RECURSIVE,
    SORT_FLAG_CASE,
    SORT_NATURAL,
    SORT_NUMERIC,
    SORT_REGULAR,
    SORT_STRING,
)
from arraylegacy.catalog.decorator import operation, unsupported
from arraylegacy.catalog.registry import (
    Operation,
    OperationKind,
    all_registered,
    lookup,
    register,
    unregister,
)

# These need parameter shapes or scope side effects the dispatcher cannot express.
unsupported('array_combine', 'array_fill', 'array_fill_keys', 'range', 'list', 'extract', 'compact')
