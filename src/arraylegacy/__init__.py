"""arraylegacy: a mapping of named attributes with convention-based accessors
and a catalog of array operations reachable by name."""

from arraylegacy.catalog import (
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
    Operation,
    OperationKind,
)
from arraylegacy.container import ArrayLegacy
from arraylegacy.dispatch import CallSite, OperationResult
from arraylegacy.errors import (
    ArrayLegacyError,
    ConfigurationError,
    ConfigValidationError,
    UndefinedOperationError,
    UnderlyingOperationError,
)
from arraylegacy.settings import bind_settings, get_settings, load_settings_file, reset_settings

__all__ = [
    'ArrayLegacy',
    'ArrayLegacyError',
    'ConfigurationError',
    'ConfigValidationError',
    'UndefinedOperationError',
    'UnderlyingOperationError',
    'CallSite',
    'Operation',
    'OperationKind',
    'OperationResult',
    'bind_settings',
    'get_settings',
    'load_settings_file',
    'reset_settings',
    'ARRAY_FILTER_USE_BOTH',
    'ARRAY_FILTER_USE_KEY',
    'CASE_LOWER',
    'CASE_UPPER',
    'COUNT_NORMAL',
    'COUNT_RECURSIVE',
    'SORT_FLAG_CASE',
    'SORT_NATURAL',
    'SORT_NUMERIC',
    'SORT_REGULAR',
    'SORT_STRING',
]
