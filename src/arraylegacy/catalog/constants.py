"""Flag values accepted by catalog operations."""

SORT_REGULAR = 0
SORT_NUMERIC = 1
SORT_STRING = 2
SORT_NATURAL = 6
SORT_FLAG_CASE = 8

COUNT_NORMAL = 0
COUNT_RECURSIVE = 1

ARRAY_FILTER_USE_BOTH = 1
ARRAY_FILTER_USE_KEY = 2

CASE_LOWER = 0
CASE_UPPER = 1
