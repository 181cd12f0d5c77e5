import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from django_ipn_fixer.constants import MAX_OBJECT_ID

logger = logging.getLogger(__name__)

NUMERIC_STRING_RE = re.compile(
    r"\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*", re.ASCII
)


def is_numeric_like(value: Any) -> bool:
    """
    True for ints (not bools), finite floats and Decimals, and strings holding
    an optionally signed integer or decimal number, with an optional exponent.
    Only ASCII digits count.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, (float, Decimal)):
        try:
            return Decimal(value).is_finite()
        except (InvalidOperation, ValueError):
            return False
    if isinstance(value, str):
        return NUMERIC_STRING_RE.fullmatch(value) is not None
    return False


def absint(value: Any) -> int:
    """
    Convert a value to a non-negative integer id.

    Numeric-looking values are truncated toward zero and clamped into
    [0, MAX_OBJECT_ID]. Anything else converts to 0.

    Returns:
        int within the primary key range
    """
    if not is_numeric_like(value):
        return 0

    if isinstance(value, int):
        number = value
    else:
        number = Decimal(str(value).strip())
        # exponent strings can be far too large to convert before clamping
        if number <= 0:
            return 0
        if number >= MAX_OBJECT_ID:
            return MAX_OBJECT_ID
        number = int(number)

    return min(max(number, 0), MAX_OBJECT_ID)


class CorrectionFlagCoercion:
    """
    Read-time normalization of the correction flag.

    Numeric-looking values (including numeric strings) come back as the
    canonical integer; anything else, including "" and None, passes through
    untouched so an unset flag never reads as 0.
    """

    def __call__(self, value: Any) -> Any:
        if is_numeric_like(value):
            return absint(value)
        return value


class MetaReadFilters:
    """
    Registry of read filters keyed by meta key.

    Every read path for subscription meta calls ``apply`` so a filter
    registered once covers all of them.
    """

    def __init__(self):
        self._filters: dict[str, Callable[[Any], Any]] = {}

    def register(self, key: str, read_filter: Callable[[Any], Any]) -> None:
        self._filters[key] = read_filter
        logger.debug("[django-ipn-fixer] Registered meta read filter for %s", key)

    def unregister(self, key: str) -> None:
        self._filters.pop(key, None)

    def is_registered(self, key: str) -> bool:
        return key in self._filters

    def apply(self, key: str, value: Any) -> Any:
        read_filter = self._filters.get(key)
        if read_filter is None:
            return value
        return read_filter(value)


meta_read_filters = MetaReadFilters()
