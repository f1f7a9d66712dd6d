"""
OData query translation.

Turns ``QueryOptions`` into ordered ``(name, value)`` query pairs. Raw filter
strings get a purely textual operator rewrite: every ``=`` becomes ``" eq "``,
``>`` becomes ``" gt "`` and ``<`` becomes ``" lt "``. The rewrite is not
quote-aware, so ``NAME='a=b'`` turns into ``NAME eq 'a eq b'``. Use ``Filter``
for values containing those characters.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .models import QueryOptions

logger = logging.getLogger(__name__)

OPERATOR_REWRITES = (
    ("=", " eq "),
    (">", " gt "),
    ("<", " lt "),
)

FILTER_OPERATORS = ("eq", "ne", "gt", "ge", "lt", "le")


def rewrite_filter(expression: str) -> str:
    """
    Rewrite the comparison operators of a raw filter expression.

    Args:
        expression: Raw expression such as "FIRST_NAME='Brian'"

    Returns:
        The expression in OData form, e.g. "FIRST_NAME eq 'Brian'"
    """
    result = expression
    for symbol, keyword in OPERATOR_REWRITES:
        result = result.replace(symbol, keyword)
    return result


def format_literal(value: Any) -> str:
    """Format a Python value as an OData literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


@dataclass(frozen=True)
class Filter:
    """
    A structured comparison, rendered as valid OData and never rewritten.

    Example:
        >>> Filter.eq("LAST_NAME", "O'Brien").render()
        "LAST_NAME eq 'O''Brien'"
    """
    field: str
    operator: str
    value: Any

    def __post_init__(self):
        if self.operator not in FILTER_OPERATORS:
            raise ValueError(
                f"Unsupported filter operator '{self.operator}'. "
                f"Must be one of: {', '.join(FILTER_OPERATORS)}"
            )

    def render(self) -> str:
        return f"{self.field} {self.operator} {format_literal(self.value)}"

    @classmethod
    def eq(cls, field: str, value: Any) -> "Filter":
        return cls(field, "eq", value)

    @classmethod
    def ne(cls, field: str, value: Any) -> "Filter":
        return cls(field, "ne", value)

    @classmethod
    def gt(cls, field: str, value: Any) -> "Filter":
        return cls(field, "gt", value)

    @classmethod
    def ge(cls, field: str, value: Any) -> "Filter":
        return cls(field, "ge", value)

    @classmethod
    def lt(cls, field: str, value: Any) -> "Filter":
        return cls(field, "lt", value)

    @classmethod
    def le(cls, field: str, value: Any) -> "Filter":
        return cls(field, "le", value)


def build_odata_params(
    options: QueryOptions | Mapping[str, Any] | None,
) -> list[tuple[str, str]]:
    """
    Translate query options into OData query pairs.

    Pairs come out in the order $top, $skip, $orderby, then one $filter per
    filter. Filters are not combined with "and".

    Args:
        options: QueryOptions, a dict with top/skip/orderby/filters keys, or None

    Returns:
        Ordered list of (name, value) pairs; empty when no option is set
    """
    options = QueryOptions.from_value(options)
    params: list[tuple[str, str]] = []

    if options.top is not None:
        params.append(("$top", str(options.top)))
    if options.skip is not None:
        params.append(("$skip", str(options.skip)))
    if options.orderby:
        params.append(("$orderby", options.orderby))

    for item in options.filters or []:
        if isinstance(item, Filter):
            value = item.render()
        else:
            if not item:
                continue
            value = rewrite_filter(str(item))
        params.append(("$filter", value))

    if params:
        logger.debug(f"OData params: {params}")
    return params
