"""
Transformation option handling.

Options are positional lists whose meaning is fixed per plugin. They are
usually stored as a single comma separated string such as ``0,'',1,1``
and compared loosely, so ``1``, ``'1'`` and ``True`` are interchangeable.
"""

import csv
from typing import Any, List, Optional, Sequence


def parse_option_string(option_string: Optional[str]) -> List[str]:
    """
    Split a stored option string into positional values.

    Values are separated by commas. A value wrapped in single quotes may
    contain commas; a backslash escapes a quote inside it.

    Args:
        option_string: Raw option string, e.g. ``0,'-i -q',1,1``

    Returns:
        List of option values as strings (empty list for empty input)
    """
    if not option_string:
        return []

    reader = csv.reader(
        [option_string],
        delimiter=",",
        quotechar="'",
        escapechar="\\",
        skipinitialspace=True,
    )
    return next(reader, [])


def option_at(options: Optional[Sequence[Any]], index: int) -> Any:
    """Return the option at ``index`` or None when it is not set."""
    if not options or index >= len(options):
        return None
    return options[index]


def is_unset(value: Any) -> bool:
    """An option counts as unset when it is missing or an empty string."""
    return value is None or value == ""


def get_options(options: Optional[Sequence[Any]], defaults: Sequence[Any]) -> List[Any]:
    """
    Merge caller options over defaults.

    Every position of ``defaults`` is resolved: the caller's value wins
    unless it is unset, in which case the default is used. Positions beyond
    the defaults are dropped.
    """
    merged = []
    for index, default in enumerate(defaults):
        value = option_at(options, index)
        merged.append(default if is_unset(value) else value)
    return merged


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def loose_equals(value: Any, target: Any) -> bool:
    """
    Compare an option value the way stored options are meant to be compared.

    Numbers and numeric strings compare by value (``'1' == 1``); anything
    else compares as text. Unset values never match.
    """
    if is_unset(value):
        return False

    value_number = _as_number(value)
    target_number = _as_number(target)
    if value_number is not None and target_number is not None:
        return value_number == target_number

    return str(value) == str(target)
