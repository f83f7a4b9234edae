"""Field presence predicate used for requirement checks.

A value that was actively set counts as provided, even when it is a falsy
primitive: ``0``, ``False`` and ``""`` are all present. Only ``None`` (an
explicitly cleared field, or a field that is not loaded) is absent.

Lifecycles whose forms default text inputs to ``""`` can opt into the
stricter rule with ``treat_empty_string_as_absent``. The rule only widens
"absent" to the empty string; ``0`` and ``False`` stay present.

Examples:
    >>> is_present(0), is_present(False), is_present("")
    (True, True, True)
    >>> is_present("", treat_empty_string_as_absent=True)
    False
    >>> is_present(0, treat_empty_string_as_absent=True)
    True
    >>> is_present(None)
    False
"""

from typing import Any


def is_present(value: Any, treat_empty_string_as_absent: bool = False) -> bool:
    """Return True if ``value`` counts as provided."""
    if value is None:
        return False
    if treat_empty_string_as_absent and isinstance(value, str) and value == "":
        return False
    return True


__all__ = ["is_present"]
