from typing import Any, Mapping

# Largest integer an IEEE-754 double (and so a JSON number) carries exactly.
MAX_SAFE_INTEGER = 2**53 - 1


class WideInt(int):
    """An integer decoded from a 64-bit (or wider) on-chain field."""


def stringify_wide_integers(value: Any) -> Any:
    """
    Returns a copy of ``value`` that is safe to encode as standard JSON.

    Walks mappings, lists and tuples recursively. Every ``WideInt`` and every
    other integer outside the safe double range becomes its decimal string.
    Booleans and small integers are left untouched.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, WideInt):
        return str(int(value))
    if isinstance(value, int):
        return str(value) if abs(value) > MAX_SAFE_INTEGER else value
    if isinstance(value, Mapping):
        return {key: stringify_wide_integers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_wide_integers(item) for item in value]
    return value
