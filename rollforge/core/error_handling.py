"""
Input coercion helpers.

Macros, face tags and trial counts arrive from prompts and command lines, so
these helpers log a warning and hand back a usable value instead of raising.
"""

from typing import Any, Optional

from catchery import log_warning


def _coerce_int(value: Any) -> Optional[int]:
    """Converts numbers and numeric strings to int, None when that fails."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return None
    return None


def ensure_string(
    value: Any,
    param_name: str,
    default: str = "",
    context: Optional[dict[str, Any]] = None,
) -> str:
    """
    Returns `value` as text, warning when it had to be converted.

    Args:
        value (Any): The raw input, usually a macro or a face tag.
        param_name (str): Name used in the warning.
        default (str): Text returned for None.
        context (Optional[dict[str, Any]]): Extra fields for the warning.

    Returns:
        str: The text to work with.

    """
    if isinstance(value, str):
        return value
    text = default if value is None else str(value)
    log_warning(
        f"Expected text for {param_name}, got {type(value).__name__}; using {text!r}",
        {**(context or {}), "param_name": param_name, "value": value},
    )
    return text


def ensure_int_in_range(
    value: Any,
    param_name: str,
    min_val: int,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """
    Returns `value` as an int clamped to [min_val, max_val].

    Floats are truncated and numeric strings are parsed. Anything else falls
    back to `default`, or to `min_val` when no default is given.

    Args:
        value (Any): The raw count.
        param_name (str): Name used in the warning.
        min_val (int): Smallest accepted value.
        max_val (Optional[int]): Largest accepted value, unbounded if None.
        default (Optional[int]): Value used when `value` is not numeric.
        context (Optional[dict[str, Any]]): Extra fields for the warning.

    Returns:
        int: A value inside the range.

    """
    number = _coerce_int(value)
    corrected = number if number is not None else (
        min_val if default is None else default
    )
    corrected = max(min_val, corrected)
    if max_val is not None:
        corrected = min(max_val, corrected)
    if corrected != value or isinstance(value, bool):
        bounds = f"[{min_val}, {'inf' if max_val is None else max_val}]"
        log_warning(
            f"{param_name} must be an integer in {bounds}, got {value!r}; using {corrected}",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
                "corrected_to": corrected,
            },
        )
    return corrected
