"""
Console output helpers and the singleton metaclass.
"""

from __future__ import annotations

from typing import Any, Generic

from rich.console import Console
from rich.rule import Rule
from typing_extensions import TypeVar

# Shared stdout console for sheets, tables and prompts.
_console = Console(markup=True, width=120)

# Glyphs for the filled and empty part of a histogram bar.
BAR_FULL = "█"
BAR_EMPTY = "░"


def cprint(*args: Any, **kwargs: Any) -> None:
    """Prints rich markup or renderables on the shared console."""
    _console.print(*args, **kwargs)


def crule(title: str = "", **kwargs: Any) -> None:
    """
    Prints a horizontal rule across the shared console.

    Args:
        title (str): Text centred on the rule.
        **kwargs: Forwarded to rich's Rule, e.g. style.

    """
    _console.print(Rule(title, **kwargs))


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """Metaclass keeping one instance per class."""

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        instance = cls._instances.get(cls)
        if instance is None:
            instance = super().__call__(*args, **kwargs)
            cls._instances[cls] = instance
        return instance


def make_bar(value: float, peak: float, width: int = 10, color: str = "white") -> str:
    """
    Draws `value` as a bar scaled so that `peak` fills `width` cells.

    Args:
        value (float): The quantity to draw, e.g. a roll frequency.
        peak (float): The quantity drawn as a full bar.
        width (int): Number of cells in a full bar.
        color (str): Rich color of the filled cells.

    Returns:
        str: Rich markup for the bar, empty cells dimmed.

    """
    filled = 0 if peak <= 0 else round(value / peak * width)
    filled = max(0, min(width, filled))
    return f"[{color}]{BAR_FULL * filled}[/][dim]{BAR_EMPTY * (width - filled)}[/]"
