"""
Roll simulator for dice macros.

Provides single rolls with a per-die breakdown and batch simulations that
tally totals into a histogram. Every function accepts an optional
random.Random so tests and callers can seed their own source; without one
the process-wide generator of the random module is used.
"""

import random
from collections import Counter
from typing import Literal

from pydantic import BaseModel, Field

from rollforge.core.constants import MAX_TRIALS
from rollforge.core.dice_parser import DiceFace, ParsedMacro, as_parsed
from rollforge.core.error_handling import ensure_int_in_range
from rollforge.core.logging import log_debug


class DieResult(BaseModel):
    """The value rolled by one die, kept unsigned with its term's sign."""

    face: DiceFace = Field(description="Face type of the die")
    value: int = Field(description="Value shown by the die")
    sign: Literal[1, -1] = Field(default=1, description="Sign of the enclosing term")

    @property
    def signed_value(self) -> int:
        return self.sign * self.value


class SimulationOutcome(BaseModel):
    """Class to hold the result of one simulated roll."""

    total: int = Field(description="Total roll result, modifier included")
    rolls: list[DieResult] = Field(
        default_factory=list,
        description="Individual dice results in macro order",
    )
    modifier: int = Field(default=0, description="Flat modifier added to the dice")

    def describe(self) -> str:
        """
        Describes the roll die by die, e.g. '1d6(4) - 1d4(2) + 3'.

        Returns:
            str: The breakdown of the roll.

        """
        signed = [(roll.sign, f"1{roll.face.tag}({roll.value})") for roll in self.rolls]
        if self.modifier:
            signed.append((1 if self.modifier > 0 else -1, str(abs(self.modifier))))
        if not signed:
            return str(self.modifier)
        first_sign, first_text = signed[0]
        text = first_text if first_sign > 0 else f"-{first_text}"
        for sign, part in signed[1:]:
            text += f" {'+' if sign > 0 else '-'} {part}"
        return text


def roll_face(face: DiceFace, rng: random.Random | None = None) -> int:
    """
    Rolls one die uniformly over its face values.

    Args:
        face (DiceFace): The face to roll.
        rng (random.Random | None): The random source, the global one if None.

    Returns:
        int: -1..1 for Fudge dice, 0..1 for d2, 1..n otherwise.

    """
    source = rng or random
    return source.randint(face.low, face.high)


def simulate_once(
    macro: str | ParsedMacro,
    rng: random.Random | None = None,
) -> SimulationOutcome:
    """
    Rolls every die of a macro once.

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.
        rng (random.Random | None): The random source, the global one if None.

    Returns:
        SimulationOutcome: The total and the per-die breakdown.

    """
    parsed = as_parsed(macro)
    total = parsed.modifier
    rolls: list[DieResult] = []
    for term in parsed.terms:
        for _ in range(term.count):
            value = roll_face(term.face, rng)
            rolls.append(DieResult(face=term.face, value=value, sign=term.sign))
            total += term.sign * value
    return SimulationOutcome(total=total, rolls=rolls, modifier=parsed.modifier)


def _roll_total(parsed: ParsedMacro, rng: random.Random | None) -> int:
    total = parsed.modifier
    for term in parsed.terms:
        for _ in range(term.count):
            total += term.sign * roll_face(term.face, rng)
    return total


def simulate_batch(
    macro: str | ParsedMacro,
    trials: int,
    rng: random.Random | None = None,
) -> dict[int, int]:
    """
    Simulates a macro many times and counts how often each total occurs.

    Each trial is an independent roll of the whole macro. The trial count is
    clamped to [0, MAX_TRIALS].

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.
        trials (int): The number of rolls to simulate.
        rng (random.Random | None): The random source, the global one if None.

    Returns:
        dict[int, int]: Occurrences of each total, sorted by total.

    """
    trials = ensure_int_in_range(trials, "trials", 0, MAX_TRIALS)
    parsed = as_parsed(macro)
    # Skip the breakdown models, batches only need totals.
    counts = Counter(_roll_total(parsed, rng) for _ in range(trials))
    log_debug(
        f"Simulated {trials} rolls of '{parsed}'",
        {"macro": str(parsed), "trials": trials, "outcomes": len(counts)},
    )
    return dict(sorted(counts.items()))


def chart_data(histogram: dict[int, float]) -> list[tuple[int, float]]:
    """
    Converts a histogram into (roll, frequency) points sorted by roll.

    Args:
        histogram (dict[int, float]): Occurrences or weights per total.

    Returns:
        list[tuple[int, float]]: The points, ready for charting.

    """
    return sorted((int(roll), frequency) for roll, frequency in histogram.items())
