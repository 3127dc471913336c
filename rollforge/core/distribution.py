"""
Exact distribution of single-die macros.

A macro made of one plain die plus a modifier is uniform, so its histogram
can be written down instead of sampled. Every other macro shape is left to
the simulator.
"""

import random

from rollforge.core.dice_parser import ParsedMacro, as_parsed
from rollforge.core.simulation import simulate_batch


def is_single_die(parsed: ParsedMacro) -> bool:
    """True for exactly one numeric die, e.g. '1d8', '-1d4+2' or 'd2+10'."""
    if len(parsed.terms) != 1:
        return False
    term = parsed.terms[0]
    return term.count == 1 and not term.face.is_fudge


def theoretical_distribution(
    macro: str | ParsedMacro,
    total_weight: float,
) -> dict[int, float]:
    """
    Spreads a weight evenly over every outcome of a single-die macro.

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.
        total_weight (float): The weight to distribute, usually a run count.

    Returns:
        dict[int, float]: Weight per total, or an empty dict when the macro is
        not a single numeric die.

    """
    parsed = as_parsed(macro)
    if not is_single_die(parsed):
        return {}
    term = parsed.terms[0]
    face = term.face
    weight = total_weight / face.face_count
    outcomes = sorted(
        term.sign * value + parsed.modifier for value in range(face.low, face.high + 1)
    )
    return {outcome: weight for outcome in outcomes}


def distribution_for(
    macro: str | ParsedMacro,
    runs: int,
    rng: random.Random | None = None,
) -> dict[int, float]:
    """
    Returns the histogram to chart for a macro.

    Uses the exact distribution when the macro is a single die and falls back
    to a batch simulation of `runs` rolls otherwise.
    """
    parsed = as_parsed(macro)
    histogram = theoretical_distribution(parsed, runs)
    if histogram:
        return histogram
    return dict(simulate_batch(parsed, runs, rng))
