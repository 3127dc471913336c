"""
Exact statistics of a dice macro.

Every value is derived from the face ranges, without sampling.
"""

from pydantic import BaseModel, Field

from rollforge.core.dice_parser import DiceTerm, ParsedMacro, as_parsed


class RollStats(BaseModel):
    """Minimum, maximum and average total of a macro."""

    min: int = Field(description="Smallest possible total")
    max: int = Field(description="Largest possible total")
    average: float = Field(description="Expected total")

    @property
    def span(self) -> int:
        return self.max - self.min


def term_range(term: DiceTerm) -> tuple[int, int]:
    """
    Returns the contribution of a term to the [min, max] range of a macro.

    A positive term adds [count * low, count * high]; a negative term adds
    [-count * high, -count * low], so d2 terms add [0, c] or [-c, 0] and
    Fudge terms add [-c, c] whatever their sign.

    Args:
        term (DiceTerm): The term to evaluate.

    Returns:
        tuple[int, int]: The minimum and maximum contribution.

    """
    low = term.count * term.face.low
    high = term.count * term.face.high
    if term.sign > 0:
        return low, high
    return -high, -low


def term_average(term: DiceTerm) -> float:
    return term.sign * term.count * term.face.mean


def compute_stats(macro: str | ParsedMacro) -> RollStats:
    """
    Computes the exact minimum, maximum and average of a macro.

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.

    Returns:
        RollStats: The statistics, modifier included.

    """
    parsed = as_parsed(macro)
    low = high = parsed.modifier
    average = float(parsed.modifier)
    for term in parsed.terms:
        term_low, term_high = term_range(term)
        low += term_low
        high += term_high
        average += term_average(term)
    return RollStats(min=low, max=high, average=average)
