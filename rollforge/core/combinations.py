"""
Combination scorer and fallback generator.

Searches dice combinations whose [min, max] range fits a requested target
range, and scores any combination by how well it fits and how bell-shaped
its distribution is. The search is heuristic: it proposes single dice, pairs
of dice and span-matching groups centred on the target average, then nudges
them with d2 and Fudge dice when those faces are available.
"""

import math
from collections.abc import Callable, Iterable

from catchery import log_warning
from pydantic import BaseModel, Field

from rollforge.core.constants import (
    BELL_THRESHOLD,
    CLOSE_FIT_SCORE,
    D2_MAX_EXTENSION,
    DEFAULT_MAX_CANDIDATES,
    DISTRIBUTION_DICE_WEIGHT,
    DISTRIBUTION_LARGE_FACE_PENALTIES,
    DISTRIBUTION_SCORE_MAX,
    DISTRIBUTION_VARIETY_BONUS,
    MAX_SPAN_DICE,
    SOMEWHAT_BELL_THRESHOLD,
    DistributionLabel,
    FitLabel,
)
from rollforge.core.dice_parser import (
    DiceFace,
    DiceTerm,
    ParsedMacro,
    as_parsed,
    format_macro,
    parse_face,
)
from rollforge.core.error_handling import ensure_int_in_range
from rollforge.core.logging import log_debug
from rollforge.core.statistics import RollStats, compute_stats

# Signature of an external generator: (target_min, target_max, face tags) -> macros.
SuggestFn = Callable[[int, int, list[str]], Iterable[str]]


class CombinationCandidate(BaseModel):
    """A scored dice combination."""

    macro: str = Field(description="Normalized dice macro")
    min: int = Field(description="Smallest possible total")
    max: int = Field(description="Largest possible total")
    average: float = Field(description="Expected total")
    fit_score: float = Field(ge=0.0, le=100.0, description="Fit to the target range")
    fit_label: FitLabel = Field(description="How the range relates to the target")
    distribution_score: float = Field(
        ge=0.0,
        le=DISTRIBUTION_SCORE_MAX,
        description="Approximate peakedness, 0 is flat",
    )
    distribution_label: DistributionLabel = Field(
        description="Approximate distribution shape"
    )

    @property
    def stats(self) -> RollStats:
        return RollStats(min=self.min, max=self.max, average=self.average)


# ---- Scoring ----
def fit_score(stats: RollStats, target_min: int, target_max: int) -> float:
    """
    Scores how closely a range matches the target range, from 0 to 100.

    The deviation of both ends is measured against the width of the target;
    a zero-width target counts as width 1, so only an exact match scores 100.

    Args:
        stats (RollStats): The statistics of the candidate.
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.

    Returns:
        float: The fit score.

    """
    deviation = abs(target_min - stats.min) + abs(target_max - stats.max)
    span = max(target_max - target_min, 1)
    return max(0.0, min(100.0, (1 - deviation / span) * 100))


def fit_label(
    stats: RollStats,
    target_min: int,
    target_max: int,
    score: float | None = None,
) -> FitLabel:
    """
    Classifies a range against the target range.

    Args:
        stats (RollStats): The statistics of the candidate.
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.
        score (float | None): The fit score, computed if not given.

    Returns:
        FitLabel: The first label that applies, from PERFECT to NO_OVERLAP.

    """
    if score is None:
        score = fit_score(stats, target_min, target_max)
    if stats.min == target_min and stats.max == target_max:
        return FitLabel.PERFECT
    if score >= CLOSE_FIT_SCORE:
        return FitLabel.CLOSE
    if stats.min >= target_min and stats.max <= target_max:
        return FitLabel.CONTAINED
    if stats.min <= target_min and stats.max >= target_max:
        return FitLabel.WIDER
    if stats.min < target_min and stats.max >= target_min:
        return FitLabel.EXCEEDS_LOW
    if stats.max > target_max and stats.min <= target_max:
        return FitLabel.EXCEEDS_HIGH
    return FitLabel.NO_OVERLAP


def distribution_score(macro: str | ParsedMacro) -> float:
    """
    Estimates how bell-shaped the distribution of a macro is.

    A heuristic, not a statistical measure: each die past the first adds
    DISTRIBUTION_DICE_WEIGHT, each distinct face past the first adds
    DISTRIBUTION_VARIETY_BONUS, and large faces (which flatten the sum)
    subtract a penalty. The result is clamped to [0, DISTRIBUTION_SCORE_MAX].

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.

    Returns:
        float: 0 for a single die, growing with the number of dice.

    """
    parsed = as_parsed(macro)
    dice = parsed.dice_count
    if dice <= 1:
        return 0.0
    distinct_faces = len({term.face for term in parsed.terms})
    mean_faces = sum(term.count * term.face.face_count for term in parsed.terms) / dice
    score = (dice - 1) * DISTRIBUTION_DICE_WEIGHT
    score += (distinct_faces - 1) * DISTRIBUTION_VARIETY_BONUS
    for threshold, penalty in DISTRIBUTION_LARGE_FACE_PENALTIES:
        if mean_faces >= threshold:
            score -= penalty
            break
    return round(max(0.0, min(DISTRIBUTION_SCORE_MAX, score)), 4)


def distribution_label(score: float) -> DistributionLabel:
    if score > BELL_THRESHOLD:
        return DistributionLabel.BELL
    if score > SOMEWHAT_BELL_THRESHOLD:
        return DistributionLabel.SOMEWHAT_BELL
    return DistributionLabel.FLAT


def score_candidate(
    macro: str | ParsedMacro,
    target_min: int,
    target_max: int,
) -> CombinationCandidate:
    """
    Computes the exact statistics of a macro and scores it against a target.

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.

    Returns:
        CombinationCandidate: The scored candidate.

    """
    parsed = as_parsed(macro)
    stats = compute_stats(parsed)
    score = fit_score(stats, target_min, target_max)
    shape = distribution_score(parsed)
    return CombinationCandidate(
        macro=format_macro(parsed),
        min=stats.min,
        max=stats.max,
        average=stats.average,
        fit_score=score,
        fit_label=fit_label(stats, target_min, target_max, score),
        distribution_score=shape,
        distribution_label=distribution_label(shape),
    )


def rank_candidates(
    macros: Iterable[str | ParsedMacro],
    target_min: int,
    target_max: int,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> list[CombinationCandidate]:
    """
    Scores, deduplicates and sorts a set of macros.

    Macros are compared on their normalized notation. The best fit comes
    first; ties prefer the flatter, simpler distribution.

    Args:
        macros (Iterable[str | ParsedMacro]): The macros to rank.
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.
        max_candidates (int): The number of candidates to keep.

    Returns:
        list[CombinationCandidate]: At most `max_candidates` candidates.

    """
    max_candidates = ensure_int_in_range(max_candidates, "max_candidates", 1)
    unique: dict[str, CombinationCandidate] = {}
    for macro in macros:
        candidate = score_candidate(macro, target_min, target_max)
        unique.setdefault(candidate.macro, candidate)
    ranked = sorted(
        unique.values(),
        key=lambda c: (-c.fit_score, c.distribution_score, c.macro),
    )
    return ranked[:max_candidates]


# ---- Search ----
def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _centered(faces: list[DiceFace], target_average: float) -> ParsedMacro:
    """One die of each face plus the modifier centring the average on the target."""
    terms: list[DiceTerm] = []
    for face in faces:
        if terms and terms[-1].face == face:
            terms[-1] = DiceTerm(count=terms[-1].count + 1, face=face)
        else:
            terms.append(DiceTerm(count=1, face=face))
    dice_average = sum(face.mean for face in faces)
    return ParsedMacro(
        terms=terms, modifier=round_half_up(target_average - dice_average)
    )


def _span_matched(face: DiceFace, target_min: int, target_max: int) -> ParsedMacro | None:
    """As many dice of one face as needed to cover the target width."""
    if face.face_count < 2:
        return None
    step = face.high - face.low
    count = round_half_up((target_max - target_min) / step)
    count = max(1, min(MAX_SPAN_DICE, count))
    return ParsedMacro(
        terms=[DiceTerm(count=count, face=face)],
        modifier=target_min - count * face.low,
    )


def _extended(parsed: ParsedMacro, face: DiceFace, count: int, sign: int) -> ParsedMacro:
    return ParsedMacro(
        terms=[*parsed.terms, DiceTerm(count=count, face=face, sign=sign)],
        modifier=parsed.modifier,
    )


def _resolve_faces(available_faces: Iterable[str | int | DiceFace]) -> list[DiceFace]:
    faces: list[DiceFace] = []
    for tag in available_faces:
        face = parse_face(tag)
        if face is not None and face not in faces:
            faces.append(face)
    return sorted(faces, key=lambda f: (f.is_fudge, f.sides or 0))


def propose_combinations(
    target_min: int,
    target_max: int,
    faces: list[DiceFace],
) -> list[ParsedMacro]:
    """
    Proposes macros that aim at the target range using the given faces.

    Args:
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.
        faces (list[DiceFace]): The faces that may be used.

    Returns:
        list[ParsedMacro]: The proposals, possibly with duplicates.

    """
    target_average = (target_min + target_max) / 2
    numeric = [face for face in faces if not face.is_fudge and not face.is_binary]
    binary = next((face for face in faces if face.is_binary), None)
    fudge = next((face for face in faces if face.is_fudge), None)

    proposals: list[ParsedMacro] = []
    for face in numeric:
        proposals.append(_centered([face], target_average))
    for i, first in enumerate(numeric):
        for second in numeric[i:]:
            proposals.append(_centered([first, second], target_average))
    for face in numeric:
        matched = _span_matched(face, target_min, target_max)
        if matched is not None:
            proposals.append(matched)

    # d2 dice raise the max without moving the min, or lower the min alone.
    if binary is not None:
        for parsed in list(proposals):
            stats = compute_stats(parsed)
            high_gap = target_max - stats.max
            if 0 < high_gap <= D2_MAX_EXTENSION:
                proposals.append(_extended(parsed, binary, high_gap, 1))
            low_gap = stats.min - target_min
            if 0 < low_gap <= D2_MAX_EXTENSION:
                proposals.append(_extended(parsed, binary, low_gap, -1))

    # Fudge dice widen a range that sits inside the target on both sides.
    if fudge is not None:
        for parsed in list(proposals):
            stats = compute_stats(parsed)
            gap = min(stats.min - target_min, target_max - stats.max)
            if 0 < gap <= D2_MAX_EXTENSION:
                proposals.append(_extended(parsed, fudge, gap, 1))

    return proposals


def generate_fallback(
    target_min: int,
    target_max: int,
    available_faces: Iterable[str | int | DiceFace],
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> list[CombinationCandidate]:
    """
    Generates ranked combinations for a target range without any external help.

    Args:
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.
        available_faces (Iterable[str | int | DiceFace]): Face tags such as
            'd4', 'd6', 'd2' or 'dF'. Unknown tags are ignored.
        max_candidates (int): The number of candidates to keep.

    Returns:
        list[CombinationCandidate]: The ranked candidates, best fit first.

    """
    if target_min > target_max:
        log_warning(
            f"Target minimum {target_min} is above maximum {target_max}, swapping",
            {"target_min": target_min, "target_max": target_max},
        )
        target_min, target_max = target_max, target_min

    faces = _resolve_faces(available_faces)
    if not faces:
        log_warning(
            "No usable dice faces to generate combinations from",
            {"target_min": target_min, "target_max": target_max},
        )
        return []

    proposals = propose_combinations(target_min, target_max, faces)
    log_debug(
        f"Proposed {len(proposals)} combinations for [{target_min}, {target_max}]",
        {"faces": ",".join(face.tag for face in faces)},
    )
    return rank_candidates(proposals, target_min, target_max, max_candidates)


def generate_combinations(
    target_min: int,
    target_max: int,
    available_faces: Iterable[str | int | DiceFace],
    suggest: SuggestFn | None = None,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> list[CombinationCandidate]:
    """
    Ranks combinations from an optional external generator, or falls back.

    The external generator only provides macro texts: their statistics are
    always recomputed. When it is missing, fails, or returns nothing usable,
    the deterministic fallback search is used instead.

    Args:
        target_min (int): The requested minimum.
        target_max (int): The requested maximum.
        available_faces (Iterable[str | int | DiceFace]): Face tags to use.
        suggest (SuggestFn | None): The external generator, if any.
        max_candidates (int): The number of candidates to keep.

    Returns:
        list[CombinationCandidate]: The ranked candidates, best fit first.

    """
    faces = list(available_faces)
    if suggest is not None:
        lo, hi = min(target_min, target_max), max(target_min, target_max)
        tags = [face.tag for face in _resolve_faces(faces)]
        try:
            macros = [macro for macro in suggest(lo, hi, tags) if macro]
        except Exception as e:
            log_warning(
                f"External combination generator failed: {e!s}, using fallback",
                {"target_min": lo, "target_max": hi, "error": str(e)},
            )
        else:
            if macros:
                return rank_candidates(macros, lo, hi, max_candidates)
            log_warning(
                "External combination generator returned nothing, using fallback",
                {"target_min": lo, "target_max": hi},
            )
    return generate_fallback(target_min, target_max, faces, max_candidates)
