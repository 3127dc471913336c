"""
Tests for the combination scorer and the fallback generator.
"""

import pytest

from rollforge.core.combinations import (
    CombinationCandidate,
    distribution_label,
    distribution_score,
    fit_label,
    fit_score,
    generate_combinations,
    generate_fallback,
    propose_combinations,
    rank_candidates,
    round_half_up,
    score_candidate,
)
from rollforge.core.constants import DistributionLabel, FitLabel
from rollforge.core.dice_parser import DiceFace, format_macro, parse
from rollforge.core.statistics import RollStats, compute_stats


def rs(low, high):
    return RollStats(min=low, max=high, average=(low + high) / 2)


@pytest.fixture
def d6_candidates():
    return generate_fallback(5, 15, {"d6"})


# ---- Fit ----
@pytest.mark.parametrize(
    "low, high, expected",
    [
        (5, 15, 100.0),
        (8, 13, 50.0),
        (6, 15, 90.0),
        (3, 17, 60.0),
        (40, 60, 0.0),
    ],
)
def test_fit_score(low, high, expected):
    assert fit_score(rs(low, high), 5, 15) == pytest.approx(expected)


def test_fit_score_zero_width_target():
    assert fit_score(rs(10, 10), 10, 10) == 100.0
    assert fit_score(rs(9, 10), 10, 10) == 0.0


@pytest.mark.parametrize(
    "low, high, expected",
    [
        (5, 15, FitLabel.PERFECT),
        (6, 15, FitLabel.CLOSE),
        (6, 14, FitLabel.CONTAINED),
        (3, 17, FitLabel.WIDER),
        (1, 10, FitLabel.EXCEEDS_LOW),
        (10, 20, FitLabel.EXCEEDS_HIGH),
        (20, 30, FitLabel.NO_OVERLAP),
        (-5, 2, FitLabel.NO_OVERLAP),
    ],
)
def test_fit_label(low, high, expected):
    assert fit_label(rs(low, high), 5, 15) == expected


def test_fit_label_translation_key():
    assert FitLabel.PERFECT.translation_key == "fit.perfect"
    assert FitLabel.EXCEEDS_LOW.translation_key == "fit.exceedsLow"


# ---- Distribution shape ----
@pytest.mark.parametrize(
    "macro, expected",
    [
        ("1d20", 0.0),
        ("1d6+5", 0.0),
        ("", 0.0),
        ("2d6", 0.5),
        ("3d6", 1.0),
        ("4d6", 1.5),
        ("1d6+1d8", 0.6),
        ("2d12", 0.35),
        ("2d20", 0.2),
        ("10d6", 2.0),
    ],
)
def test_distribution_score(macro, expected):
    assert distribution_score(macro) == pytest.approx(expected)


@pytest.mark.parametrize(
    "score, expected",
    [
        (0.0, DistributionLabel.FLAT),
        (0.4, DistributionLabel.FLAT),
        (0.5, DistributionLabel.SOMEWHAT_BELL),
        (1.2, DistributionLabel.SOMEWHAT_BELL),
        (1.5, DistributionLabel.BELL),
        (2.0, DistributionLabel.BELL),
    ],
)
def test_distribution_label(score, expected):
    assert distribution_label(score) == expected


# ---- Candidates ----
def test_score_candidate():
    candidate = score_candidate("2d6+3", 5, 15)
    assert candidate.macro == "2d6+3"
    assert (candidate.min, candidate.max, candidate.average) == (5, 15, 10.0)
    assert candidate.fit_label == FitLabel.PERFECT
    assert candidate.fit_score == 100.0
    assert candidate.distribution_label == DistributionLabel.SOMEWHAT_BELL
    assert candidate.stats == compute_stats("2d6+3")


def test_score_candidate_normalizes_macro():
    assert score_candidate(" 1d6 + 0 ", 1, 6).macro == "1d6"


def test_rank_candidates_deduplicates():
    ranked = rank_candidates(["1d6+1", "1d6+1+0", "1 d6 + 1"], 2, 7)
    assert [c.macro for c in ranked] == ["1d6+1"]


def test_rank_candidates_prefers_flatter_on_ties():
    ranked = rank_candidates(["2d6", "1d11+1"], 2, 12)
    assert [c.macro for c in ranked] == ["1d11+1", "2d6"]


def test_rank_candidates_truncates():
    macros = [f"1d{n}" for n in range(2, 30)]
    assert len(rank_candidates(macros, 1, 10, max_candidates=5)) == 5


# ---- Search ----
def test_round_half_up():
    assert round_half_up(6.5) == 7
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(3.4) == 3


def test_fallback_finds_perfect_d6_fit(d6_candidates):
    best = d6_candidates[0]
    assert best.fit_label in (FitLabel.PERFECT, FitLabel.CLOSE)
    assert best.macro == "2d6+3"


def test_fallback_stats_match_macro(d6_candidates):
    for candidate in d6_candidates:
        stats = compute_stats(candidate.macro)
        assert (candidate.min, candidate.max) == (stats.min, stats.max)
        assert candidate.average == pytest.approx(stats.average)


def test_fallback_is_sorted(d6_candidates):
    scores = [candidate.fit_score for candidate in d6_candidates]
    assert scores == sorted(scores, reverse=True)
    assert all(isinstance(c, CombinationCandidate) for c in d6_candidates)


def test_fallback_proposes_single_and_pairs():
    proposals = {
        format_macro(p)
        for p in propose_combinations(5, 15, [DiceFace.numeric(4), DiceFace.numeric(6)])
    }
    assert "1d6+7" in proposals
    assert "1d4+8" in proposals
    assert "1d4+1d6+4" in proposals
    assert "2d6+3" in proposals


def test_fallback_d2_extensions():
    macros = {c.macro for c in generate_fallback(5, 15, ["d6", "d2"], max_candidates=50)}
    assert "1d6+2d2+7" in macros
    assert "1d6-3d2+7" in macros


def test_fallback_d2_never_proposed_alone():
    assert generate_fallback(0, 5, ["d2"]) == []


def test_fallback_fudge_widening():
    macros = {c.macro for c in generate_fallback(5, 15, ["d6", "dF"], max_candidates=50)}
    assert "1d6+2dF+7" in macros
    assert compute_stats("1d6+2dF+7") == RollStats(min=6, max=15, average=10.5)


def test_fallback_swaps_reversed_target():
    assert generate_fallback(15, 5, ["d6"]) == generate_fallback(5, 15, ["d6"])


def test_fallback_without_usable_faces():
    assert generate_fallback(5, 15, []) == []
    assert generate_fallback(5, 15, ["banana"]) == []


def test_fallback_respects_max_candidates():
    faces = ["d4", "d6", "d8", "d10", "d12", "d20", "d2", "dF"]
    assert len(generate_fallback(3, 30, faces, max_candidates=4)) == 4


def test_fallback_exact_point_target():
    best = generate_fallback(7, 7, ["d6"])[0]
    assert best.fit_score < 100.0
    assert best.fit_label != FitLabel.PERFECT


def test_fallback_is_deterministic():
    faces = ["d4", "d8", "d12", "d2"]
    assert generate_fallback(4, 22, faces) == generate_fallback(4, 22, faces)


# ---- External suggestions ----
def test_generate_combinations_uses_suggestions(mocker):
    suggest = mocker.Mock(return_value=["1d10+5", "2d6+3", ""])
    ranked = generate_combinations(5, 15, ["d6", "d10"], suggest=suggest)
    suggest.assert_called_once_with(5, 15, ["d6", "d10"])
    assert [c.macro for c in ranked] == ["2d6+3", "1d10+5"]


def test_generate_combinations_recomputes_stats(mocker):
    suggest = mocker.Mock(return_value=["3d4"])
    ranked = generate_combinations(3, 12, ["d4"], suggest=suggest)
    assert (ranked[0].min, ranked[0].max) == (3, 12)


def test_generate_combinations_falls_back_on_error(mocker):
    suggest = mocker.Mock(side_effect=RuntimeError("service down"))
    ranked = generate_combinations(5, 15, ["d6"], suggest=suggest)
    assert ranked == generate_fallback(5, 15, ["d6"])


def test_generate_combinations_falls_back_on_empty(mocker):
    suggest = mocker.Mock(return_value=[])
    assert generate_combinations(5, 15, ["d6"], suggest=suggest) == generate_fallback(
        5, 15, ["d6"]
    )


def test_generate_combinations_without_suggester():
    assert generate_combinations(5, 15, ["d6"]) == generate_fallback(5, 15, ["d6"])


def test_parse_of_generated_macro_is_complete(d6_candidates):
    assert all(parse(c.macro).is_complete for c in d6_candidates)
