"""
Tests for the roll simulator.
"""

import random

import pytest

from rollforge.core.dice_parser import DiceFace, parse
from rollforge.core.simulation import (
    DieResult,
    SimulationOutcome,
    chart_data,
    roll_face,
    simulate_batch,
    simulate_once,
)
from rollforge.core.statistics import compute_stats


@pytest.fixture
def rng():
    return random.Random(1234)


def test_roll_face_ranges(rng):
    for _ in range(200):
        assert roll_face(DiceFace.fudge(), rng) in (-1, 0, 1)
        assert roll_face(DiceFace.numeric(2), rng) in (0, 1)
        assert 1 <= roll_face(DiceFace.numeric(6), rng) <= 6


def test_roll_face_global_source():
    assert 1 <= roll_face(DiceFace.numeric(4)) <= 4


def test_roll_face_huge_die(rng):
    assert 1 <= roll_face(DiceFace.numeric(10**12), rng) <= 10**12


def test_batch_of_huge_dice_stays_in_bounds(rng):
    """Test that huge dice are rolled without listing their faces."""
    histogram = simulate_batch("3d1000000000+2", 1_000, rng)
    assert sum(histogram.values()) == 1_000
    assert all(5 <= total <= 3_000_000_002 for total in histogram)


def test_simulate_once_breakdown(rng):
    outcome = simulate_once("2d6-1d4+3", rng)
    assert len(outcome.rolls) == 3
    assert [roll.sign for roll in outcome.rolls] == [1, 1, -1]
    assert outcome.modifier == 3
    assert outcome.total == sum(roll.signed_value for roll in outcome.rolls) + 3


def test_simulate_once_keeps_unsigned_values(rng):
    outcome = simulate_once("-1d6", rng)
    roll = outcome.rolls[0]
    assert 1 <= roll.value <= 6
    assert roll.sign == -1
    assert outcome.total == -roll.value


def test_simulate_once_is_reproducible():
    first = simulate_once("3d6+1dF", random.Random(7))
    second = simulate_once("3d6+1dF", random.Random(7))
    assert first == second


def test_simulate_once_modifier_only(rng):
    outcome = simulate_once("+4", rng)
    assert outcome.total == 4
    assert outcome.rolls == []


def test_constant_dice():
    """Test that a d1 always rolls 1."""
    assert simulate_once("3d1+2").total == 5


@pytest.mark.parametrize("macro", ["1d6", "2d6+1dF-3", "4d2+10", "-1d8+2d4", "3dF"])
def test_batch_totals_within_bounds(macro, rng):
    stats = compute_stats(macro)
    histogram = simulate_batch(macro, 2000, rng)
    assert sum(histogram.values()) == 2000
    assert all(stats.min <= total <= stats.max for total in histogram)


def test_batch_covers_every_d6_face(rng):
    histogram = simulate_batch("1d6", 6000, rng)
    assert sorted(histogram) == [1, 2, 3, 4, 5, 6]


def test_batch_is_sorted_by_total(rng):
    histogram = simulate_batch("2d6", 1000, rng)
    assert list(histogram) == sorted(histogram)


def test_batch_accepts_parsed_macro():
    parsed = parse("2d4")
    assert simulate_batch(parsed, 500, random.Random(3)) == simulate_batch(
        "2d4", 500, random.Random(3)
    )


def test_batch_zero_trials():
    assert simulate_batch("1d6", 0) == {}


def test_batch_negative_trials_are_clamped():
    assert simulate_batch("1d6", -10) == {}


def test_batch_ten_thousand_trials(rng):
    histogram = simulate_batch("3d6", 10_000, rng)
    assert sum(histogram.values()) == 10_000
    # 10 and 11 are the most likely totals of 3d6.
    assert max(histogram, key=histogram.get) in (9, 10, 11, 12)


def test_describe():
    d6, d4 = DiceFace.numeric(6), DiceFace.numeric(4)
    outcome = SimulationOutcome(
        total=5,
        rolls=[
            DieResult(face=d6, value=4, sign=1),
            DieResult(face=d4, value=2, sign=-1),
        ],
        modifier=3,
    )
    assert outcome.describe() == "1d6(4) - 1d4(2) + 3"


def test_describe_leading_negative_and_empty():
    outcome = SimulationOutcome(
        total=-4,
        rolls=[DieResult(face=DiceFace.fudge(), value=1, sign=-1)],
        modifier=-3,
    )
    assert outcome.describe() == "-1dF(1) - 3"
    assert SimulationOutcome(total=0).describe() == "0"


def test_chart_data():
    assert chart_data({3: 2, 1: 5, 2: 0}) == [(1, 5), (2, 0), (3, 2)]
