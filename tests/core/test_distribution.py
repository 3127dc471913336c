"""
Tests for the theoretical distribution of single dice.
"""

import random

import pytest

from rollforge.core.distribution import (
    distribution_for,
    is_single_die,
    theoretical_distribution,
)
from rollforge.core.dice_parser import parse


def test_single_d6():
    histogram = theoretical_distribution("1d6", 6000)
    assert histogram == {1: 1000, 2: 1000, 3: 1000, 4: 1000, 5: 1000, 6: 1000}


def test_modifier_shifts_outcomes():
    histogram = theoretical_distribution("1d4+10", 400)
    assert histogram == {11: 100, 12: 100, 13: 100, 14: 100}


def test_d2_uses_zero_and_one():
    assert theoretical_distribution("1d2+3", 10) == {3: 5, 4: 5}


def test_negative_single_die():
    assert theoretical_distribution("-1d4", 8) == {-4: 2, -3: 2, -2: 2, -1: 2}


def test_implicit_count():
    assert theoretical_distribution("d8", 8) == {i: 1 for i in range(1, 9)}


@pytest.mark.parametrize("macro", ["2d6", "1dF", "1d6+1d4", "", "5", "3dF+1"])
def test_other_shapes_are_empty(macro):
    assert theoretical_distribution(macro, 6000) == {}


def test_is_single_die():
    assert is_single_die(parse("1d20-2"))
    assert not is_single_die(parse("2d20"))
    assert not is_single_die(parse("1dF"))


def test_distribution_for_single_die_is_exact():
    assert distribution_for("1d6", 60) == {i: 10 for i in range(1, 7)}


def test_distribution_for_falls_back_to_simulation():
    histogram = distribution_for("2d6", 1000, random.Random(5))
    assert sum(histogram.values()) == 1000
    assert all(2 <= total <= 12 for total in histogram)
