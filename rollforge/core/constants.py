"""
Constants and enumerations for the dice engine.

Defines the face kinds, the semantic labels produced by the combination
scorer, and the numeric constants that tune parsing limits, simulation and
the combination search heuristics.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class FaceKind(NiceEnum):
    """Discriminates the two kinds of die faces understood by the parser."""

    NUMERIC = "NUMERIC"
    FUDGE = "FUDGE"


class FitLabel(NiceEnum):
    """Describes how a candidate range relates to the requested range."""

    PERFECT = "perfect"
    CLOSE = "close"
    CONTAINED = "contained"
    WIDER = "wider"
    EXCEEDS_LOW = "exceedsLow"
    EXCEEDS_HIGH = "exceedsHigh"
    NO_OVERLAP = "noOverlap"

    @property
    def translation_key(self) -> str:
        """Returns the key used to look up the label in a locale catalog."""
        return f"fit.{self.value}"

    @property
    def color(self) -> str:
        """Returns the color string associated with this label."""
        return {
            FitLabel.PERFECT: "bold green",
            FitLabel.CLOSE: "green",
            FitLabel.CONTAINED: "cyan",
            FitLabel.WIDER: "yellow",
            FitLabel.EXCEEDS_LOW: "magenta",
            FitLabel.EXCEEDS_HIGH: "magenta",
        }.get(self, "red")


class DistributionLabel(NiceEnum):
    """Describes the approximate shape of a combination's distribution."""

    BELL = "bell"
    SOMEWHAT_BELL = "somewhatBell"
    FLAT = "flat"

    @property
    def translation_key(self) -> str:
        """Returns the key used to look up the label in a locale catalog."""
        return f"distribution.{self.value}"


# Values rolled by the special faces.
FUDGE_VALUES = (-1, 0, 1)
BINARY_VALUES = (0, 1)

# Face tag for Fudge dice, and the sides of the binary die.
FUDGE_TAG = "dF"
BINARY_SIDES = 2

# Upper bound for a single batch simulation.
MAX_TRIALS = 1_000_000

# Number of simulated rolls used for charts by default.
DEFAULT_SIMULATION_COUNT = 10_000

# Faces offered when the caller does not choose.
DEFAULT_AVAILABLE_FACES = ("d4", "d6", "d8", "d10", "d12", "d20")

# ---- Combination search ----
# Largest gap that the generator closes with d2 or Fudge dice.
D2_MAX_EXTENSION = 4
# Largest dice count proposed by the span-matching strategy.
MAX_SPAN_DICE = 10
# Default number of ranked candidates returned.
DEFAULT_MAX_CANDIDATES = 12

# ---- Scoring ----
CLOSE_FIT_SCORE = 90.0
# distribution_score = (dice - 1) * DICE_WEIGHT + (faces - 1) * VARIETY_BONUS
DISTRIBUTION_DICE_WEIGHT = 0.5
DISTRIBUTION_VARIETY_BONUS = 0.1
# Mean face count thresholds and the penalty applied above them.
DISTRIBUTION_LARGE_FACE_PENALTIES = ((20, 0.3), (12, 0.15))
DISTRIBUTION_SCORE_MAX = 2.0
BELL_THRESHOLD = 1.2
SOMEWHAT_BELL_THRESHOLD = 0.4
