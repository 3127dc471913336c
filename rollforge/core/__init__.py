"""
Core module of the RollForge dice engine.

This module contains the macro parser, the exact statistics, the roll
simulator, the theoretical distribution of single dice and the combination
generator, along with the settings, label catalog and display utilities.
"""

from .combinations import (
    CombinationCandidate,
    distribution_label,
    distribution_score,
    fit_label,
    fit_score,
    generate_combinations,
    generate_fallback,
    rank_candidates,
    score_candidate,
)
from .config import EngineSettings, load_settings
from .constants import DistributionLabel, FaceKind, FitLabel
from .dice_parser import (
    DiceFace,
    DiceTerm,
    ParsedMacro,
    format_macro,
    normalize_macro,
    parse,
    parse_face,
)
from .distribution import distribution_for, theoretical_distribution
from .labels import LabelCatalog, translate
from .simulation import (
    DieResult,
    SimulationOutcome,
    chart_data,
    simulate_batch,
    simulate_once,
)
from .statistics import RollStats, compute_stats

__all__ = [
    # Import from combinations.py
    "CombinationCandidate",
    "distribution_label",
    "distribution_score",
    "fit_label",
    "fit_score",
    "generate_combinations",
    "generate_fallback",
    "rank_candidates",
    "score_candidate",
    # Import from config.py
    "EngineSettings",
    "load_settings",
    # Import from constants.py
    "DistributionLabel",
    "FaceKind",
    "FitLabel",
    # Import from dice_parser.py
    "DiceFace",
    "DiceTerm",
    "ParsedMacro",
    "format_macro",
    "normalize_macro",
    "parse",
    "parse_face",
    # Import from distribution.py
    "distribution_for",
    "theoretical_distribution",
    # Import from labels.py
    "LabelCatalog",
    "translate",
    # Import from simulation.py
    "DieResult",
    "SimulationOutcome",
    "chart_data",
    "simulate_batch",
    "simulate_once",
    # Import from statistics.py
    "RollStats",
    "compute_stats",
]
