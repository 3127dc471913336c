"""
RollForge: a dice-notation engine.

Parses dice macros such as "2d6+1dF-3", computes their exact statistics,
simulates rolls and searches dice combinations fitting a target range.
"""

from .core import *  # noqa: F403
from .core import __all__

__version__ = "0.1.0"
