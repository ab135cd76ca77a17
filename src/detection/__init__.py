"""
Armor Vision - Detection Module

Turns a binary mask into light bars, light bars into armor candidates,
and candidates into a single selected target.
"""

from .light_bars import LightBarExtractor
from .matcher import ArmorMatcher
from .selector import ArmorSelector

__all__ = ['LightBarExtractor', 'ArmorMatcher', 'ArmorSelector']
