from .difficulty import ManiaDifficultyAttributes, ManiaDifficultyCalculator
from .performance import ManiaPerformanceAttributes, ManiaPerformanceCalculator

__all__ = [
    'ManiaDifficultyAttributes',
    'ManiaDifficultyCalculator',
    'ManiaPerformanceAttributes',
    'ManiaPerformanceCalculator',
]
