from .difficulty import CatchDifficultyAttributes, CatchDifficultyCalculator
from .performance import CatchPerformanceAttributes, CatchPerformanceCalculator

__all__ = [
    'CatchDifficultyAttributes',
    'CatchDifficultyCalculator',
    'CatchPerformanceAttributes',
    'CatchPerformanceCalculator',
]
