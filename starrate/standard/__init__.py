from .difficulty import (
    StandardDifficultyAttributes,
    StandardDifficultyCalculator,
)
from .performance import (
    StandardPerformanceAttributes,
    StandardPerformanceCalculator,
)

__all__ = [
    'StandardDifficultyAttributes',
    'StandardDifficultyCalculator',
    'StandardPerformanceAttributes',
    'StandardPerformanceCalculator',
]
