from .attributes import JudgementCounts
from .calculator import (
    DifficultyCalculator,
    PerformanceCalculator,
    calculate_difficulty,
    calculate_performance,
)
from .cancellation import CancellationToken, Cancelled
from .chart import Chart, Difficulty
from .game_mode import GameMode
from .hit_object import Circle, HitObject, HoldNote, Slider, Spinner
from .mod import Mod
from .position import Position
from .catch import CatchDifficultyCalculator, CatchPerformanceCalculator
from .mania import ManiaDifficultyCalculator, ManiaPerformanceCalculator
from .standard import (
    StandardDifficultyCalculator,
    StandardPerformanceCalculator,
)

__version__ = '0.1.0'


__all__ = [
    'CancellationToken',
    'Cancelled',
    'CatchDifficultyCalculator',
    'CatchPerformanceCalculator',
    'Chart',
    'Circle',
    'Difficulty',
    'DifficultyCalculator',
    'GameMode',
    'HitObject',
    'HoldNote',
    'JudgementCounts',
    'ManiaDifficultyCalculator',
    'ManiaPerformanceCalculator',
    'Mod',
    'PerformanceCalculator',
    'Position',
    'Slider',
    'Spinner',
    'StandardDifficultyCalculator',
    'StandardPerformanceCalculator',
    'calculate_difficulty',
    'calculate_performance',
]
