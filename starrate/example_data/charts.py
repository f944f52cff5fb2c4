"""Small generated charts used in examples and tests.
"""
from datetime import timedelta
import math

from ..chart import Chart, Difficulty
from ..curve import Curve
from ..game_mode import GameMode
from ..hit_object import Circle, HoldNote, Slider, SliderTick, Spinner


def _ms(value):
    return timedelta(milliseconds=value)


def stream(count=64, interval=90, spacing=40, difficulty=None):
    """Evenly spaced circles moving back and forth across the playfield.

    Parameters
    ----------
    count : int, optional
        The number of circles.
    interval : float, optional
        The milliseconds between circles.
    spacing : float, optional
        The distance between consecutive circles in osu! pixels.
    difficulty : Difficulty, optional
        The difficulty settings.

    Returns
    -------
    chart : Chart
        The osu! standard chart.
    """
    hit_objects = []
    x = 256.0
    direction = 1
    for n in range(count):
        if not 64 <= x + direction * spacing <= 448:
            direction = -direction
        x += direction * spacing
        hit_objects.append(Circle((x, 192), _ms(1000 + n * interval)))
    return Chart(
        hit_objects,
        Difficulty(overall_difficulty=8, approach_rate=9)
        if difficulty is None else difficulty,
        title='stream',
    )


def jumps(count=64, interval=180, radius=150, difficulty=None):
    """Circles jumping around a circle of ``radius`` pixels.
    """
    hit_objects = []
    for n in range(count):
        angle = n * 2.4
        position = (
            256 + radius * math.cos(angle),
            192 + radius * math.sin(angle),
        )
        hit_objects.append(Circle(position, _ms(1000 + n * interval)))
    return Chart(
        hit_objects,
        Difficulty(overall_difficulty=8, approach_rate=9)
        if difficulty is None else difficulty,
        title='jumps',
    )


def sliders(count=24, interval=400, difficulty=None):
    """Alternating circles and sliders ending in a spinner.
    """
    hit_objects = []
    time = 1000
    for n in range(count):
        x = 100 + (n % 4) * 90
        if n % 2:
            hit_objects.append(Slider(
                (x, 100),
                _ms(time),
                _ms(time + interval / 2),
                curve=Curve.from_kind_and_points(
                    'B',
                    [(x, 100), (x + 40, 160), (x + 80, 220)],
                    140,
                ),
                repeat=1 + n % 3,
                length=140,
            ))
        else:
            hit_objects.append(Circle((x, 300), _ms(time)))
        time += interval

    hit_objects.append(Spinner((256, 192), _ms(time), _ms(time + 2000)))
    return Chart(
        hit_objects,
        Difficulty(overall_difficulty=7, approach_rate=8)
        if difficulty is None else difficulty,
        title='sliders',
    )


def fruits(count=48, interval=150, difficulty=None):
    """An osu!catch chart of fruits with a juice stream and a banana shower.
    """
    hit_objects = []
    time = 1000
    for n in range(count):
        x = 256 + (200 if n % 3 == 0 else -120) * (-1) ** n
        hit_objects.append(Circle((x, 192), _ms(time)))
        time += interval

    start = time
    end = time + 600
    hit_objects.append(Slider(
        (100, 192),
        _ms(start),
        _ms(end),
        curve=Curve.from_kind_and_points('L', [(100, 192), (400, 192)], 300),
        length=300,
        nested_objects=[
            SliderTick((100 + 50 * n, 192), _ms(start + 100 * n))
            for n in range(1, 6)
        ],
    ))
    hit_objects.append(Spinner((256, 192), _ms(end + 200), _ms(end + 1200)))
    return Chart(
        hit_objects,
        Difficulty(circle_size=4, approach_rate=9)
        if difficulty is None else difficulty,
        mode=GameMode.catch,
        title='fruits',
    )


def keys(key_count=4, rows=64, interval=120, difficulty=None):
    """An osu!mania chart of notes, chords and hold notes.
    """
    column_width = 512 / key_count
    hit_objects = []
    for row in range(rows):
        time = 1000 + row * interval
        column = row % key_count
        x = column_width * (column + 0.5)
        if row % 8 == 0:
            # a hold note with a chord over its body
            hit_objects.append(HoldNote(
                (x, 192),
                _ms(time),
                _ms(time + 3 * interval),
            ))
        else:
            hit_objects.append(Circle((x, 192), _ms(time)))
            if row % 4 == 1:
                other = (column + key_count // 2) % key_count
                hit_objects.append(Circle(
                    (column_width * (other + 0.5), 192),
                    _ms(time),
                ))
    return Chart(
        hit_objects,
        Difficulty(circle_size=key_count, overall_difficulty=7)
        if difficulty is None else difficulty,
        mode=GameMode.mania,
        title='keys',
    )


_examples = {
    'stream': stream,
    'jumps': jumps,
    'sliders': sliders,
    'fruits': fruits,
    'keys': keys,
}


def example_chart(name, **kwargs):
    """Build one of the example charts by name.

    Parameters
    ----------
    name : str
        The name of the example.
    **kwargs
        Forwarded to the example's function.

    Returns
    -------
    chart : Chart
        The chart.
    """
    try:
        build = _examples[name]
    except KeyError:
        raise ValueError(
            f'unknown example {name!r}, options: {sorted(_examples)}',
        )
    return build(**kwargs)
