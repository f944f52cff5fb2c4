import logging

import click

from .attributes import JudgementCounts
from .chart import Difficulty
from .deviation import unstable_rate
from .game_mode import GameMode
from .mod import (
    Mod,
    ar_to_ms,
    clock_rate,
    od_to_legacy_mania_ms,
    od_to_mania_ms,
    od_to_ms,
)
from .mania.performance import estimate_deviation as mania_deviation
from .standard.performance import estimate_deviation as standard_deviation
from .utils import inverse_difficulty_range


def _parse_mods(ctx, param, value):
    try:
        return Mod.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


mods_option = click.option(
    '--mods',
    default='',
    callback=_parse_mods,
    help='The mods as a string of short names, like HDDT.',
)


@click.group()
@click.option(
    '--verbose/--no-verbose',
    default=False,
    help='Log the calculation steps?',
)
def main(verbose):
    """Difficulty and performance calculation utilities.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


@main.command('hit-windows')
@click.argument('od', type=float)
@mods_option
def hit_windows(od, mods):
    """Show the hit windows for an overall difficulty.
    """
    rate = clock_rate(mods)
    standard_od = Difficulty(overall_difficulty=od).with_mods(mods)
    windows = od_to_ms(standard_od.overall_difficulty, rate)
    click.echo('standard:')
    for name, window in zip(windows._fields, windows):
        click.echo(f'  {name}: {window:.2f}ms')

    mania_windows = od_to_mania_ms(od, mods)
    click.echo('mania:')
    for name, window in zip(mania_windows._fields, mania_windows):
        click.echo(f'  {name}: {window:.2f}ms')

    if mods & Mod.classic:
        legacy_windows = od_to_legacy_mania_ms(od, mods)
        click.echo('mania (stable):')
        for name, window in zip(legacy_windows._fields, legacy_windows):
            click.echo(f'  {name}: {window:.0f}ms')


@main.command()
@click.argument('od', type=float)
@mods_option
@click.option(
    '--mode',
    type=click.Choice(['standard', 'mania']),
    default='mania',
    help='The ruleset whose hit windows the play was judged with.',
)
@click.option('--perfect', default=0, help='osu!mania perfects.')
@click.option('--great', default=0, help='300s.')
@click.option('--good', default=0, help='osu!mania 200s.')
@click.option('--ok', default=0, help='100s.')
@click.option('--meh', default=0, help='50s.')
@click.option('--miss', default=0, help='Misses.')
@click.option(
    '--hold-notes',
    default=0,
    help='The number of osu!mania hold notes in the chart.',
)
@click.option(
    '--convert/--no-convert',
    default=False,
    help='Was the osu!mania chart converted from osu! standard?',
)
def deviation(od, mods, mode, perfect, great, good, ok, meh, miss,
              hold_notes, convert):
    """Estimate the deviation and unstable rate of a play.
    """
    try:
        counts = JudgementCounts(
            perfect=perfect,
            great=great,
            good=good,
            ok=ok,
            meh=meh,
            miss=miss,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    if GameMode.parse(mode) == GameMode.mania:
        notes = max(0, counts.total - 2 * hold_notes)
        legacy = bool(mods & Mod.classic)
        if legacy:
            # stable judges each hold note once
            notes = max(0, counts.total - hold_notes)
            windows = od_to_legacy_mania_ms(od, mods, convert)
        else:
            windows = od_to_mania_ms(od, mods)
        estimate = mania_deviation(
            windows,
            notes,
            hold_notes,
            counts,
            legacy=legacy,
        )
    else:
        adjusted = Difficulty(overall_difficulty=od).with_mods(mods)
        estimate = standard_deviation(
            od_to_ms(adjusted.overall_difficulty, clock_rate(mods)),
            counts,
        )

    if estimate is None:
        click.echo('deviation: unknown')
        return

    click.echo(f'deviation: {estimate:.4f}ms')
    click.echo(f'unstable rate: {unstable_rate(estimate):.4f}')


@main.command()
@click.option('--ar', type=float, help='The approach rate.')
@click.option('--od', type=float, help='The overall difficulty.')
@mods_option
def convert(ar, od, mods):
    """Show the approach rate and overall difficulty after mods.
    """
    if ar is None and od is None:
        raise click.UsageError('pass at least one of --ar or --od')

    rate = clock_rate(mods)
    difficulty = Difficulty(
        overall_difficulty=5 if od is None else od,
        approach_rate=5 if ar is None else ar,
    ).with_mods(mods)

    if ar is not None:
        preempt = ar_to_ms(difficulty.approach_rate) / rate
        adjusted_ar = inverse_difficulty_range(preempt, 1800, 1200, 450)
        click.echo(f'AR: {ar:g} -> {adjusted_ar:.2f} ({preempt:.0f}ms)')
    if od is not None:
        great = od_to_ms(difficulty.overall_difficulty, rate).hit_300
        adjusted_od = (80 - great) / 6
        click.echo(f'OD: {od:g} -> {adjusted_od:.2f} ({great:.1f}ms)')


if __name__ == '__main__':
    main()
