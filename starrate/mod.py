from collections import namedtuple
import enum
from functools import reduce
import math
import operator as op

from .game_mode import GameMode


class BitEnum(enum.IntEnum):
    """A type for enums representing bitmask field values.
    """
    @classmethod
    def pack(cls, **kwargs):
        """Pack a bitmask from explicit bit values.

        Parameters
        ----------
        kwargs
            The names of the fields and their status. Any fields not explicitly
            passed will be set to False.

        Returns
        -------
        bitmask : int
            The packed bitmask.
        """
        members = cls.__members__
        try:
            return reduce(
                op.or_,
                (members[k] * bool(v) for k, v in kwargs.items()),
                0,
            )
        except KeyError as e:
            raise TypeError(f'{e} is not a member of {cls.__qualname__}')

    @classmethod
    def unpack(cls, bitmask):
        """Unpack a bitmask into a dictionary from field name to field state.

        Parameters
        ----------
        bitmask : int
            The bitmask to unpack.

        Returns
        -------
        status : dict[str, bool]
            The mapping from field name to field status.
        """
        return {k: bool(bitmask & v) for k, v in cls.__members__.items()}


class Mod(BitEnum):
    """The modifiers that can be applied to a play.
    """
    no_fail = 1
    easy = 1 << 1
    touch_device = 1 << 2
    hidden = 1 << 3
    hard_rock = 1 << 4
    sudden_death = 1 << 5
    double_time = 1 << 6
    relax = 1 << 7
    half_time = 1 << 8
    nightcore = 1 << 9  # always used with double_time
    flashlight = 1 << 10
    autoplay = 1 << 11
    spun_out = 1 << 12
    auto_pilot = 1 << 13
    perfect = 1 << 14
    key4 = 1 << 15
    key5 = 1 << 16
    key6 = 1 << 17
    key7 = 1 << 18
    key8 = 1 << 19
    fade_in = 1 << 20
    random = 1 << 21
    cinema = 1 << 22
    target_practice = 1 << 23
    key9 = 1 << 24
    coop = 1 << 25
    key1 = 1 << 26
    key3 = 1 << 27
    key2 = 1 << 28
    score_v2 = 1 << 29
    mirror = 1 << 30
    classic = 1 << 31  # not a stable mod, judged with the stable rules

    @classmethod
    def parse(cls, cs):
        """Parse a mod mask out of a list of shortened mod names.

        Parameters
        ----------
        cs : str
            The mod string, for example ``'HDDT'``.

        Returns
        -------
        mod_mask : int
            The mod mask.
        """
        if len(cs) % 2 != 0:
            raise ValueError(f'malformed mods: {cs!r}')

        cs = cs.lower()
        mapping = {
            'ez': cls.easy,
            'hr': cls.hard_rock,
            'ht': cls.half_time,
            'dt': cls.double_time,
            'nc': cls.nightcore | cls.double_time,
            'hd': cls.hidden,
            'fl': cls.flashlight,
            'so': cls.spun_out,
            'nf': cls.no_fail,
            'sd': cls.sudden_death,
            'pf': cls.perfect | cls.sudden_death,
            'rx': cls.relax,
            'ap': cls.auto_pilot,
            'td': cls.touch_device,
            'fi': cls.fade_in,
            'mr': cls.mirror,
            'cl': cls.classic,
        }

        mod = 0
        for n in range(0, len(cs), 2):
            try:
                mod |= mapping[cs[n:n + 2]]
            except KeyError:
                raise ValueError(f'unknown mod: {cs[n:n + 2]!r}')

        return mod

    @classmethod
    def names(cls, mask):
        """The names of the mods set in ``mask``.

        Parameters
        ----------
        mask : int
            The mod mask.

        Returns
        -------
        names : list[str]
            The names of the enabled mods in bit order.
        """
        return [k for k, enabled in cls.unpack(mask).items() if enabled]


def clock_rate(mods):
    """The playback rate multiplier of a mod mask.

    Parameters
    ----------
    mods : int
        The mod mask.

    Returns
    -------
    rate : float
        1.5 with double time or nightcore, 0.75 with half time, otherwise 1.
    """
    if mods & (Mod.double_time | Mod.nightcore):
        return 1.5
    if mods & Mod.half_time:
        return 0.75
    return 1.0


def adjust_difficulty(difficulty, mods, mode=GameMode.standard):
    """Apply the difficulty-parameter adjustments of hard rock and easy.

    Parameters
    ----------
    difficulty : Difficulty
        The chart's difficulty parameters.
    mods : int
        The mod mask.
    mode : GameMode, optional
        The ruleset. osu!mania circle size is the key count and is never
        adjusted.

    Returns
    -------
    adjusted : Difficulty
        The adjusted difficulty parameters. Rate changes are not applied
        here; see :func:`clock_rate`.
    """
    scale_circle_size = mode != GameMode.mania
    if mods & Mod.hard_rock:
        return difficulty._replace(
            hp_drain_rate=min(difficulty.hp_drain_rate * 1.4, 10),
            circle_size=(
                min(difficulty.circle_size * 1.3, 10)
                if scale_circle_size else
                difficulty.circle_size
            ),
            overall_difficulty=min(difficulty.overall_difficulty * 1.4, 10),
            approach_rate=min(difficulty.approach_rate * 1.4, 10),
        )
    if mods & Mod.easy:
        return difficulty._replace(
            hp_drain_rate=difficulty.hp_drain_rate / 2,
            circle_size=(
                difficulty.circle_size / 2
                if scale_circle_size else
                difficulty.circle_size
            ),
            overall_difficulty=difficulty.overall_difficulty / 2,
            approach_rate=difficulty.approach_rate / 2,
        )
    return difficulty


def ar_to_ms(ar):
    """Convert an approach rate value to milliseconds of time that an element
    appears on the screen before being hit.

    Parameters
    ----------
    ar : float
        The approach rate.

    Returns
    -------
    milliseconds : float
        The number of milliseconds that an element appears on the screen before
         being hit at the given approach rate.

    See Also
    --------
    :func:`starrate.mod.ms_to_ar`
    """
    # the slope changes at approach rate 5
    if ar >= 5:
        return 1950 - (ar * 150)
    else:
        return 1800 - (ar * 120)


def ms_to_ar(ms):
    """Convert milliseconds to hit an element into an approach rate value.

    Parameters
    ----------
    ms : float
        The number of milliseconds that an element appears on the screen before
        being hit.

    Returns
    -------
    ar : float
        The approach rate value that produces the given millisecond value.

    See Also
    --------
    :func:`starrate.mod.ar_to_ms`
    """
    ar = (ms - 1950) / -150
    if ar < 5:
        # the ar lines cross at 5 but we use a different formula for the slower
        # approach rates.
        return (ms - 1800) / -120
    return ar


def fade_in_ms(preempt):
    """The time an element takes to fade in, given its preempt time.
    """
    return 400 * min(1, preempt / 450)


def circle_radius(cs):
    """Compute the ``CS`` attribute into a circle radius in osu! pixels.

    Parameters
    ----------
    cs : float
        The circle size.

    Returns
    -------
    radius : float
        The radius in osu! pixels.
    """
    return (512 / 16) * (1 - 0.7 * (cs - 5) / 5)


class HitWindows(namedtuple('HitWindows', 'hit_300, hit_100, hit_50')):
    """Times to hit an object at various accuracies

    Parameters
    ----------
    hit_300 : float
        The maximum number of milliseconds away from exactly on time a hit
        can be to still be a 300
    hit_100 : float
        The maximum number of milliseconds away from exactly on time a hit
        can be to still be a 100
    hit_50 : float
        The maximum number of milliseconds away from exactly on time a hit
        can be to still be a 50

    Notes
    -----
    A hit further than the ``hit_50`` value away from the time of a hit object
    is a miss.
    """
    def scaled(self, factor):
        return type(self)(*(window * factor for window in self))


def od_to_ms(od, rate=1.0):
    """Convert an overall difficulty value into milliseconds to hit an object
    at various accuracies.

    Parameters
    ----------
    od : float
        The overall difficulty.
    rate : float, optional
        The playback rate. Windows are returned in real time.

    Returns
    -------
    hw : HitWindows
        A namedtuple of numbers of milliseconds to hit an object at different
        accuracies.
    """
    return HitWindows(
        hit_300=80 - 6 * od,
        hit_100=140 - 8 * od,
        hit_50=200 - 10 * od,
    ).scaled(1 / rate)


def od_to_ms_300(od):
    """Convert an overall difficulty value into milliseconds to hit an object
    at maximum accuracy.

    Parameters
    ----------
    od : float
        The overall difficulty.

    Returns
    -------
    ms : float
        The number of milliseconds to hit an object at maximum accuracy.

    See Also
    --------
    :func:`starrate.mod.ms_300_to_od`
    """
    return 80 - 6 * od


def ms_300_to_od(ms):
    """Convert the milliseconds to score a 300 into an OD value.

    Parameters
    ----------
    ms : float
        The length of the 300 window in milliseconds.

    Returns
    -------
    od : float
        The OD value that produces a 300 window of length ``ms``.

    See Also
    --------
    :func:`starrate.mod.od_to_ms_300`
    """
    return (ms - 80) / -6


class ManiaHitWindows(namedtuple('ManiaHitWindows',
                                 'perfect great good ok meh')):
    """The osu!mania hit windows, in milliseconds either side of a note.
    """
    def scaled(self, factor):
        return type(self)(*(window * factor for window in self))


def od_to_mania_ms(od, mods=0):
    """Convert an overall difficulty value into the osu!mania hit windows.

    Parameters
    ----------
    od : float
        The chart's overall difficulty, before hard rock or easy.
    mods : int, optional
        The mod mask. Hard rock tightens the windows by a factor of 1.4,
        easy widens them by 1.4, and rate mods scale them to real time.

    Returns
    -------
    windows : ManiaHitWindows
        The hit windows.
    """
    if od < 5:
        perfect = 22.4 - 0.6 * od
    else:
        perfect = 24.9 - 1.1 * od

    windows = ManiaHitWindows(
        perfect=perfect,
        great=64 - 3 * od,
        good=97 - 3 * od,
        ok=127 - 3 * od,
        meh=151 - 3 * od,
    )

    multiplier = 1 / clock_rate(mods)
    if mods & Mod.hard_rock:
        multiplier /= 1.4
    elif mods & Mod.easy:
        multiplier *= 1.4

    return windows.scaled(multiplier)


def od_to_legacy_mania_ms(od, mods=0, is_convert=False):
    """Convert an overall difficulty value into the osu!mania hit windows
    used by osu!stable.

    Parameters
    ----------
    od : float
        The chart's overall difficulty, before hard rock or easy.
    mods : int, optional
        The mod mask. Hard rock tightens the windows by a factor of 1.4 and
        easy widens them by 1.4. The playback rate does not change stable
        windows.
    is_convert : bool, optional
        Was the chart converted from osu! standard? Converts are judged as
        OD 10, with wider great and good windows when their own OD is 4 or
        less.

    Returns
    -------
    windows : ManiaHitWindows
        The hit windows, floored to whole milliseconds.
    """
    great_leniency = good_leniency = 0
    if is_convert:
        if od <= 4:
            great_leniency = 13
            good_leniency = 10
        od = 10

    multiplier = 1.0
    if mods & Mod.hard_rock:
        multiplier /= 1.4
    elif mods & Mod.easy:
        multiplier *= 1.4

    return ManiaHitWindows(
        perfect=math.floor(16 * multiplier),
        great=math.floor((64 - 3 * od + great_leniency) * multiplier),
        good=math.floor((97 - 3 * od + good_leniency) * multiplier),
        ok=math.floor((127 - 3 * od) * multiplier),
        meh=math.floor((151 - 3 * od) * multiplier),
    )
