from math import isclose

import pytest

from starrate import Difficulty, GameMode, Mod
from starrate.mod import (
    ar_to_ms,
    circle_radius,
    clock_rate,
    ms_300_to_od,
    ms_to_ar,
    od_to_legacy_mania_ms,
    od_to_mania_ms,
    od_to_ms,
    od_to_ms_300,
)


def test_parse():
    assert Mod.parse('') == 0
    assert Mod.parse('HDDT') == Mod.hidden | Mod.double_time
    assert Mod.parse('hrfl') == Mod.hard_rock | Mod.flashlight
    assert Mod.parse('NC') == Mod.nightcore | Mod.double_time
    assert Mod.parse('CL') == Mod.classic


@pytest.mark.parametrize('mods', ['H', 'HDX', 'ZZ'])
def test_parse_invalid(mods):
    with pytest.raises(ValueError):
        Mod.parse(mods)


def test_names():
    assert Mod.names(0) == []
    assert Mod.names(Mod.hidden | Mod.double_time) == [
        'hidden',
        'double_time',
    ]


def test_pack_unpack():
    mask = Mod.pack(hidden=True, flashlight=True, easy=False)
    assert mask == Mod.hidden | Mod.flashlight
    unpacked = Mod.unpack(mask)
    assert unpacked['hidden']
    assert unpacked['flashlight']
    assert not unpacked['easy']

    with pytest.raises(TypeError):
        Mod.pack(not_a_mod=True)


def test_clock_rate():
    assert clock_rate(0) == 1.0
    assert clock_rate(Mod.double_time) == 1.5
    assert clock_rate(Mod.parse('NC')) == 1.5
    assert clock_rate(Mod.half_time) == 0.75
    assert clock_rate(Mod.hidden | Mod.hard_rock) == 1.0


def test_adjust_difficulty():
    difficulty = Difficulty(
        hp_drain_rate=5,
        circle_size=4,
        overall_difficulty=8,
        approach_rate=9,
    )

    hard_rock = difficulty.with_mods(Mod.hard_rock)
    assert isclose(hard_rock.circle_size, 5.2)
    assert hard_rock.overall_difficulty == 10
    assert hard_rock.approach_rate == 10
    assert isclose(hard_rock.hp_drain_rate, 7)

    easy = difficulty.with_mods(Mod.easy)
    assert easy.circle_size == 2
    assert easy.overall_difficulty == 4
    assert easy.approach_rate == 4.5

    assert difficulty.with_mods(Mod.double_time) == difficulty

    # the osu!mania key count is never scaled
    keys = Difficulty(circle_size=7).with_mods(Mod.hard_rock, GameMode.mania)
    assert keys.circle_size == 7


def test_approach_rate_defaults_to_overall_difficulty():
    assert Difficulty(overall_difficulty=6).approach_rate == 6


def test_ar_to_ms():
    assert ar_to_ms(0) == 1800
    assert ar_to_ms(5) == 1200
    assert ar_to_ms(9) == 600
    assert ar_to_ms(10) == 450

    for ar in (0, 3.5, 5, 8, 10):
        assert isclose(ms_to_ar(ar_to_ms(ar)), ar)


def test_od_to_ms():
    windows = od_to_ms(8)
    assert windows.hit_300 == 32
    assert windows.hit_100 == 76
    assert windows.hit_50 == 120

    assert od_to_ms(8, 1.5).hit_300 == pytest.approx(32 / 1.5)
    assert od_to_ms_300(8) == 32
    assert ms_300_to_od(32) == 8


def test_od_to_mania_ms():
    windows = od_to_mania_ms(7)
    assert windows.perfect == pytest.approx(17.2)
    assert windows.great == 43
    assert windows.good == 76
    assert windows.ok == 106
    assert windows.meh == 130

    # below OD 5 the perfect window changes slope
    assert od_to_mania_ms(0).perfect == pytest.approx(22.4)

    double_time = od_to_mania_ms(7, Mod.double_time)
    assert double_time.great == pytest.approx(43 / 1.5)

    hard_rock = od_to_mania_ms(7, Mod.hard_rock)
    assert hard_rock.great == pytest.approx(43 / 1.4)

    easy = od_to_mania_ms(7, Mod.easy)
    assert easy.great == pytest.approx(43 * 1.4)


def test_circle_radius():
    assert circle_radius(5) == 32
    assert circle_radius(4) > circle_radius(5) > circle_radius(6)


def test_od_to_legacy_mania_ms():
    assert od_to_legacy_mania_ms(8) == (16, 40, 73, 103, 127)
    # stable windows ignore the playback rate
    assert od_to_legacy_mania_ms(8, Mod.double_time) == (16, 40, 73, 103, 127)
    assert od_to_legacy_mania_ms(8, Mod.hard_rock) == (11, 28, 52, 73, 90)

    easy = od_to_legacy_mania_ms(7, Mod.easy)
    assert easy.perfect == 22
    assert easy.great == 60


def test_od_to_legacy_mania_ms_convert():
    # converts are judged as OD 10
    assert od_to_legacy_mania_ms(8, is_convert=True) == (16, 34, 67, 97, 121)
    # with extra leniency for low OD charts
    assert od_to_legacy_mania_ms(3, is_convert=True) == (16, 47, 77, 97, 121)
