from math import sqrt

from click.testing import CliRunner
import pytest
from scipy.special import erfcinv

from starrate.__main__ import main


@pytest.fixture
def runner():
    return CliRunner()


def values(output):
    """Parse ``name: value`` lines.
    """
    out = {}
    for line in output.splitlines():
        name, _, value = line.strip().partition(': ')
        out[name] = value
    return out


def test_hit_windows(runner):
    result = runner.invoke(main, ['hit-windows', '8'])
    assert result.exit_code == 0, result.output

    windows = values(result.output)
    assert windows['hit_300'] == '32.00ms'
    assert windows['hit_100'] == '76.00ms'
    assert windows['hit_50'] == '120.00ms'
    assert windows['great'] == '40.00ms'
    assert windows['meh'] == '127.00ms'


def test_hit_windows_with_mods(runner):
    result = runner.invoke(main, ['hit-windows', '8', '--mods', 'DT'])
    assert result.exit_code == 0, result.output

    windows = values(result.output)
    assert windows['hit_300'] == '21.33ms'
    assert windows['great'] == '26.67ms'


def test_bad_mods(runner):
    result = runner.invoke(main, ['hit-windows', '8', '--mods', 'XX'])
    assert result.exit_code == 2
    assert 'unknown mod' in result.output


def test_convert(runner):
    result = runner.invoke(
        main,
        ['convert', '--ar', '9', '--od', '8', '--mods', 'DT'],
    )
    assert result.exit_code == 0, result.output
    assert 'AR: 9 -> 10.33 (400ms)' in result.output
    assert 'OD: 8 -> 9.78 (21.3ms)' in result.output


def test_convert_needs_an_option(runner):
    result = runner.invoke(main, ['convert'])
    assert result.exit_code == 2


def test_deviation(runner):
    count = 11847
    result = runner.invoke(main, ['deviation', '7', '--perfect', str(count)])
    assert result.exit_code == 0, result.output

    expected = 17.2 / (sqrt(2) * erfcinv(1 / (2 * count + 1)))
    estimate = values(result.output)
    assert float(estimate['deviation'][:-2]) == pytest.approx(
        expected,
        abs=1e-3,
    )
    assert float(estimate['unstable rate']) == pytest.approx(
        expected * 10,
        abs=1e-2,
    )


def test_deviation_standard(runner):
    result = runner.invoke(
        main,
        [
            'deviation', '8',
            '--mode', 'standard',
            '--great', '900',
            '--ok', '80',
            '--meh', '5',
            '--miss', '3',
        ],
    )
    assert result.exit_code == 0, result.output
    assert float(values(result.output)['deviation'][:-2]) > 0


def test_deviation_unknown(runner):
    result = runner.invoke(main, ['deviation', '7', '--miss', '10'])
    assert result.exit_code == 0, result.output
    assert result.output == 'deviation: unknown\n'


def test_verbose(runner):
    result = runner.invoke(
        main,
        ['--verbose', 'deviation', '7', '--perfect', '100', '--great', '5'],
    )
    assert result.exit_code == 0, result.output


def test_hit_windows_classic(runner):
    result = runner.invoke(main, ['hit-windows', '8', '--mods', 'CL'])
    assert result.exit_code == 0, result.output

    _, _, stable = result.output.partition('mania (stable):\n')
    windows = values(stable)
    assert windows['perfect'] == '16ms'
    assert windows['great'] == '40ms'
    assert windows['meh'] == '127ms'


def test_deviation_with_hold_notes(runner):
    result = runner.invoke(
        main,
        [
            'deviation', '7',
            '--mods', 'DT',
            '--perfect', '5336',
            '--great', '3886',
            '--good', '1661',
            '--ok', '445',
            '--meh', '226',
            '--miss', '293',
            '--hold-notes', '700',
        ],
    )
    assert result.exit_code == 0, result.output
    assert float(values(result.output)['unstable rate']) == pytest.approx(
        299.300747,
        abs=1e-3,
    )


def test_deviation_classic(runner):
    count = 1000
    result = runner.invoke(
        main,
        ['deviation', '8', '--mods', 'CL', '--perfect', str(count)],
    )
    assert result.exit_code == 0, result.output

    # the stable perfect window is always 16ms
    expected = 16 / (sqrt(2) * erfcinv(1 / (2 * count + 1)))
    estimate = values(result.output)
    assert float(estimate['deviation'][:-2]) == pytest.approx(
        expected,
        abs=1e-3,
    )
