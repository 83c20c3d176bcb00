"""
Rounding and display formatting.
"""
import math
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from wellness_pricing.engine.precision import round_half_up, round_count
from wellness_pricing.engine.formatting import format_currency, format_percentage


@pytest.mark.parametrize("value, expected", [
    (1.005, 1.01),
    (2.675, 2.68),
    (0.125, 0.13),
    (53.7037037, 53.70),
    (1080, 1080.0),
    (-1.005, -1.0),
    (-2.675, -2.67),
    (-1.006, -1.01),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_negative_zero_folds_to_zero():
    result = round_half_up(-0.004)
    assert result == 0.0
    assert math.copysign(1, result) == 1


def test_other_precisions():
    assert round_half_up(1.0005, 3) == 1.001
    assert round_half_up(12.5, 0) == 13.0


@pytest.mark.parametrize("value, expected", [(13.5, 14), (14.5, 15), (13.49, 13), (0, 0)])
def test_round_count(value, expected):
    assert round_count(value) == expected
    assert isinstance(round_count(value), int)


@pytest.mark.parametrize("value, expected", [
    (1080, "$1,080.00"),
    (53.705, "$53.71"),
    (-500, "-$500.00"),
    (0, "$0.00"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_percentage():
    assert format_percentage(53.7037) == "53.7%"
    assert format_percentage(20) == "20.0%"
    assert format_percentage(26.5233, places=2) == "26.52%"
