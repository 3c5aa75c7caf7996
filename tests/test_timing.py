import math

import pytest

from morseflow.core.timing import (
    DEFAULT_FREQUENCY,
    TimingModel,
    normalise_frequency,
    parse_speed_string,
)
from morseflow.errors import InvalidSpeedFormat, MorseFlowError


@pytest.mark.parametrize("wpm", [5, 12, 18, 20, 35.5])
def test_standard_timing(wpm):
    timing = TimingModel(char_speed=wpm, overall_speed=wpm)
    dot = 1200 / wpm
    assert timing.dot_time == pytest.approx(dot)
    assert timing.dash_time == pytest.approx(3 * dot)
    assert timing.symbol_spacer_time == pytest.approx(dot)
    assert timing.char_spacer_time == pytest.approx(3 * dot)
    assert timing.word_spacer_time == pytest.approx(7 * dot)
    assert not timing.is_farnsworth


def test_farnsworth_timing():
    timing = TimingModel()
    timing.set_speed(18, 12)
    delay = ((60 * 18) - (37.2 * 12)) / (18 * 12) * 1000
    assert timing.dot_time == pytest.approx(1200 / 18)
    assert timing.dash_time == pytest.approx(3 * 1200 / 18)
    assert timing.symbol_spacer_time == pytest.approx(1200 / 18)
    assert timing.char_spacer_time == pytest.approx(3 * delay / 19)
    assert timing.word_spacer_time == pytest.approx(7 * delay / 19)
    assert timing.is_farnsworth
    # Gaps are longer than at the character speed.
    assert timing.char_spacer_time > 3 * timing.dot_time


def test_overall_speed_is_clamped():
    timing = TimingModel()
    timing.set_speed(12, 20)
    assert timing.char_speed == 12
    assert timing.overall_speed == 12

    timing.set_speed(timing.char_speed, timing.overall_speed)
    assert timing.overall_speed == 12
    assert timing.word_spacer_time == pytest.approx(7 * 100)


def test_speed_change_recomputes_everything():
    timing = TimingModel()
    timing.set_speed(18, 12)
    timing.set_speed(20, 20)
    assert timing.char_spacer_time == pytest.approx(180)
    assert timing.word_spacer_time == pytest.approx(420)


def test_zero_speed_does_not_raise():
    timing = TimingModel()
    timing.set_speed(0, 0)
    assert math.isinf(timing.dot_time)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("20", (20, 20)),
        ("18:12", (18, 12)),
        (" 25 : 15 ", (25, 15)),
        ("18:", (18, 18)),
    ],
)
def test_parse_speed_string(text, expected):
    assert parse_speed_string(text) == expected


@pytest.mark.parametrize("text", [":", "", ":12", "  "])
def test_parse_speed_string_requires_char_speed(text):
    with pytest.raises(InvalidSpeedFormat):
        parse_speed_string(text)


def test_invalid_speed_format_is_a_value_error():
    assert issubclass(InvalidSpeedFormat, ValueError)
    assert issubclass(InvalidSpeedFormat, MorseFlowError)


def test_set_speed_from_string():
    timing = TimingModel()
    timing.set_speed_from_string("20")
    assert (timing.char_speed, timing.overall_speed) == (20, 20)
    timing.set_speed_from_string("18:12")
    assert (timing.char_speed, timing.overall_speed) == (18, 12)
    timing.set_speed_from_string("12:18")
    assert (timing.char_speed, timing.overall_speed) == (12, 12)


def test_set_speed_from_string_error_keeps_previous_speed():
    timing = TimingModel(char_speed=18, overall_speed=12)
    with pytest.raises(InvalidSpeedFormat):
        timing.set_speed_from_string(":")
    assert (timing.char_speed, timing.overall_speed) == (18, 12)


def test_non_numeric_speed_propagates_nan():
    timing = TimingModel()
    timing.set_speed_from_string("fast")
    assert math.isnan(timing.char_speed)
    assert math.isnan(timing.dot_time)
    assert math.isnan(timing.word_spacer_time)


def test_set_speed_accepts_strings_without_raising():
    timing = TimingModel()
    timing.set_speed("20", "12")
    assert (timing.char_speed, timing.overall_speed) == (20, 12)
    assert timing.dot_time == pytest.approx(60.0)

    timing.set_speed("fast", 12)
    assert math.isnan(timing.char_speed)
    assert math.isnan(timing.overall_speed)
    assert math.isnan(timing.dot_time)

    timing.set_speed(None, object())
    assert math.isnan(timing.char_speed)
    assert math.isnan(timing.char_spacer_time)


def test_speed_string():
    assert TimingModel(char_speed=20, overall_speed=20).speed_string == "20"
    assert TimingModel(char_speed=18, overall_speed=12).speed_string == "18:12"
    assert TimingModel(char_speed=22.5, overall_speed=22.5).speed_string == "22.5"


@pytest.mark.parametrize(
    "value, expected",
    [
        (800, 800),
        (300, DEFAULT_FREQUENCY),
        ("900", 900),
        (1200, 1200),
        (440, 440),
        (1200.5, DEFAULT_FREQUENCY),
        ("loud", DEFAULT_FREQUENCY),
        (None, DEFAULT_FREQUENCY),
        (float("nan"), DEFAULT_FREQUENCY),
    ],
)
def test_frequency_normalisation(value, expected):
    timing = TimingModel()
    assert timing.set_frequency(value) == expected
    assert timing.frequency == expected
    assert normalise_frequency(value) == expected


def test_constructor_defaults():
    timing = TimingModel()
    assert timing.frequency == 800
    assert (timing.char_speed, timing.overall_speed) == (18, 18)
