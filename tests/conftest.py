from __future__ import annotations

import asyncio
import logging
from typing import List, Tuple

import pytest

from morseflow.audio.audio_logger import LOGGER_NAME
from morseflow.audio.tone_device import ToneDevice
from morseflow.core.engine import PlaybackEngine
from morseflow.core.timing import TimingModel


class EventLog:
    """Shared, ordered record of device calls, callbacks and waits."""

    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def add(self, *event) -> None:
        self.events.append(tuple(event))

    def kinds(self, kind: str) -> List[Tuple]:
        return [e for e in self.events if e[0] == kind]

    def sleeps(self) -> List[float]:
        return [e[1] for e in self.events if e[0] == "sleep"]


class RecordingToneDevice(ToneDevice):
    def __init__(self, log: EventLog) -> None:
        self.log = log
        self.ready_calls: List[bool] = []
        self.frequency = None
        self.gain = 0.0
        self.closed = False

    def ensure_ready(self, force: bool = False) -> None:
        self.ready_calls.append(force)

    def set_frequency(self, hz: float) -> None:
        self.frequency = hz
        self.log.add("frequency", hz)

    def set_gain(self, level: float, time_constant: float) -> None:
        self.gain = level
        self.log.add("gain", level, time_constant)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def log() -> EventLog:
    return EventLog()


@pytest.fixture
def device(log) -> RecordingToneDevice:
    return RecordingToneDevice(log)


@pytest.fixture
def engine(log, device) -> PlaybackEngine:
    async def sleep(seconds: float) -> None:
        log.add("sleep", round(seconds * 1000.0, 6))
        await asyncio.sleep(0)

    eng = PlaybackEngine(
        device=device,
        timing=TimingModel(char_speed=20, overall_speed=20),
        sleep=sleep,
    )
    eng.on_char_start = lambda ch: log.add("start", ch)
    eng.on_char_end = lambda ch: log.add("end", ch)
    eng.on_tone = lambda on: log.add("tone", on)
    return eng


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
