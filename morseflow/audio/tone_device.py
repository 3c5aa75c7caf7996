"""
Tone devices
============

A tone device is a continuously running oscillator whose output gain is
moved towards a target level.  The playback engine keys Morse elements
by ramping the gain between ``0`` and a small level; it never starts or
stops the oscillator itself.

Two implementations are provided:

* :class:`SoundDeviceToneDevice` – a sine oscillator rendered with numpy
  into a ``sounddevice.OutputStream``.  The gain follows an exponential
  approach with a caller-supplied time constant, so each key edge is a
  short fade instead of a click.
* :class:`NullToneDevice` – a silent stand-in for headless use.

:func:`get_default_tone_device` picks one from the ``audio`` section of
the application config::

    {
        "audio": {
            "backend": "sounddevice",
            "sample_rate": 48000,
            "blocksize": 256,
            "device": null
        }
    }

The ``sounddevice`` module is imported when a stream is first opened, so
importing this module does not require PortAudio.
"""

from __future__ import annotations

import abc
import logging
import math
from typing import Any, Dict, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 48000
DEFAULT_BLOCKSIZE = 256


class ToneDevice(abc.ABC):
    """Abstract base class for tone generators."""

    @abc.abstractmethod
    def ensure_ready(self, force: bool = False) -> None:
        """Create the signal path on first use.

        Later calls are no-ops unless *force* is true, in which case the
        signal path is torn down and rebuilt.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def set_frequency(self, hz: float) -> None:
        """Change the oscillator frequency."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_gain(self, level: float, time_constant: float) -> None:
        """Move the output gain towards *level*.

        :param level: Target linear gain (``0`` is silence).
        :param time_constant: Seconds for the gain to cover ~63% of the
            distance to *level*.  ``0`` switches immediately.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying audio resources."""


class NullToneDevice(ToneDevice):
    """A device that accepts every call and produces no sound."""

    def __init__(self) -> None:
        self.ready = False
        self.frequency = 0.0
        self.gain = 0.0

    def ensure_ready(self, force: bool = False) -> None:
        self.ready = True

    def set_frequency(self, hz: float) -> None:
        self.frequency = float(hz)

    def set_gain(self, level: float, time_constant: float) -> None:
        self.gain = float(level)

    def close(self) -> None:
        self.ready = False


class SoundDeviceToneDevice(ToneDevice):
    """Sine oscillator with a smoothed gain on a PortAudio output stream.

    The stream callback runs on PortAudio's thread and only reads the
    target values written by :meth:`set_frequency` and :meth:`set_gain`.
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        blocksize: int = DEFAULT_BLOCKSIZE,
        device: Optional[Union[int, str]] = None,
    ) -> None:
        self._sample_rate = int(sample_rate)
        self._blocksize = int(blocksize)
        self._device = device
        self._stream = None

        self._phase = 0.0
        self._frequency = 0.0
        self._level = 0.0
        self._target = 0.0
        self._time_constant = 0.0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def level(self) -> float:
        """Gain reached at the end of the last rendered block."""
        return self._level

    # ------------------------------------------------------------------
    # ToneDevice API
    # ------------------------------------------------------------------

    def ensure_ready(self, force: bool = False) -> None:
        if self._stream is not None and not force:
            return
        if self._stream is not None:
            self.close()
        import sounddevice as sd

        self._stream = sd.OutputStream(
            samplerate=self._sample_rate,
            blocksize=self._blocksize,
            device=self._device,
            channels=1,
            dtype="float32",
            latency="low",
            callback=self._callback,
        )
        self._stream.start()
        logger.info(
            "Opened output stream (device=%r, rate=%d, blocksize=%d)",
            self._device, self._sample_rate, self._blocksize,
        )

    def set_frequency(self, hz: float) -> None:
        self._frequency = float(hz)

    def set_gain(self, level: float, time_constant: float) -> None:
        self._time_constant = max(0.0, float(time_constant))
        self._target = float(level)

    def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        stream.stop()
        stream.close()
        logger.info("Closed output stream")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, frames: int) -> np.ndarray:
        """Render the next *frames* samples and advance the oscillator.

        The envelope follows ``target + (level - target) * exp(-t / tau)``.
        """
        idx = np.arange(frames, dtype=np.float64)
        step = 2.0 * math.pi * self._frequency / self._sample_rate
        wave = np.sin(self._phase + step * idx)
        self._phase = (self._phase + step * frames) % (2.0 * math.pi)

        target = self._target
        if self._time_constant > 0.0:
            decay = np.exp(-(idx + 1.0) / (self._time_constant * self._sample_rate))
            env = target + (self._level - target) * decay
        else:
            env = np.full(frames, target)
        if frames:
            self._level = float(env[-1])
        return (wave * env).astype(np.float32)

    def _callback(self, outdata, frames, time_info, status) -> None:
        if status:
            logger.warning("Output stream status: %s", status)
        outdata[:, 0] = self.render(frames)


def get_default_tone_device(config: Dict[str, Any] | None = None) -> ToneDevice:
    """Return a tone device based on *config*.

    :param config: The ``audio`` section of the application config.
        Recognised keys:
        * ``backend`` – ``"sounddevice"`` or ``"null"`` (default: ``"sounddevice"``)
        * ``sample_rate``, ``blocksize``, ``device`` – forwarded to
          :class:`SoundDeviceToneDevice`.
    """
    if config is None:
        config = {}

    backend = str(config.get("backend", "sounddevice")).lower()

    if backend == "null":
        logger.info("Using NullToneDevice")
        return NullToneDevice()

    if backend != "sounddevice":
        logger.warning(
            "Unknown audio backend %r, falling back to SoundDeviceToneDevice",
            backend,
        )
    kwargs: Dict[str, Any] = {
        "sample_rate": config.get("sample_rate", DEFAULT_SAMPLE_RATE),
        "blocksize": config.get("blocksize", DEFAULT_BLOCKSIZE),
        "device": config.get("device"),
    }
    logger.info("Using SoundDeviceToneDevice with kwargs=%s", kwargs)
    return SoundDeviceToneDevice(**kwargs)


__all__ = [
    "ToneDevice",
    "NullToneDevice",
    "SoundDeviceToneDevice",
    "get_default_tone_device",
]
