"""
Audio output for MorseFlow.

This subpackage provides the tone devices keyed by the playback engine
and the package's debug logger:

* :class:`SoundDeviceToneDevice` – sine oscillator on a PortAudio stream
  (``sounddevice`` + ``numpy``).
* :class:`NullToneDevice` – silent device for headless runs and tests.

Engines talk to devices only through the :class:`ToneDevice` interface::

    device = get_default_tone_device({"backend": "sounddevice"})
    device.ensure_ready()
    device.set_frequency(800)
    device.set_gain(0.1, 0.001)   # key down
    device.set_gain(0.0, 0.001)   # key up
"""

from .audio_logger import configure_logger  # noqa: F401
from .tone_device import (  # noqa: F401
    ToneDevice,
    NullToneDevice,
    SoundDeviceToneDevice,
    get_default_tone_device,
)

__all__ = [
    "configure_logger",
    "ToneDevice",
    "NullToneDevice",
    "SoundDeviceToneDevice",
    "get_default_tone_device",
]
