"""
Top-level package for MorseFlow.

MorseFlow plays text as Morse code.  The timing model turns character
and overall speeds (WPM) into element and gap durations, and the playback
engine keys a tone device on and off with those durations.

Example usage::

    import asyncio
    from morseflow import PlaybackEngine, get_app_config

    engine = PlaybackEngine.from_config(get_app_config())
    engine.set_speed_from_string("18:12")
    engine.set_frequency(700)
    asyncio.run(engine.play_text("cq cq de test"))

The namespace re-exports only the main entry points.  Lower-level
helpers live in ``morseflow.core`` and ``morseflow.audio``; the optional
Qt window lives in ``morseflow.gui`` and needs ``PyQt6``.
"""

from .config import AppConfig, get_app_config, load_config  # noqa: F401
from .errors import AlreadyPlaying, InvalidSpeedFormat, MorseFlowError  # noqa: F401
from .core.engine import PlaybackEngine  # noqa: F401
from .core.symbols import CHAR_TO_MORSE, encode  # noqa: F401
from .core.timing import TimingModel  # noqa: F401
from .audio.tone_device import (  # noqa: F401
    NullToneDevice,
    SoundDeviceToneDevice,
    ToneDevice,
    get_default_tone_device,
)

__version__ = "1.3.0"

__all__ = [
    "AppConfig",
    "get_app_config",
    "load_config",
    "MorseFlowError",
    "InvalidSpeedFormat",
    "AlreadyPlaying",
    "PlaybackEngine",
    "TimingModel",
    "CHAR_TO_MORSE",
    "encode",
    "ToneDevice",
    "NullToneDevice",
    "SoundDeviceToneDevice",
    "get_default_tone_device",
]
