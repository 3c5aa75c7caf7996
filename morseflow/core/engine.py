"""
Morse playback engine
=====================

:class:`PlaybackEngine` plays text as Morse code on a
:class:`~morseflow.audio.tone_device.ToneDevice`.  Playback is a single
coroutine that suspends only while waiting for an element or gap to
elapse.  Everything between two waits (symbol lookup, callbacks, device
calls) runs without interruption, so callbacks and keying for one
element always complete before the next one starts.

States
------
The engine is either idle or playing.  :meth:`PlaybackEngine.play_text`
moves it to playing and always returns it to idle, whether the text was
played to the end, stopped, or a device call failed.

Cancellation
------------
:meth:`PlaybackEngine.stop` clears the play flag.  The flag is checked
before each character, so the character that is currently being sent
finishes first and no later character is sent.  A new
:meth:`~PlaybackEngine.play_text` call made while a stopped call is
still finishing waits for it before keying anything.  An engine is meant
to be driven from one event loop.

Callbacks
---------
Each callback is a single optional attribute; assigning a new function
replaces the previous one.

* ``on_char_start(char)`` / ``on_char_end(char)`` – around every
  character, spaces included.  For a space the word gap is waited
  *before* both callbacks fire.
* ``on_tone(is_on)`` – fired before the device is ramped up and before
  it is ramped down.
* ``on_play_status(is_playing)`` – after entering and after leaving
  the playing state.

Example::

    engine = PlaybackEngine(device=NullToneDevice())
    engine.set_speed_from_string("18:12")
    engine.on_char_start = lambda ch: print(ch, end="", flush=True)
    asyncio.run(engine.play_text("cq cq de test"))
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..audio.tone_device import ToneDevice, get_default_tone_device
from ..errors import AlreadyPlaying
from .symbols import DASH, DOT, WORD_SEPARATOR, char_to_symbols
from .timing import TimingModel

logger = logging.getLogger(__name__)

TONE_GAIN = 0.1
RAMP_TIME_CONSTANT = 0.001

CharCallback = Callable[[str], Any]
ToneCallback = Callable[[bool], Any]
StatusCallback = Callable[[bool], Any]
SleepFunc = Callable[[float], Awaitable[Any]]


class PlaybackEngine:
    """Keys a tone device according to Morse timing.

    :param device: Tone device to key.  When omitted one is created from
        the default ``audio`` config on first use.
    :param timing: Timing model; a fresh :class:`TimingModel` by default.
    :param sleep: Coroutine function taking seconds, used for every wait.
        Defaults to :func:`asyncio.sleep`.
    :param gain: Output level while a tone is keyed.
    :param ramp_time_constant: Gain smoothing time constant in seconds.
    :param device_config: ``audio`` config section used to create the
        device when *device* is omitted.
    """

    def __init__(
        self,
        device: Optional[ToneDevice] = None,
        timing: Optional[TimingModel] = None,
        sleep: Optional[SleepFunc] = None,
        gain: Optional[float] = TONE_GAIN,
        ramp_time_constant: Optional[float] = RAMP_TIME_CONSTANT,
        device_config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.timing = timing if timing is not None else TimingModel()
        self._device = device
        self._device_config = device_config
        self._sleep: SleepFunc = sleep if sleep is not None else asyncio.sleep
        # ``null`` in a config file means "use the default".
        self._gain = float(gain if gain is not None else TONE_GAIN)
        self._ramp = float(ramp_time_constant if ramp_time_constant is not None else RAMP_TIME_CONSTANT)
        self._audio_initialized = False
        self._playing = False
        # Bumped by every play_text call so a stopped loop that is still
        # inside a wait cannot resume after a newer call has started.
        self._session = 0
        # Set once the latest play_text call has fully returned.
        self._finished: Optional[asyncio.Event] = None

        self.on_char_start: Optional[CharCallback] = None
        self.on_char_end: Optional[CharCallback] = None
        self.on_tone: Optional[ToneCallback] = None
        self.on_play_status: Optional[StatusCallback] = None

    @classmethod
    def from_config(cls, config, device: Optional[ToneDevice] = None, **kwargs) -> "PlaybackEngine":
        """Build an engine from an :class:`~morseflow.config.AppConfig`.

        Frequency and speed come from the ``morse`` section; gain and ramp
        from ``audio``.  The device is created lazily from ``audio`` if
        not given.
        """
        timing = TimingModel(frequency=config.get("morse", "frequency", default=None))
        speed = config.get("morse", "speed", default=None)
        if speed:
            timing.set_speed_from_string(str(speed))
        return cls(
            device=device,
            timing=timing,
            gain=config.get("audio", "gain", default=TONE_GAIN),
            ramp_time_constant=config.get("audio", "ramp_time_constant", default=RAMP_TIME_CONSTANT),
            device_config=config.section("audio"),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Settings (delegated to the timing model)
    # ------------------------------------------------------------------

    @property
    def frequency(self) -> float:
        return self.timing.frequency

    def set_frequency(self, value: Any) -> float:
        """Set the tone frequency; applied at the next tone start."""
        return self.timing.set_frequency(value)

    def set_speed(self, char_speed: float, overall_speed: float) -> None:
        self.timing.set_speed(char_speed, overall_speed)

    def set_speed_from_string(self, text: str) -> None:
        self.timing.set_speed_from_string(text)

    # ------------------------------------------------------------------
    # Play status
    # ------------------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self._playing

    def stop(self) -> None:
        """Stop playback after the current element or gap.

        Safe to call at any time, including when idle.
        """
        if self._playing:
            logger.info("Stop requested")
        self._playing = False

    def _set_playing(self) -> int:
        if self._playing:
            raise AlreadyPlaying("Already playing!")
        self._playing = True
        self._session += 1
        return self._session

    def _is_current(self, session: int) -> bool:
        return self._playing and self._session == session

    def _notify_status(self, playing: bool) -> None:
        if self.on_play_status is not None:
            self.on_play_status(playing)

    # ------------------------------------------------------------------
    # Tone device
    # ------------------------------------------------------------------

    @property
    def device(self) -> ToneDevice:
        """The tone device, created from config on first access."""
        if self._device is None:
            self._device = get_default_tone_device(self._device_config)
        return self._device

    def initialize_audio(self, force: bool = False) -> None:
        """Make sure the tone device is ready.

        The first call (or any call with *force*) also applies the current
        frequency and silences the output; later calls only make sure the
        device is still open.
        """
        device = self.device
        device.ensure_ready(force=force)
        if not self._audio_initialized or force:
            device.set_frequency(self.timing.frequency)
            device.set_gain(0.0, 0.0)
            self._audio_initialized = True
            logger.debug("Audio initialised (force=%s, frequency=%s)", force, self.timing.frequency)

    def close(self) -> None:
        """Release the tone device."""
        if self._device is not None:
            self._device.close()
        self._audio_initialized = False

    def start_tone(self) -> None:
        self.initialize_audio()
        self.device.set_frequency(self.timing.frequency)
        if self.on_tone is not None:
            self.on_tone(True)
        self.device.set_gain(self._gain, self._ramp)

    def stop_tone(self) -> None:
        if self.on_tone is not None:
            self.on_tone(False)
        self.initialize_audio()
        self.device.set_gain(0.0, self._ramp)

    async def _delay(self, ms: float) -> None:
        await self._sleep(ms / 1000.0)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    async def play_dash(self) -> None:
        self.start_tone()
        await self._delay(self.timing.dash_time)
        self.stop_tone()

    async def play_dot(self) -> None:
        self.start_tone()
        await self._delay(self.timing.dot_time)
        self.stop_tone()

    async def play_symbols(self, symbols: str) -> None:
        """Key a sequence of ``.`` and ``-``; other characters are ignored."""
        last = len(symbols) - 1
        for i, symbol in enumerate(symbols):
            if symbol == DASH:
                await self.play_dash()
            elif symbol == DOT:
                await self.play_dot()
            if i < last:
                await self._delay(self.timing.symbol_spacer_time)

    async def play_text(self, text: str = "", emit_callbacks: bool = True) -> None:
        """Play *text* as Morse code.

        :param text: Text to send; case is ignored.
        :param emit_callbacks: Fire ``on_char_start``/``on_char_end``.
        :raises AlreadyPlaying: If a previous call has not finished yet.

        A call made right after :meth:`stop` first waits for the stopped
        call to finish its current character, so tones never overlap.
        """
        session = self._set_playing()
        previous = self._finished
        finished = self._finished = asyncio.Event()
        logger.info(
            "Playing %d characters at %s WPM, %s Hz",
            len(text), self.timing.speed_string, self.timing.frequency,
        )
        try:
            self._notify_status(True)
            if previous is not None and not previous.is_set():
                logger.debug("Waiting for stopped playback to finish")
                await previous.wait()
            await self._play_chars(text.upper(), emit_callbacks, session)
        finally:
            finished.set()
            if self._session == session:
                self._playing = False
                logger.info("Playback finished")
                self._notify_status(False)

    async def _play_chars(self, text: str, emit_callbacks: bool, session: int) -> None:
        last = len(text) - 1
        for i, char in enumerate(text):
            if not self._is_current(session):
                logger.info("Playback cancelled before character %d of %d", i + 1, last + 1)
                break

            if char == WORD_SEPARATOR:
                await self._delay(self.timing.word_spacer_time)
                if emit_callbacks:
                    self._char_started(char)
                    self._char_ended(char)
                continue

            symbols = char_to_symbols(char)
            logger.debug("Sending %r as %r", char, symbols)
            if emit_callbacks:
                self._char_started(char)
            await self.play_symbols(symbols)
            if emit_callbacks:
                self._char_ended(char)
            if i < last:
                await self._delay(self.timing.char_spacer_time)

    def _char_started(self, char: str) -> None:
        if self.on_char_start is not None:
            self.on_char_start(char)

    def _char_ended(self, char: str) -> None:
        if self.on_char_end is not None:
            self.on_char_end(char)


__all__ = ["PlaybackEngine", "AlreadyPlaying", "TONE_GAIN", "RAMP_TIME_CONSTANT"]
