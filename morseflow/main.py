"""MorseFlow command line entry point.

Invoke as ``morseflow`` (console script) or ``python -m morseflow``::

    morseflow "cq cq de test" --speed 18:12 --frequency 700
    echo "sos" | morseflow --silent
    morseflow --encode "hello world"
    morseflow --gui

Characters are echoed while they are sent.  Ctrl-C stops playback after
the element currently sounding.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from .audio.audio_logger import LOGGER_NAME, configure_logger
from .audio.tone_device import NullToneDevice
from .config import AppConfig, get_app_config, load_config
from .core.engine import PlaybackEngine
from .core.symbols import encode, estimate_duration
from .errors import InvalidSpeedFormat

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="morseflow",
        description="Play text as Morse code.",
    )
    parser.add_argument("text", nargs="*", help="Text to send (read from stdin when omitted)")
    parser.add_argument("-s", "--speed", help="Speed in WPM as cc or cc:oo (Farnsworth)")
    parser.add_argument("-f", "--frequency", help="Tone frequency in Hz (440-1200)")
    parser.add_argument("--silent", action="store_true", help="Do not open an audio device")
    parser.add_argument("--encode", action="store_true", help="Print dots and dashes instead of playing")
    parser.add_argument("--gui", action="store_true", help="Open the PyQt6 window")
    parser.add_argument("--config", help="JSON file overriding the default settings")
    parser.add_argument("-v", "--verbose", action="store_true", help="Also log to stderr")
    return parser


def _setup_logging(config: AppConfig, verbose: bool) -> None:
    level = config.get("logging", "level", default="DEBUG")
    configure_logger(path=config.get("logging", "file"), level=level)
    if verbose:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logging.getLogger(LOGGER_NAME).addHandler(handler)


def _echo(char: str) -> None:
    sys.stdout.write(char)
    sys.stdout.flush()


async def _play(engine: PlaybackEngine, text: str) -> None:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, engine.stop)
    except NotImplementedError:
        # Windows event loops have no signal handlers; Ctrl-C aborts instead.
        pass
    try:
        await engine.play_text(text)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except NotImplementedError:
            pass


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else get_app_config()
    _setup_logging(config, args.verbose)

    if args.gui:
        from .gui.main_window import run_gui

        return run_gui(config)

    text = " ".join(args.text) if args.text else sys.stdin.read().strip()

    engine = PlaybackEngine.from_config(
        config, device=NullToneDevice() if args.silent else None
    )
    if args.frequency is not None:
        engine.set_frequency(args.frequency)
    if args.speed is not None:
        try:
            engine.set_speed_from_string(args.speed)
        except InvalidSpeedFormat as exc:
            parser.error(str(exc))

    if args.encode:
        print(encode(text))
        seconds = estimate_duration(text, engine.timing) / 1000.0
        print(f"{seconds:.1f} s at {engine.timing.speed_string} WPM")
        return 0

    engine.on_char_start = _echo
    try:
        asyncio.run(_play(engine, text))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        engine.close()
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
