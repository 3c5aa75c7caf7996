"""Character to Morse symbol lookup.

The table is a fixed asset: uppercase letters, digits and the common
punctuation marks, each mapped to a string of ``.`` and ``-``.  Anything
not in the table converts to the empty string and is skipped silently
during playback.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Tuple

from .timing import TimingModel

DOT = "."
DASH = "-"
WORD_SEPARATOR = " "

CHAR_TO_MORSE: Mapping[str, str] = MappingProxyType({
    "A": ".-",
    "B": "-...",
    "C": "-.-.",
    "D": "-..",
    "E": ".",
    "F": "..-.",
    "G": "--.",
    "H": "....",
    "I": "..",
    "J": ".---",
    "K": "-.-",
    "L": ".-..",
    "M": "--",
    "N": "-.",
    "O": "---",
    "P": ".--.",
    "Q": "--.-",
    "R": ".-.",
    "S": "...",
    "T": "-",
    "U": "..-",
    "V": "...-",
    "W": ".--",
    "X": "-..-",
    "Y": "-.--",
    "Z": "--..",
    "1": ".----",
    "2": "..---",
    "3": "...--",
    "4": "....-",
    "5": ".....",
    "6": "-....",
    "7": "--...",
    "8": "---..",
    "9": "----.",
    "0": "-----",
    "?": "..--..",
    "=": "-...-",
    ".": ".-.-.-",
    ",": "--..--",
    "!": "..--.",
    ":": "---...",
    '"': ".-..-.",
    "'": ".----.",
    "@": ".--.-.",
    "&": ".-...",
    "+": ".-.-.",
    ";": "-.-.-",
    "/": "--..-.",
    "-": "-....-",
    "(": "-.--.",
    ")": "-.--.-",
    "_": "..--.-",
})


def char_to_symbols(char: str) -> str:
    """Return the Morse symbols for *char* or ``""`` if it has none."""
    return CHAR_TO_MORSE.get(char.upper(), "")


def text_to_symbols(text: str) -> List[Tuple[str, str]]:
    """Convert *text* into ``(char, symbols)`` pairs.

    Characters are uppercased.  Spaces and unknown characters are kept
    with an empty symbol string so the result lines up with the input.
    """
    return [(ch, char_to_symbols(ch)) for ch in text.upper()]


def encode(text: str) -> str:
    """Render *text* as readable Morse.

    Characters are separated by a single space and words by ``" / "``.
    Characters without a table entry are dropped.

    >>> encode("sos sos")
    '... --- ... / ... --- ...'
    """
    words = []
    for word in text.upper().split():
        codes = [CHAR_TO_MORSE[ch] for ch in word if ch in CHAR_TO_MORSE]
        if codes:
            words.append(" ".join(codes))
    return " / ".join(words)


def estimate_duration(text: str, timing: TimingModel) -> float:
    """Return how long playing *text* takes, in milliseconds.

    The sum mirrors the waits performed by
    :meth:`~morseflow.core.engine.PlaybackEngine.play_text`: element
    durations, gaps between elements, a character gap after every
    non-space character except the last, and a word gap per space.
    """
    upper = text.upper()
    total = 0.0
    for index, ch in enumerate(upper):
        if ch == WORD_SEPARATOR:
            total += timing.word_spacer_time
            continue
        symbols = char_to_symbols(ch)
        for pos, symbol in enumerate(symbols):
            if symbol == DASH:
                total += timing.dash_time
            elif symbol == DOT:
                total += timing.dot_time
            if pos < len(symbols) - 1:
                total += timing.symbol_spacer_time
        if index < len(upper) - 1:
            total += timing.char_spacer_time
    return total


__all__ = [
    "CHAR_TO_MORSE",
    "DOT",
    "DASH",
    "char_to_symbols",
    "text_to_symbols",
    "encode",
    "estimate_duration",
]
