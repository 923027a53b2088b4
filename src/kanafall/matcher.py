"""Input matching — compare typed keys to a prompt's accepted sequences."""

from __future__ import annotations

import re

from kanafall.models import KeyOutcome
from kanafall.romaji import accepted_sequences

_ACCEPTED_KEY = re.compile(r"[A-Z0-9\-.,]")


def normalize_key(raw_key: str, composing: bool = False) -> str | None:
    """Uppercase a raw key payload; None for IME composition or unsupported keys."""
    if composing or not raw_key:
        return None
    key = raw_key.upper()
    if not _ACCEPTED_KEY.fullmatch(key):
        return None
    return key


def match_input(prompt: str, buffer: str) -> KeyOutcome:
    """Grade an input buffer against every accepted spelling of ``prompt``."""
    sequences = accepted_sequences(prompt)
    if not buffer or not sequences:
        return KeyOutcome.NOOP
    if buffer in sequences:
        return KeyOutcome.COMPLETE
    if any(seq.startswith(buffer) for seq in sequences):
        return KeyOutcome.PARTIAL
    return KeyOutcome.MISS


class InputMatcher:
    """Stateful matcher holding the keys typed so far for the active prompt."""

    def __init__(self) -> None:
        self.buffer = ""

    def reset(self) -> None:
        self.buffer = ""

    def feed(self, prompt: str, raw_key: str, composing: bool = False) -> KeyOutcome:
        """Append one key and classify the result.

        On MISS and COMPLETE the buffer is cleared; on PARTIAL it keeps the
        new key. Ignored keys leave the buffer untouched.
        """
        key = normalize_key(raw_key, composing)
        if key is None or not prompt:
            return KeyOutcome.NOOP

        candidate = self.buffer + key
        outcome = match_input(prompt, candidate)
        if outcome == KeyOutcome.PARTIAL:
            self.buffer = candidate
        else:
            self.buffer = ""
        return outcome
