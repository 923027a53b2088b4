"""Cue playback via FluidSynth + SoundFonts."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import fluidsynth

from kanafall.cues import Cue

logger = logging.getLogger(__name__)

# General MIDI programs
_SQUARE_LEAD = 80
_GLOCKENSPIEL = 9

_CLICK_CHANNEL = 0
_CHIME_CHANNEL = 1

# Cue -> [(delay_s, channel, pitch, duration_s, velocity)]
_PHRASES: dict[Cue, list[tuple[float, int, int, float, int]]] = {
    Cue.KEY_TYPED: [(0.0, _CLICK_CHANNEL, 79, 0.05, 40)],
    Cue.CORRECT_MATCH: [
        (0.0, _CHIME_CHANNEL, 81, 0.10, 80),
        (0.0, _CHIME_CHANNEL, 93, 0.15, 50),
    ],
    Cue.MISS: [(0.0, _CLICK_CHANNEL, 57, 0.15, 80)],
    Cue.STAGE_CLEAR: [
        (i * 0.2, _CHIME_CHANNEL, pitch, 0.5, 80)
        for i, pitch in enumerate((72, 76, 79, 84))
    ],
    Cue.ALL_CLEAR: [
        (i * 0.3, _CHIME_CHANNEL, pitch, 0.8, 70)
        for i, pitch in enumerate((72, 76, 79, 84, 88, 91, 96))
    ] + [
        (i * 0.3, _CLICK_CHANNEL, pitch - 12, 0.8, 45)
        for i, pitch in enumerate((72, 76, 79, 84, 88, 91, 96)) if i % 2 == 0
    ],
    Cue.GAME_OVER: [
        (i * 0.25, _CHIME_CHANNEL, pitch, 0.6, 70)
        for i, pitch in enumerate((72, 67, 63, 60))
    ],
}


def _detect_audio_driver() -> str:
    """Auto-detect the appropriate FluidSynth audio driver for the platform."""
    if sys.platform == "linux":
        return "pulseaudio"
    elif sys.platform == "darwin":
        return "coreaudio"
    elif sys.platform == "win32":
        return "dsound"
    return "alsa"


class CuePlayer:
    """Turns engine cues into short note phrases. Never raises into the caller."""

    def __init__(self, soundfont_path: str | Path | None = None) -> None:
        self.fs = fluidsynth.Synth(gain=0.6)
        self.fs.start(driver=_detect_audio_driver())
        self._sfid: int | None = None
        self.muted = False
        self._pending_ons: list[tuple[float, int, int, float, int]] = []  # (on_time, ch, pitch, dur, vel)
        self._pending_offs: list[tuple[float, int, int]] = []  # (off_time, channel, pitch)
        if soundfont_path:
            self.load_soundfont(soundfont_path)

    def load_soundfont(self, path: str | Path) -> None:
        self._sfid = self.fs.sfload(str(path))
        self.fs.program_select(_CLICK_CHANNEL, self._sfid, 0, _SQUARE_LEAD)
        self.fs.program_select(_CHIME_CHANNEL, self._sfid, 0, _GLOCKENSPIEL)

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        if self.muted:
            self.all_notes_off()
        return self.muted

    def on_cue(self, cue: Cue) -> None:
        """CueBus listener: queue the phrase for ``cue``."""
        if self.muted:
            return
        now = time.time()
        for delay, channel, pitch, duration, velocity in _PHRASES.get(cue, []):
            self._pending_ons.append((now + delay, channel, pitch, duration, velocity))
        self.flush()

    def flush(self) -> None:
        """Call each frame to start due notes and release finished ones."""
        now = time.time()
        try:
            waiting: list[tuple[float, int, int, float, int]] = []
            for on_time, channel, pitch, duration, velocity in self._pending_ons:
                if now >= on_time:
                    self.fs.noteon(channel, pitch, velocity)
                    self._pending_offs.append((now + duration, channel, pitch))
                else:
                    waiting.append((on_time, channel, pitch, duration, velocity))
            self._pending_ons = waiting

            remaining: list[tuple[float, int, int]] = []
            for off_time, channel, pitch in self._pending_offs:
                if now >= off_time:
                    self.fs.noteoff(channel, pitch)
                else:
                    remaining.append((off_time, channel, pitch))
            self._pending_offs = remaining
        except Exception as exc:
            logger.warning("Audio playback failed, dropping queued cues: %s", exc)
            self._pending_ons.clear()
            self._pending_offs.clear()

    def all_notes_off(self) -> None:
        try:
            for channel, pitch in {(c, p) for _, c, p in self._pending_offs}:
                self.fs.noteoff(channel, pitch)
        except Exception as exc:
            logger.warning("Audio note-off failed: %s", exc)
        self._pending_ons.clear()
        self._pending_offs.clear()

    def shutdown(self) -> None:
        self.all_notes_off()
        try:
            self.fs.delete()
        except Exception as exc:
            logger.warning("Audio shutdown failed: %s", exc)
