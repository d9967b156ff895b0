"""
SoundManager — Synthesized audio for Pocket Dice using pure Python.

Generates 16-bit PCM waveforms via struct.pack + math.sin (no numpy).
All sounds are pre-generated at init for zero-latency playback, in the
square-wave voice of an LCD hand-held.
"""
from __future__ import annotations

import logging
import math
import random
import struct

import pygame

from frontend_adapter import NullSound, SoundInterface

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def _generate_samples(
    duration_ms: int, freq: float = 440.0, waveform: str = "square", volume: float = 0.1,
    fade_out: bool = True, lowpass: float | None = None, rng: random.Random | None = None,
) -> bytes:
    """Generate raw 16-bit mono PCM bytes for a tone or noise burst.

    Args:
        duration_ms: Duration in milliseconds.
        freq: Frequency in Hz (ignored for noise).
        waveform: "sine", "square", or "noise".
        volume: Peak amplitude 0.0-1.0.
        fade_out: Apply exponential fade-out envelope.
        lowpass: Smoothing factor 0-1 for a one-pole low-pass (noise clacks).
        rng: Random source for noise.

    Returns:
        bytes of signed 16-bit little-endian samples.
    """
    rng = rng or random
    num_samples = int(SAMPLE_RATE * duration_ms / 1000)
    samples = []
    prev = 0.0
    for i in range(num_samples):
        t = i / SAMPLE_RATE
        # Envelope: decay to 1% by the end, like an exponential gain ramp
        env = 0.01 ** (i / num_samples) if fade_out else 1.0

        if waveform == "sine":
            val = math.sin(2 * math.pi * freq * t)
        elif waveform == "square":
            val = 1.0 if math.sin(2 * math.pi * freq * t) >= 0 else -1.0
        elif waveform == "noise":
            val = rng.uniform(-1.0, 1.0)
        else:
            val = 0.0

        if lowpass is not None:
            val = prev + lowpass * (val - prev)
            prev = val

        sample = int(val * volume * env * 32767)
        sample = max(-32768, min(32767, sample))
        samples.append(struct.pack("<h", sample))

    return b"".join(samples)


def _silence(duration_ms: int) -> bytes:
    return b"\x00\x00" * int(SAMPLE_RATE * duration_ms / 1000)


def _sequence(notes, gap_ms: int) -> bytes:
    """Notes (freq, duration_ms) started every gap_ms, padded with silence."""
    out = b""
    for freq, duration in notes:
        tone = _generate_samples(duration, freq)
        pad = max(gap_ms - duration, 0)
        out += tone + _silence(pad)
    return out


def _rattle(rng: random.Random) -> bytes:
    """12-15 short filtered noise clacks over about a second."""
    out = b""
    for _ in range(12 + rng.randrange(4)):
        clack = _generate_samples(60, waveform="noise", volume=0.15 + rng.random() * 0.25,
                                  lowpass=0.25, rng=rng)
        gap = 70 + rng.randrange(30)
        out += clack + _silence(gap - 60)
    return out


def _make_sound(pcm_bytes: bytes) -> pygame.mixer.Sound:
    """Wrap raw PCM bytes in a pygame.mixer.Sound."""
    return pygame.mixer.Sound(buffer=pcm_bytes)


class SoundManager(SoundInterface):
    """Pre-generates and plays all game sound effects.

    All play methods are no-ops when disabled. Requires an initialized
    pygame mixer (mono, 16-bit, 44.1 kHz).
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        rng = random.Random()

        # Button beep: 800 Hz
        self._beep = _make_sound(_generate_samples(100, freq=800))

        # Cursor blip: 1200 Hz
        self._select = _make_sound(_generate_samples(50, freq=1200))

        # Enter: 600 Hz then 800 Hz
        self._enter = _make_sound(_sequence([(600, 100), (800, 100)], gap_ms=100))

        # Dice rattle
        self._roll = _make_sound(_rattle(rng))

        # Win: C5 → E5 → G5 → C6
        self._win = _make_sound(_sequence(
            [(523.25, 100), (659.25, 100), (783.99, 200), (1046.50, 400)], gap_ms=150))

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def play_beep(self) -> None:
        if self._enabled:
            self._beep.play()

    def play_select(self) -> None:
        if self._enabled:
            self._select.play()

    def play_enter(self) -> None:
        if self._enabled:
            self._enter.play()

    def play_roll(self) -> None:
        if self._enabled:
            self._roll.play()

    def play_win(self) -> None:
        if self._enabled:
            self._win.play()


def create_sound(enabled: bool = True) -> SoundInterface:
    """SoundManager on an initialized mixer, or NullSound without audio."""
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        return SoundManager(enabled=enabled)
    except pygame.error:
        logger.warning("Audio unavailable, continuing without sound", exc_info=True)
        sound = NullSound()
        sound.set_enabled(enabled)
        return sound
