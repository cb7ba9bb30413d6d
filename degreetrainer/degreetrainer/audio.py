SR = 44100

import io
import logging
from typing import Iterable, List, cast
import numpy as np
import numpy.typing as npt
import soundfile as sf

from .playback import NOTE_DURATION, NOTE_GAP
from .theory import note_to_midi, notes_to_freqs

logger = logging.getLogger(__name__)


def tone(freq: float, dur: float, waveform: str = "sine") -> npt.NDArray[np.float32]:
	"""Generate a single tone with a simple attack/release envelope.

	Args:
		freq: Frequency in Hz
		dur: Duration in seconds
		waveform: One of {"sine","triangle","saw"}
	"""
	t = np.linspace(0.0, dur, int(SR * dur), endpoint=False, dtype=np.float32)
	omega = 2.0 * np.pi * freq
	if waveform == "sine":
		x = np.sin(omega * t).astype(np.float32)
	elif waveform == "triangle":
		# 2/pi * arcsin(sin)
		x = ((2.0 / np.pi) * np.arcsin(np.sin(omega * t))).astype(np.float32)
	else:
		# sawtooth via fractional part formula
		phase = (freq * t).astype(np.float32)
		x = (2.0 * (phase - np.floor(phase + 0.5))).astype(np.float32)

	# 5ms attack, 50ms release
	attack = int(0.005 * SR)
	release = int(0.050 * SR)
	env = np.ones_like(x, dtype=np.float32)
	if attack > 0:
		env[:attack] = np.linspace(0.0, 1.0, attack, endpoint=False, dtype=np.float32)
	if release > 0:
		env[-release:] = np.linspace(1.0, 0.0, release, endpoint=False, dtype=np.float32)

	y = (x * env).astype(np.float32)
	return cast(npt.NDArray[np.float32], y)


def sequence(freqs: Iterable[float], dur: float = NOTE_DURATION, gap: float = NOTE_GAP, waveform: str = "sine", volume: float = 1.0) -> npt.NDArray[np.float32]:
	"""Render notes one after another, each followed by ``gap`` seconds of silence."""
	n_gap = np.zeros(int(SR * gap), dtype=np.float32)
	parts: List[npt.NDArray[np.float32]] = []
	for f in freqs:
		parts.append(tone(f, dur, waveform))
		parts.append(n_gap)
	if not parts:
		return np.zeros(0, dtype=np.float32)
	x = np.concatenate(parts) * np.float32(volume)
	return cast(npt.NDArray[np.float32], x.astype(np.float32))


def wav_bytes(x: npt.NDArray[np.float32]) -> bytes:
	buf = io.BytesIO()
	sf.write(buf, x, SR, format="WAV")
	return buf.getvalue()


def render_notes(notes: List[str], waveform: str = "piano", volume: float = 0.9) -> bytes:
	"""WAV bytes for canonical note names, falling back to sine when the piano is unavailable."""
	if waveform == "piano":
		from .piano import is_piano_available, render_piano_bytes
		if is_piano_available():
			try:
				return render_piano_bytes([note_to_midi(n) for n in notes], volume)
			except (RuntimeError, ValueError) as e:
				logger.warning("Piano rendering failed, using sine: %s", e)
		waveform = "sine"
	return wav_bytes(sequence(notes_to_freqs(notes), waveform=waveform, volume=volume))
