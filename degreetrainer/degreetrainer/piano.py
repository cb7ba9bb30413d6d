import io
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List

import mido
import requests
import soundfile as sf

from .playback import NOTE_DURATION, NOTE_GAP, expected_duration

logger = logging.getLogger(__name__)

SF2_DIR = Path.home() / ".degreetrainer" / "sf2"

# Compressed SF2; FluidSynth reads SF3 natively
DEFAULT_SF2_URL = "https://github.com/musescore/MuseScore/raw/2.3.2/share/sound/FluidR3Mono_GM.sf3"

ENV_SF2_PATH = os.environ.get("DEGREETRAINER_SF2_PATH")

ACOUSTIC_GRAND = 0
SAMPLE_RATE = 44100


def _which(cmd: str) -> bool:
	return shutil.which(cmd) is not None


def get_sf2_path() -> Path:
	if ENV_SF2_PATH:
		return Path(ENV_SF2_PATH)
	return SF2_DIR / "FluidR3Mono_GM.sf3"


def ensure_sf2() -> None:
	p = get_sf2_path()
	if p.exists() or ENV_SF2_PATH:
		return
	p.parent.mkdir(parents=True, exist_ok=True)
	logger.info("Downloading soundfont to %s", p)
	try:
		response = requests.get(DEFAULT_SF2_URL, timeout=30)
		response.raise_for_status()
	except requests.RequestException as e:
		logger.warning("Soundfont download failed: %s", e)
		return
	p.write_bytes(response.content)


def is_piano_available() -> bool:
	"""Check if FluidSynth and a soundfont are available for rendering."""
	if not _which("fluidsynth"):
		return False
	ensure_sf2()
	return get_sf2_path().exists()


def _write_midi(temp_mid: Path, notes: List[int], volume: float) -> None:
	mid = mido.MidiFile()
	trk = mido.MidiTrack()
	mid.tracks.append(trk)
	# 120 BPM: 1 beat = 0.5s
	trk.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(120), time=0))
	trk.append(mido.Message('program_change', program=ACOUSTIC_GRAND, time=0))
	vel = max(1, min(127, int(60 + 60 * volume)))
	tpb = mid.ticks_per_beat
	note_ticks = int(tpb * NOTE_DURATION / 0.5)
	gap_ticks = int(tpb * NOTE_GAP / 0.5)
	for i, m in enumerate(notes):
		trk.append(mido.Message('note_on', note=m, velocity=vel, time=0 if i == 0 else gap_ticks))
		trk.append(mido.Message('note_off', note=m, velocity=0, time=note_ticks))
	mid.save(temp_mid.as_posix())


def _trim_to_duration(wav_bytes: bytes, seconds: float, sr_target: int = SAMPLE_RATE) -> bytes:
	data, sr = sf.read(io.BytesIO(wav_bytes), dtype='float32')
	if data.ndim == 2:
		data = data.mean(axis=1)
	data = data[:int(sr_target * seconds)]
	buf = io.BytesIO()
	sf.write(buf, data, sr_target, format='WAV')
	return buf.getvalue()


def render_piano_bytes(notes: List[int], volume: float) -> bytes:
	"""Render MIDI note numbers one after another with the soundfont piano."""
	ensure_sf2()
	sf2 = get_sf2_path()
	if not sf2.exists():
		raise RuntimeError("Soundfont not available. Set DEGREETRAINER_SF2_PATH to a valid .sf2/.sf3")
	if not _which("fluidsynth"):
		raise RuntimeError("fluidsynth not found")

	with tempfile.TemporaryDirectory() as td:
		dirp = Path(td)
		midp = dirp / "tmp.mid"
		wavp = dirp / "out.wav"
		_write_midi(midp, notes, volume)
		cmd = [
			"fluidsynth",
			"-ni",
			"-g", "1.2",
			"-R", "0",
			"-C", "0",
			"-r", str(SAMPLE_RATE),
			"-F", wavp.as_posix(),
			sf2.as_posix(),
			midp.as_posix(),
		]
		proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
		if proc.returncode != 0 or not wavp.exists():
			raise RuntimeError(f"fluidsynth failed: {proc.stderr.decode(errors='ignore')}")
		return _trim_to_duration(wavp.read_bytes(), expected_duration(len(notes)))
