from typing import Iterable, List

NOTE_TO_DEGREE = {
	"C": 1,
	"D": 2,
	"E": 3,
	"F": 4,
	"G": 5,
	"A": 6,
	"B": 7,
}

DEGREE_LABELS = ["1", "2", "3", "4", "5", "6", "7"]
SOLFEGE_LABELS = ["Do", "Re", "Mi", "Fa", "Sol", "La", "Ti"]

# Semitones above C within one octave
PITCH_CLASS = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}

MIN_OCTAVE = 0
MAX_OCTAVE = 7

A4_MIDI = 69
A4_FREQ = 440.0


def degree_of(letter: str) -> int:
	"""Scale degree of a note letter in C major, 0 when the letter is unknown."""
	return NOTE_TO_DEGREE.get(letter.upper(), 0)


def degree_label(degree: int, solfege: bool = False) -> str:
	labels = SOLFEGE_LABELS if solfege else DEGREE_LABELS
	return labels[degree - 1]


def midi_to_freq(m: int) -> float:
	return float(A4_FREQ * (2.0 ** ((m - A4_MIDI) / 12.0)))


def note_to_midi(note: str) -> int:
	"""Convert a canonical note name such as "C4" to a MIDI number (C4 = 60)."""
	letter, octave = note[:1].upper(), note[1:]
	if letter not in PITCH_CLASS or len(octave) != 1 or octave not in "0123456789":
		raise ValueError(f"not a canonical note name: {note!r}")
	return (int(octave) + 1) * 12 + PITCH_CLASS[letter]


def notes_to_freqs(notes: Iterable[str]) -> List[float]:
	return [midi_to_freq(note_to_midi(n)) for n in notes]
