import pytest
from pydantic import ValidationError

from degreetrainer.models import AddDegree, Pitch, Sequence


def test_pitch_canonical_name():
	assert Pitch(letter="C", octave=5).name == "C5"
	assert str(Pitch(letter="B", octave=8)) == "B8"


def test_pitch_octave_is_one_digit():
	with pytest.raises(ValidationError):
		Pitch(letter="C", octave=-1)
	with pytest.raises(ValidationError):
		Pitch(letter="C", octave=10)


def test_pitch_rejects_lowercase_letter():
	with pytest.raises(ValidationError):
		Pitch(letter="c", octave=4)


def test_sequence_from_pitches_derives_degrees():
	seq = Sequence.from_pitches((Pitch(letter="C", octave=4), Pitch(letter="A", octave=3)))
	assert seq.degrees == (1, 6)
	assert seq.note_names == ("C4", "A3")


def test_sequence_rejects_mismatched_degrees():
	with pytest.raises(ValidationError):
		Sequence(notes=(Pitch(letter="C", octave=4),), degrees=(2,))
	with pytest.raises(ValidationError):
		Sequence(notes=(Pitch(letter="C", octave=4),), degrees=(1, 2))


def test_sequence_must_not_be_empty():
	with pytest.raises(ValidationError):
		Sequence(notes=(), degrees=())


def test_add_degree_range():
	assert AddDegree(degree=7).degree == 7
	with pytest.raises(ValidationError):
		AddDegree(degree=0)
	with pytest.raises(ValidationError):
		AddDegree(degree=8)
