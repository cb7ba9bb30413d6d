from __future__ import annotations

from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .theory import degree_of


Letter = Literal["A", "B", "C", "D", "E", "F", "G"]
GameState = Literal["idle", "playing", "answering", "result"]
Grade = Literal["correct", "incorrect"]
Waveform = Literal["sine", "triangle", "saw", "piano"]


class Settings(BaseModel):
	solfege: bool = Field(default=False)
	waveform: Waveform = Field(default="piano")
	volume: float = Field(default=0.9, ge=0.0, le=1.0)


class Pitch(BaseModel):
	model_config = ConfigDict(frozen=True)

	letter: Letter
	# Single digit; ABC modifiers are clamped to 0-7 by the parser
	octave: int = Field(ge=0, le=9)

	@property
	def name(self) -> str:
		return f"{self.letter}{self.octave}"

	def __str__(self) -> str:
		return self.name


class Sequence(BaseModel):
	"""A melody and the scale degree of each of its notes."""

	model_config = ConfigDict(frozen=True)

	notes: Tuple[Pitch, ...] = Field(min_length=1)
	degrees: Tuple[int, ...]

	@model_validator(mode="after")
	def _degrees_match_notes(self) -> "Sequence":
		if len(self.notes) != len(self.degrees):
			raise ValueError("notes and degrees must have the same length")
		for note, degree in zip(self.notes, self.degrees):
			if degree != degree_of(note.letter):
				raise ValueError(f"degree {degree} does not match note {note.name}")
		return self

	@classmethod
	def from_pitches(cls, pitches: Tuple[Pitch, ...]) -> "Sequence":
		return cls(notes=tuple(pitches), degrees=tuple(degree_of(p.letter) for p in pitches))

	@property
	def note_names(self) -> Tuple[str, ...]:
		return tuple(p.name for p in self.notes)


class Round(BaseModel):
	model_config = ConfigDict(frozen=True)

	sequence_id: int
	answer: Tuple[int, ...] = ()
	result: Optional[Grade] = None
	revealed: bool = False


class MachineState(BaseModel):
	model_config = ConfigDict(frozen=True)

	phase: GameState = "idle"
	round: Optional[Round] = None
	last_sequence_id: Optional[int] = None
	playback_pending: bool = False


# Events fed into the round state machine

class Start(BaseModel):
	model_config = ConfigDict(frozen=True)


class AddDegree(BaseModel):
	model_config = ConfigDict(frozen=True)

	degree: int = Field(ge=1, le=7)


class RemoveLast(BaseModel):
	model_config = ConfigDict(frozen=True)


class Replay(BaseModel):
	model_config = ConfigDict(frozen=True)


class Submit(BaseModel):
	model_config = ConfigDict(frozen=True)


class Retry(BaseModel):
	model_config = ConfigDict(frozen=True)


class Reveal(BaseModel):
	model_config = ConfigDict(frozen=True)


class Advance(BaseModel):
	model_config = ConfigDict(frozen=True)


class PlaybackFinished(BaseModel):
	model_config = ConfigDict(frozen=True)


Event = Union[Start, AddDegree, RemoveLast, Replay, Submit, Retry, Reveal, Advance, PlaybackFinished]


class PlayNotes(BaseModel):
	model_config = ConfigDict(frozen=True)

	notes: Tuple[str, ...]


class Transition(BaseModel):
	model_config = ConfigDict(frozen=True)

	state: MachineState
	effects: Tuple[PlayNotes, ...] = ()
