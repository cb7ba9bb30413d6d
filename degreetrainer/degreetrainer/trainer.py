from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence as Seq

from .models import (
	AddDegree,
	Advance,
	Event,
	Grade,
	MachineState,
	PlaybackFinished,
	PlayNotes,
	RemoveLast,
	Replay,
	Retry,
	Reveal,
	Round,
	Sequence,
	Start,
	Submit,
	Transition,
)
from .notation import parse_sequences
from .playback import PlaybackPort

logger = logging.getLogger(__name__)


class SequenceCollection:
	def __init__(self, sequences: Iterable[Sequence] = ()) -> None:
		self._sequences: List[Sequence] = list(sequences)

	@classmethod
	def from_notation(cls, raw: str) -> "SequenceCollection":
		return cls(parse_sequences(raw))

	def __len__(self) -> int:
		return len(self._sequences)

	def __getitem__(self, idx: int) -> Sequence:
		return self._sequences[idx]

	def __iter__(self) -> Iterator[Sequence]:
		return iter(self._sequences)

	def pick(self, exclude: Optional[int] = None, rng: Any = None) -> int:
		"""Index of a uniformly chosen sequence, never ``exclude`` unless it is the only one."""
		if not self._sequences:
			raise ValueError("cannot pick from an empty collection")
		if len(self._sequences) == 1:
			return 0
		candidates = [i for i in range(len(self._sequences)) if i != exclude]
		return (rng or random).choice(candidates)


def grade(answer: Seq[int], target: Seq[int]) -> Grade:
	if len(answer) == len(target) and all(a == t for a, t in zip(answer, target)):
		return "correct"
	return "incorrect"


def _ignore(state: MachineState, event: Event, reason: str) -> Transition:
	logger.debug("Ignoring %s in %s: %s", type(event).__name__, state.phase, reason)
	return Transition(state=state)


def _begin_round(state: MachineState, collection: SequenceCollection, rng: Any) -> Transition:
	sid = collection.pick(exclude=state.last_sequence_id, rng=rng)
	new_state = state.model_copy(update={
		"phase": "playing",
		"round": Round(sequence_id=sid),
		"last_sequence_id": sid,
		"playback_pending": True,
	})
	return Transition(state=new_state, effects=(PlayNotes(notes=collection[sid].note_names),))


def transition(state: MachineState, event: Event, collection: SequenceCollection, rng: Any = None) -> Transition:
	"""Apply one event to the round state.

	Pure: returns the next state plus the playback requests it needs. Requests
	that do not make sense in the current state return ``state`` unchanged and
	no effects. A new playback is never requested while one is in flight.
	"""
	if isinstance(event, PlaybackFinished):
		if not state.playback_pending:
			return _ignore(state, event, "no playback in flight")
		update: Dict[str, Any] = {"playback_pending": False}
		if state.phase == "playing":
			update["phase"] = "answering"
		return Transition(state=state.model_copy(update=update))

	if isinstance(event, Start):
		if state.phase != "idle":
			return _ignore(state, event, "round already started")
		if len(collection) == 0:
			return _ignore(state, event, "no sequences configured")
		return _begin_round(state, collection, rng)

	rnd = state.round
	if rnd is None:
		return _ignore(state, event, "no round in progress")

	if isinstance(event, AddDegree):
		if state.phase != "answering":
			return _ignore(state, event, "not answering")
		return Transition(state=state.model_copy(update={
			"round": rnd.model_copy(update={"answer": rnd.answer + (event.degree,)}),
		}))

	if isinstance(event, RemoveLast):
		if state.phase != "answering" or not rnd.answer:
			return _ignore(state, event, "nothing to remove")
		return Transition(state=state.model_copy(update={
			"round": rnd.model_copy(update={"answer": rnd.answer[:-1]}),
		}))

	if isinstance(event, Replay):
		if state.phase not in ("answering", "result"):
			return _ignore(state, event, "nothing to replay")
		if state.playback_pending:
			return _ignore(state, event, "playback in flight")
		return Transition(
			state=state.model_copy(update={"playback_pending": True}),
			effects=(PlayNotes(notes=collection[rnd.sequence_id].note_names),),
		)

	if isinstance(event, Submit):
		if state.phase != "answering" or not rnd.answer:
			return _ignore(state, event, "no answer to grade")
		result = grade(rnd.answer, collection[rnd.sequence_id].degrees)
		logger.info("Graded %s as %s", list(rnd.answer), result)
		return Transition(state=state.model_copy(update={
			"phase": "result",
			"round": rnd.model_copy(update={"result": result}),
		}))

	if isinstance(event, Retry):
		if state.phase != "result" or rnd.result != "incorrect" or rnd.revealed:
			return _ignore(state, event, "retry needs an unrevealed wrong answer")
		if state.playback_pending:
			return _ignore(state, event, "playback in flight")
		return Transition(
			state=state.model_copy(update={
				"phase": "playing",
				"round": rnd.model_copy(update={"answer": (), "result": None}),
				"playback_pending": True,
			}),
			effects=(PlayNotes(notes=collection[rnd.sequence_id].note_names),),
		)

	if isinstance(event, Reveal):
		if state.phase != "result" or rnd.result != "incorrect":
			return _ignore(state, event, "reveal needs a wrong answer")
		return Transition(state=state.model_copy(update={
			"round": rnd.model_copy(update={"revealed": True}),
		}))

	if isinstance(event, Advance):
		if state.phase != "result" or not (rnd.result == "correct" or rnd.revealed):
			return _ignore(state, event, "round not finished")
		if state.playback_pending:
			return _ignore(state, event, "playback in flight")
		return _begin_round(state, collection, rng)

	return _ignore(state, event, "unknown event")


class RoundMachine:
	"""Owns the active round and runs the playback it requests.

	``send`` applies an event and, if playback was requested, awaits it and
	feeds the completion back in. While that await is suspended other events
	may still be sent; further playback requests are refused until it ends.
	"""

	def __init__(self, collection: SequenceCollection, playback: PlaybackPort, rng: Any = None) -> None:
		self.collection = collection
		self.playback = playback
		self.rng = rng
		self.state = MachineState()

	@property
	def phase(self) -> str:
		return self.state.phase

	@property
	def current(self) -> Optional[Sequence]:
		if self.state.round is None:
			return None
		return self.collection[self.state.round.sequence_id]

	@property
	def answer(self) -> List[int]:
		return list(self.state.round.answer) if self.state.round else []

	@property
	def target_visible(self) -> bool:
		return self.state.round is not None and self.state.round.revealed

	async def send(self, event: Event) -> MachineState:
		result = transition(self.state, event, self.collection, self.rng)
		self.state = result.state
		for effect in result.effects:
			await self._play(effect)
		return self.state

	async def _play(self, effect: PlayNotes) -> None:
		try:
			await self.playback.play(list(effect.notes))
		finally:
			self.state = transition(self.state, PlaybackFinished(), self.collection, self.rng).state
