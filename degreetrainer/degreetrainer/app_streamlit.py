import asyncio
import logging
from typing import Any, List, Mapping

import streamlit as st

from degreetrainer.audio import render_notes
from degreetrainer.models import AddDegree, Advance, Event, RemoveLast, Replay, Retry, Reveal, Settings, Start, Submit
from degreetrainer.playback import TimedPlayback
from degreetrainer.theory import degree_label
from degreetrainer.trainer import RoundMachine, SequenceCollection

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Scale Degree Trainer", page_icon=None, layout="centered")


class StreamlitPlayback(TimedPlayback):
	"""Autoplays the rendered melody in an audio element, then waits for it to finish."""

	def __init__(self, settings: Settings) -> None:
		super().__init__()
		self.settings = settings
		self.player: Any = None

	def render(self, notes: List[str]) -> None:
		bytes_ = _cached_audio_bytes(tuple(notes), self.settings.waveform, self.settings.volume)
		target = self.player if self.player is not None else st
		target.audio(bytes_, format="audio/wav", autoplay=True)


@st.cache_data(show_spinner=False)
def _cached_audio_bytes(notes: tuple, waveform: str, volume: float) -> bytes:
	return render_notes(list(notes), waveform=waveform, volume=volume)


def settings_from_query(params: Mapping[str, str]) -> Settings:
	solfege = params.get("solfege", "") in ("1", "true")
	return Settings(solfege=solfege)


def notation_from_query(params: Mapping[str, str]) -> str:
	raw = params.get("sequences")
	if raw is None:
		raw = params.get("s", "")
	return raw


def get_state() -> Any:
	params = st.query_params
	raw = notation_from_query(params)
	if st.session_state.get("raw") != raw or "machine" not in st.session_state:
		st.session_state.raw = raw
		st.session_state.settings = settings_from_query(params)
		collection = SequenceCollection.from_notation(raw)
		st.session_state.machine = RoundMachine(collection, StreamlitPlayback(st.session_state.settings))
		logger.info("Loaded %d sequences", len(collection))
	return st.session_state


def dispatch(machine: RoundMachine, event: Event) -> None:
	try:
		asyncio.run(machine.send(event))
	except Exception:
		# the machine has already released the round; show where it landed
		logger.exception("Handling %s failed", type(event).__name__)
	st.rerun()


def main() -> None:
	state = get_state()
	machine: RoundMachine = state.machine
	settings: Settings = state.settings

	st.title("Scale Degree Trainer")
	settings.solfege = st.sidebar.toggle("Do Re Mi labels", value=settings.solfege)

	if len(machine.collection) == 0:
		st.info("No sequences given. Add them to the URL, for example:")
		st.code("?s=CFGc;C,EGc")
		st.caption("ABC notation: C=C4, c=C5, C,=C3, c'=C6. Explicit octaves (C5) work too. Separate sequences with semicolons.")
		return

	machine.playback.player = st.empty()

	phase = machine.phase
	if phase == "idle":
		if st.button("Start", type="primary", use_container_width=True):
			dispatch(machine, Start())
		return

	answer = machine.answer
	st.markdown(f"**Your answer:** {', '.join(degree_label(d, settings.solfege) for d in answer) if answer else '—'}")

	btn_cols = st.columns(7)
	for idx in range(7):
		with btn_cols[idx]:
			label = degree_label(idx + 1, settings.solfege)
			if st.button(label, key=f"deg-{idx + 1}", disabled=phase != "answering", use_container_width=True):
				dispatch(machine, AddDegree(degree=idx + 1))

	rnd = machine.state.round
	if phase == "answering":
		cols = st.columns(3)
		with cols[0]:
			if st.button("Undo", disabled=not answer, use_container_width=True):
				dispatch(machine, RemoveLast())
		with cols[1]:
			if st.button("Play again", use_container_width=True):
				dispatch(machine, Replay())
		with cols[2]:
			if st.button("Check", type="primary", disabled=not answer, use_container_width=True):
				dispatch(machine, Submit())
	elif phase == "result" and rnd is not None:
		if rnd.result == "correct":
			st.success("Correct!")
		else:
			st.error("Not quite...")
		if rnd.result == "incorrect" and not rnd.revealed:
			cols = st.columns(2)
			with cols[0]:
				if st.button("Try again", type="primary", use_container_width=True):
					dispatch(machine, Retry())
			with cols[1]:
				if st.button("Show answer", use_container_width=True):
					dispatch(machine, Reveal())
		if machine.target_visible and machine.current is not None:
			st.write(f"Answer: {', '.join(degree_label(d, settings.solfege) for d in machine.current.degrees)}")
		if st.button("Play again", key="replay-result", use_container_width=True):
			dispatch(machine, Replay())
		if rnd.result == "correct" or rnd.revealed:
			if st.button("Next", type="primary", use_container_width=True):
				dispatch(machine, Advance())


if __name__ == "__main__":
	main()
