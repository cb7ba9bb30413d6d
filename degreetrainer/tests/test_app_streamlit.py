from degreetrainer import app_streamlit
from degreetrainer.app_streamlit import dispatch, notation_from_query, settings_from_query
from degreetrainer.models import Start
from degreetrainer.trainer import RoundMachine, SequenceCollection


class BrokenPlayback:
	async def play(self, notes):
		raise RuntimeError("audio element failed")


def test_sequences_param_wins_over_s():
	assert notation_from_query({"sequences": "CDE", "s": "FGA"}) == "CDE"
	assert notation_from_query({"s": "FGA"}) == "FGA"
	assert notation_from_query({"sequences": "", "s": "FGA"}) == ""
	assert notation_from_query({}) == ""


def test_solfege_flag():
	assert settings_from_query({"solfege": "1"}).solfege
	assert settings_from_query({"solfege": "true"}).solfege
	assert not settings_from_query({"solfege": "no"}).solfege
	assert not settings_from_query({}).solfege


def test_dispatch_reruns_after_failed_playback(monkeypatch):
	reruns = []
	monkeypatch.setattr(app_streamlit.st, "rerun", lambda: reruns.append(True))
	machine = RoundMachine(SequenceCollection.from_notation("CDE"), BrokenPlayback())
	dispatch(machine, Start())
	assert reruns == [True]
	assert machine.phase == "answering"
	assert not machine.state.playback_pending
