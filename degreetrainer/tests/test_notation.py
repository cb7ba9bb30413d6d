from degreetrainer.models import Pitch
from degreetrainer.notation import normalize_note, parse_sequences, tokenize_notes


def test_tokenize_dense_abc():
	assert tokenize_notes("CFGc") == ["C", "F", "G", "c"]
	assert tokenize_notes("C,E G c'") == ["C,", "E", "G", "c'"]
	assert tokenize_notes("C5 F5\tG5") == ["C5", "F5", "G5"]


def test_normalize_default_octaves_match_explicit():
	assert normalize_note("C") == normalize_note("C4") == Pitch(letter="C", octave=4)
	assert normalize_note("c") == normalize_note("C5") == Pitch(letter="C", octave=5)
	assert normalize_note("f4") == Pitch(letter="F", octave=4)


def test_normalize_modifiers():
	assert normalize_note("C,").name == "C3"
	assert normalize_note("c'").name == "C6"
	assert normalize_note("c',").name == "C5"
	assert normalize_note("B,,").name == "B2"


def test_normalize_clamps_octave():
	assert normalize_note("C,,,,,,,,").name == "C0"
	assert normalize_note("c''''''").name == "C7"


def test_explicit_octave_kept_verbatim():
	assert normalize_note("C8").name == "C8"
	assert normalize_note("b9").name == "B9"
	assert parse_sequences("C7 C8 B8")[0].note_names == ("C7", "C8", "B8")
	assert parse_sequences("C8")[0].degrees == (1,)


def test_normalize_rejects_other_shapes():
	assert normalize_note("H") is None
	assert normalize_note("C#") is None
	assert normalize_note("C45") is None
	assert normalize_note("") is None


def test_end_to_end_example():
	seqs = parse_sequences("CFGc;C,EGc")
	assert len(seqs) == 2
	assert seqs[0].note_names == ("C4", "F4", "G4", "C5")
	assert seqs[0].degrees == (1, 4, 5, 1)
	assert seqs[1].note_names == ("C3", "E4", "G4", "C5")
	assert seqs[1].degrees == (1, 3, 5, 1)


def test_empty_input():
	assert parse_sequences("") == []
	assert parse_sequences(" ; ;") == []


def test_segment_without_notes_is_dropped():
	seqs = parse_sequences("xyz;CDE")
	assert len(seqs) == 1
	assert seqs[0].note_names == ("C4", "D4", "E4")


def test_order_kept_and_duplicates_allowed():
	seqs = parse_sequences("GAB; CDE ;GAB")
	assert [s.degrees for s in seqs] == [(5, 6, 7), (1, 2, 3), (5, 6, 7)]


def test_every_degree_in_range():
	for seq in parse_sequences("CDEFGAB;cdefgab;C,D,E,;c'd'e'"):
		assert len(seq.notes) == len(seq.degrees)
		assert all(1 <= d <= 7 for d in seq.degrees)


def test_one_bad_token_drops_whole_segment(monkeypatch):
	from degreetrainer import notation

	monkeypatch.setattr(notation, "tokenize_notes", lambda seg: ["C", "D", "X", "E"] if seg == "bad" else ["G"])
	seqs = notation.parse_sequences("bad;good")
	assert len(seqs) == 1
	assert seqs[0].note_names == ("G4",)
