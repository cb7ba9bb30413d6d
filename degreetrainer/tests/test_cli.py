from click.testing import CliRunner

from degreetrainer.cli import main


def test_parse_lists_sequences():
	result = CliRunner().invoke(main, ["parse", "CFGc;C,EGc"])
	assert result.exit_code == 0
	lines = result.output.strip().splitlines()
	assert len(lines) == 2
	assert "C4 F4 G4 C5" in lines[0]
	assert lines[0].rstrip().endswith("1 4 5 1")
	assert "C3 E4 G4 C5" in lines[1]


def test_parse_nothing_valid_exits_nonzero():
	result = CliRunner().invoke(main, ["parse", ";;"])
	assert result.exit_code == 1


def test_render_writes_wav(tmp_path):
	out = tmp_path / "melody.wav"
	result = CliRunner().invoke(main, ["render", "CFGc;C,EGc", "--index", "1", "-o", str(out)])
	assert result.exit_code == 0, result.output
	assert out.read_bytes()[:4] == b"RIFF"
	assert "C3 E4 G4 C5" in result.output


def test_render_index_out_of_range(tmp_path):
	result = CliRunner().invoke(main, ["render", "CDE", "--index", "3", "-o", str(tmp_path / "x.wav")])
	assert result.exit_code == 1
	assert not (tmp_path / "x.wav").exists()
