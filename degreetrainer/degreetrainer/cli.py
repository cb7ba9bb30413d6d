"""Command line helpers for checking notation and exporting melodies."""

import logging
import sys
from pathlib import Path

import click

from degreetrainer.audio import render_notes
from degreetrainer.notation import parse_sequences


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="degreetrainer", prog_name="degreetrainer")
@click.option("--verbose", "-v", is_flag=True, help="Log parser and playback decisions.")
def main(verbose: bool) -> None:
	"""Scale degree ear trainer tools."""
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)


@main.command()
@click.argument("raw")
def parse(raw: str) -> None:
	"""
	Show the melodies RAW notation parses to.

	\b
	Examples:
	  degreetrainer parse "CFGc;C,EGc"
	  degreetrainer parse "C5 F5 G5 C6"
	"""
	sequences = parse_sequences(raw)
	if not sequences:
		click.echo("No valid sequences found.", err=True)
		sys.exit(1)
	for i, seq in enumerate(sequences):
		notes = " ".join(seq.note_names)
		degrees = " ".join(str(d) for d in seq.degrees)
		click.echo(f"{i:>3}  {notes:<30}  {degrees}")


@main.command()
@click.argument("raw")
@click.option(
	"--output",
	"-o",
	required=True,
	metavar="PATH",
	help="Destination WAV file.",
)
@click.option(
	"--index",
	type=click.IntRange(min=0),
	default=0,
	show_default=True,
	help="Which of the parsed melodies to render.",
)
@click.option(
	"--waveform",
	type=click.Choice(["sine", "triangle", "saw", "piano"]),
	default="sine",
	show_default=True,
)
def render(raw: str, output: str, index: int, waveform: str) -> None:
	"""Write one melody from RAW notation to a WAV file."""
	sequences = parse_sequences(raw)
	if index >= len(sequences):
		click.echo(f"ERROR: {len(sequences)} valid sequence(s), no index {index}", err=True)
		sys.exit(1)
	notes = list(sequences[index].note_names)
	try:
		Path(output).write_bytes(render_notes(notes, waveform=waveform))
	except OSError as exc:
		click.echo(f"ERROR: Could not write WAV file: {exc}", err=True)
		sys.exit(1)
	click.echo(f"Wrote {' '.join(notes)} to '{output}'")


if __name__ == "__main__":
	main()
