"""Parser for the compact melody notation.

Melodies are separated by ``;``. Inside a melody each note is a letter A-G
followed either by one octave digit (``C5``) or by ABC-style modifiers:
``C`` is C4, ``c`` is C5, every ``,`` lowers and every ``'`` raises the
octave by one. No separators are needed between notes, so ``"CFGc"`` is
four notes. A melody containing any note that cannot be read is dropped
as a whole.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from .models import Pitch, Sequence
from .theory import MAX_OCTAVE, MIN_OCTAVE, degree_of

logger = logging.getLogger(__name__)

SEGMENT_SEP = ";"
UPPER_OCTAVE = 4
LOWER_OCTAVE = 5

_TOKEN_RE = re.compile(r"[A-Ga-g](?:[0-9]|[,']*)")
_EXPLICIT_RE = re.compile(r"^([A-Ga-g])([0-9])$")
_ABC_RE = re.compile(r"^([A-Ga-g])([,']*)$")
_WHITESPACE_RE = re.compile(r"\s+")


def tokenize_notes(segment: str) -> List[str]:
	stripped = _WHITESPACE_RE.sub("", segment)
	return _TOKEN_RE.findall(stripped)


def normalize_note(token: str) -> Optional[Pitch]:
	"""Turn one token into a Pitch, or None if the token has neither shape."""
	explicit = _EXPLICIT_RE.match(token)
	if explicit:
		return Pitch(letter=explicit.group(1).upper(), octave=int(explicit.group(2)))

	abc = _ABC_RE.match(token)
	if not abc:
		return None
	letter, modifiers = abc.group(1), abc.group(2)
	octave = LOWER_OCTAVE if letter.islower() else UPPER_OCTAVE
	for ch in modifiers:
		if ch == ",":
			octave -= 1
		elif ch == "'":
			octave += 1
	octave = max(MIN_OCTAVE, min(MAX_OCTAVE, octave))
	return Pitch(letter=letter.upper(), octave=octave)


def parse_segment(segment: str) -> Optional[Sequence]:
	pitches: List[Pitch] = []
	for tok in tokenize_notes(segment):
		pitch = normalize_note(tok)
		if pitch is None or degree_of(pitch.letter) == 0:
			logger.debug("Dropping segment %r: unreadable note %r", segment, tok)
			return None
		pitches.append(pitch)
	if not pitches:
		logger.debug("Dropping segment %r: no notes", segment)
		return None
	return Sequence.from_pitches(tuple(pitches))


def parse_sequences(raw: str) -> List[Sequence]:
	segments = [s.strip() for s in (raw or "").split(SEGMENT_SEP)]
	out: List[Sequence] = []
	for seg in segments:
		if not seg:
			continue
		seq = parse_segment(seg)
		if seq is not None:
			out.append(seq)
	logger.debug("Parsed %d of %d segments", len(out), sum(1 for s in segments if s))
	return out
