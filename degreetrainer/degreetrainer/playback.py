from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

NOTE_DURATION = 0.5
NOTE_GAP = 0.1


def expected_duration(count: int) -> float:
	"""Audible length in seconds of a melody of ``count`` notes."""
	return max(0, count) * (NOTE_DURATION + NOTE_GAP)


class PlaybackPort(Protocol):
	async def play(self, notes: List[str]) -> None:
		...


class TimedPlayback(ABC):
	"""Playback that renders the notes, then waits out their audible duration.

	``play`` never returns before ``expected_duration(len(notes))`` has elapsed
	on ``clock``, however long ``render`` took or however early ``sleep`` woke up.
	"""

	def __init__(
		self,
		clock: Optional[Callable[[], float]] = None,
		sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
	) -> None:
		self._clock = clock
		self._sleep = sleep

	@abstractmethod
	def render(self, notes: List[str]) -> None:
		...

	async def play(self, notes: List[str]) -> None:
		clock = self._clock or asyncio.get_running_loop().time
		deadline = clock() + expected_duration(len(notes))
		logger.debug("Playing %s", " ".join(notes))
		self.render(notes)
		remaining = deadline - clock()
		while remaining > 0:
			await self._sleep(remaining)
			remaining = deadline - clock()


class SilentPlayback(TimedPlayback):
	"""Keeps the timing contract without producing sound."""

	def __init__(self, *args, **kwargs) -> None:
		super().__init__(*args, **kwargs)
		self.played: List[List[str]] = []

	def render(self, notes: List[str]) -> None:
		self.played.append(list(notes))
