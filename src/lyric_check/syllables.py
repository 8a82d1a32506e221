#!/usr/bin/env python3

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum

import logging
from typing import Dict, List, Optional

from .errors import ScoreFormatError
from .repeats import Repeats

logger = logging.getLogger(__name__)


class Kind(IntEnum):
    """Position of a syllable within its word, ordered for sorting."""

    SINGLE = 0
    BEGIN = 1
    MIDDLE = 2
    END = 3

    @classmethod
    def from_syllabic(cls, syllabic: str) -> "Kind":
        try:
            return cls[syllabic.strip().upper()]
        except KeyError:
            raise ScoreFormatError(f"Unexpected <lyric><syllabic> `{syllabic}`") from None


@dataclass(frozen=True, order=True)
class Syllable:
    """
    One lyric syllable. Ticks are bar relative until replayed.

    Ordering compares start, end, kind and text only.
    """

    start: int
    end: int
    kind: Kind
    text: str
    verse: int = field(default=0, compare=False)
    voice: int = field(default=0, compare=False)

    def shifted(self, ticks: int) -> "Syllable":
        return dataclasses.replace(self, start=self.start + ticks, end=self.end + ticks)


class SyllableCollector:
    """
    Buckets one part's syllables by bar and verse, then replays them in
    playback order with absolute ticks.
    """

    def __init__(self, repeats: Repeats, part_id: str = "") -> None:
        self.repeats: Repeats = repeats
        self.part_id: str = part_id
        self.next_number: int = repeats.first_bar_number
        self.bars: List[Dict[int, List[Syllable]]] = []
        self.current: Optional[Dict[int, List[Syllable]]] = None
        self.tick: int = 0
        self.has_lyrics: bool = False
        self._finished: bool = False

    def _flush(self) -> None:
        if self.current is not None:
            self.bars.append({verse: sorted(bucket) for verse, bucket in self.current.items()})
            self.current = None

    def bar_start(self, number: int) -> None:
        if number != self.next_number:
            raise ScoreFormatError(
                f"Unexpected bar {number} in part {self.part_id}, expecting {self.next_number}"
            )
        self.next_number += 1
        self._flush()
        self.current = {}
        self.tick = 0

    def forward(self, ticks: int) -> None:
        self.tick += ticks

    def backward(self, ticks: int) -> None:
        if ticks > self.tick:
            raise ScoreFormatError(
                f"<backup> of {ticks} ticks before the start of bar {self.next_number - 1} in part {self.part_id}"
            )
        self.tick -= ticks

    def lyric(self, voice: int, verse: int, kind: Kind, text: str, ticks: int) -> None:
        if self.current is None:
            raise ScoreFormatError(f"Lyric `{text}` outside <measure> in part {self.part_id}")
        self.has_lyrics = True
        syllable = Syllable(self.tick, self.tick + ticks, kind, text, verse, voice)
        self.current.setdefault(verse, []).append(syllable)

    def part_end(self) -> Optional[List[Syllable]]:
        """
        Finishes the part.

        Returns:
            Optional[List[Syllable]]: Syllables with absolute ticks in playback order,
            or None if the part has no lyrics.
        """
        if self._finished:
            raise RuntimeError(f"Part {self.part_id} has already been finished")
        self._finished = True
        self._flush()
        if not self.has_lyrics:
            logger.debug(f"Part {self.part_id} has no lyrics")
            self.bars = []
            return None
        if len(self.bars) != self.repeats.bar_count:
            raise ScoreFormatError(
                f"Part {self.part_id} has {len(self.bars)} bars, expecting {self.repeats.bar_count}"
            )

        syllables: List[Syllable] = []
        for bar in self.repeats.bars():
            buckets: Dict[int, List[Syllable]] = self.bars[bar.index]
            common: List[Syllable] = buckets.get(0, [])
            if not bar.verse:
                chosen: List[Syllable] = common
            else:
                specific: List[Syllable] = buckets.get(bar.verse, [])
                # Shared syllables only fill in after the verse's own ones
                after: int = specific[-1].end if specific else 0
                chosen = sorted(specific + [s for s in common if s.start >= after])
            syllables.extend(syllable.shifted(bar.tick) for syllable in chosen)
        return syllables
