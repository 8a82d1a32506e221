#!/usr/bin/env python3

"""
Unroll repeat barlines and ending brackets into a linear playback order.

The builder is fed bar by bar from the first part of the score. Every
contiguous run of bars played in one pass becomes a Segment tagged with the
verse it is played for, or None for bars played once. A bare repeat without
endings is played twice. Ending brackets are played in verse order, each
preceded by the common bars of the repeat.
"""

from dataclasses import dataclass, field

import logging
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from .errors import RepeatError, ScoreFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    verse: Optional[int]
    bars: range


class BarTick(NamedTuple):
    index: int
    verse: Optional[int]
    tick: int


@dataclass
class Repeats:
    first_bar_number: int
    durations: List[int] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)

    @property
    def bar_count(self) -> int:
        return len(self.durations)

    def bars(self) -> Iterator[BarTick]:
        """
        Replays the segments in playback order.

        Each call starts a fresh pass. The tick is a running total over the
        whole pass, so it keeps growing across repeated bars.

        Yields:
            BarTick: Bar index, verse tag and the tick at which the bar starts.
        """
        tick: int = 0
        for segment in self.segments:
            for index in segment.bars:
                yield BarTick(index, segment.verse, tick)
                tick += self.durations[index]


# Builder states. `bar` is the bar index the state was entered at, or for the
# stop states the first bar after the closing barline.


@dataclass(frozen=True)
class _Normal:
    bar: int


@dataclass(frozen=True)
class _RepeatStart:
    bar: int


@dataclass(frozen=True)
class _EndingStart:
    bar: int
    verses: Tuple[int, ...]


@dataclass(frozen=True)
class _EndingStop:
    bar: int
    verses: Tuple[int, ...]


@dataclass(frozen=True)
class _RepeatStop:
    bar: int


_State = Union[_Normal, _RepeatStart, _EndingStart, _EndingStop, _RepeatStop]


def _verse_list(verses: Tuple[int, ...]) -> str:
    return ",".join(str(verse + 1) for verse in verses)


class RepeatsBuilder:
    """
    Accumulates bar durations and repeat marks, then builds Repeats once.

    Bar numbers in error messages are the numbers printed in the score.
    """

    def __init__(self, first_bar_number: int) -> None:
        self.first_bar_number: int = first_bar_number
        self.durations: List[int] = []
        self.segments: List[Segment] = []
        self.bar: int = 0
        self.position: int = 0
        self.duration: int = 0
        self.state: _State = _Normal(0)
        self.common: range = range(0)
        self.endings: Dict[int, range] = {}
        self._built: bool = False

    def _number(self, index: int) -> int:
        return self.first_bar_number + index

    def _push(self, verse: Optional[int], bars: range) -> None:
        if len(bars) > 0:
            self.segments.append(Segment(verse, bars))

    def _end_bar(self) -> None:
        self.durations.append(self.duration)
        self.position = 0
        self.duration = 0

    def _next_verse(self) -> int:
        verse: int = 0
        while verse in self.endings:
            verse += 1
        return verse

    def next_bar(self, number: int) -> None:
        expected: int = self._number(self.bar + 1)
        if number != expected:
            raise ScoreFormatError(f"Unexpected bar {number}, expecting {expected}")
        self._end_bar()
        self.bar += 1

    def forward(self, ticks: int) -> None:
        self.position += ticks
        self.duration = max(self.duration, self.position)

    def backward(self, ticks: int) -> None:
        if ticks > self.position:
            raise ScoreFormatError(
                f"<backup> of {ticks} ticks before the start of bar {self._number(self.bar)}"
            )
        self.position -= ticks

    def repeat_start(self) -> None:
        state: _State = self.state
        if isinstance(state, _Normal):
            self._push(None, range(state.bar, self.bar))
        elif isinstance(state, _RepeatStop):
            self._repeat_open(range(state.bar, self.bar))
        else:
            raise RepeatError(
                f"Start of repeat at bar {self._number(self.bar)} inside repeat from bar {self._number(state.bar)}"
            )
        self.state = _RepeatStart(self.bar)

    def repeat_end(self) -> None:
        state: _State = self.state
        here: int = self._number(self.bar)
        if isinstance(state, _Normal):
            if state.bar > 0:
                raise RepeatError(f"End of repeat at bar {here} without start of repeat")
            # Repeat from the start of the score
            self.common = range(0, self.bar + 1)
            self.endings = {}
        elif isinstance(state, _RepeatStart):
            self.common = range(state.bar, self.bar + 1)
            self.endings = {}
        elif isinstance(state, _EndingStop):
            if state.bar != self.bar + 1:
                raise RepeatError(
                    f"End of repeat at bar {here} does not close ending {_verse_list(state.verses)}"
                    f" ending at bar {self._number(state.bar - 1)}"
                )
        elif isinstance(state, _EndingStart):
            raise RepeatError(
                f"End of repeat at bar {here} inside ending {_verse_list(state.verses)}"
                f" from bar {self._number(state.bar)}"
            )
        elif isinstance(state, _RepeatStop):
            raise RepeatError(f"End of repeat at bar {here} without start of repeat")
        else:
            raise TypeError(f"Unknown repeat state {state!r}")
        self.state = _RepeatStop(self.bar + 1)

    def ending_start(self, verses: Tuple[int, ...]) -> None:
        state: _State = self.state
        here: int = self._number(self.bar)
        if not verses:
            raise RepeatError(f"Ending at bar {here} has no verses")
        if isinstance(state, _Normal):
            if state.bar > 0:
                raise RepeatError(f"Ending at bar {here} without start of repeat")
            self.common = range(0, self.bar)
            self.endings = {}
        elif isinstance(state, _RepeatStart):
            self.common = range(state.bar, self.bar)
            self.endings = {}
        elif isinstance(state, _RepeatStop):
            if state.bar != self.bar:
                raise RepeatError(
                    f"Ending at bar {here} does not follow the end of repeat at bar {self._number(state.bar - 1)}"
                )
            if not self.endings:
                # Earlier passes of a bare repeat go straight on to this ending
                for verse in range(verses[0]):
                    self.endings[verse] = range(self.bar, self.bar)
            expected: int = self._next_verse()
            if verses[0] != expected:
                raise RepeatError(f"Ending {_verse_list(verses)} at bar {here}, expecting ending {expected + 1}")
        else:
            raise RepeatError(
                f"Ending {_verse_list(verses)} at bar {here} inside ending from bar {self._number(state.bar)}"
            )
        self.state = _EndingStart(self.bar, verses)

    def ending_end(self, verses: Tuple[int, ...], is_final: bool) -> None:
        state: _State = self.state
        here: int = self._number(self.bar)
        if not isinstance(state, _EndingStart):
            raise RepeatError(f"End of ending {_verse_list(verses)} at bar {here} without start of ending")
        if state.verses != verses:
            raise RepeatError(
                f"End of ending {_verse_list(verses)} at bar {here} closes ending"
                f" {_verse_list(state.verses)} from bar {self._number(state.bar)}"
            )
        bars = range(state.bar, self.bar + 1)
        for verse in verses:
            if verse in self.endings:
                raise RepeatError(
                    f"Ending {verse + 1} at bar {self._number(self.endings[verse].start)}"
                    f" is duplicated as bar {self._number(state.bar)}"
                )
            self.endings[verse] = bars
        if is_final:
            if len(verses) != 1:
                raise RepeatError(
                    f"Final ending {_verse_list(verses)} at bar {self._number(state.bar)} must be for a single verse"
                )
            self._repeat_closed(verses[0] + 1)
            self.state = _Normal(self.bar + 1)
        else:
            self.state = _EndingStop(self.bar + 1, verses)

    def _repeat_closed(self, count: int) -> None:
        for verse in range(count):
            if verse not in self.endings:
                raise RepeatError(
                    f"Missing ending {verse + 1} for repeat from bar {self._number(self.common.start)}"
                )
            self._push(verse, self.common)
            self._push(verse, self.endings.pop(verse))
        self.endings = {}

    def _repeat_open(self, tail: range) -> None:
        if not self.endings:
            for verse in (0, 1):
                self._push(verse, self.common)
        else:
            self._repeat_closed(max(self.endings) + 1)
        self._push(None, tail)

    def build(self) -> Repeats:
        if self._built:
            raise RuntimeError("Repeats have already been built")
        self._built = True
        self._end_bar()
        end: int = self.bar + 1
        if isinstance(self.state, (_RepeatStart, _EndingStop)):
            self.repeat_end()
        if isinstance(self.state, _EndingStart):
            self.ending_end(self.state.verses, True)

        state: _State = self.state
        if isinstance(state, _Normal):
            self._push(None, range(state.bar, end))
        elif isinstance(state, _RepeatStop):
            self._repeat_open(range(state.bar, end))
        else:
            raise TypeError(f"Unknown repeat state {state!r}")
        logger.debug(f"Resolved {len(self.durations)} bars into {len(self.segments)} segments")
        return Repeats(self.first_bar_number, self.durations, self.segments)
