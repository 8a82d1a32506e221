#!/usr/bin/env python3

from dataclasses import dataclass, field

import logging
from typing import Iterable, Iterator, List, Optional, Union

from .errors import ScoreFormatError
from .repeats import Repeats, RepeatsBuilder
from .score import (
    Backward,
    BarStart,
    EndingEnd,
    EndingStart,
    Event,
    Forward,
    Lyric,
    RepeatEnd,
    RepeatStart,
    part_events,
    read_document,
    score_parts,
    score_title,
)
from .syllables import Syllable, SyllableCollector
from .words import Phrase, Word, assemble

logger = logging.getLogger(__name__)


@dataclass
class Music:
    title: Optional[str] = None
    phrases: List[Phrase] = field(default_factory=list)

    def words(self) -> Iterator[Word]:
        for phrase in self.phrases:
            yield from phrase.words


def read_repeats(events: Iterable[Event]) -> Repeats:
    """
    Resolves the playback order from the reference part's events.

    Args:
        events (Iterable[Event]): Events of the first part.

    Returns:
        Repeats: Bar durations and segments in playback order.
    """
    builder: Optional[RepeatsBuilder] = None
    for event in events:
        if isinstance(event, BarStart):
            if builder is None:
                builder = RepeatsBuilder(event.number)
            else:
                builder.next_bar(event.number)
        elif builder is None:
            raise ScoreFormatError("Expecting <measure> before any notes")
        elif isinstance(event, Forward):
            builder.forward(event.ticks)
        elif isinstance(event, Backward):
            builder.backward(event.ticks)
        elif isinstance(event, RepeatStart):
            builder.repeat_start()
        elif isinstance(event, RepeatEnd):
            builder.repeat_end()
        elif isinstance(event, EndingStart):
            builder.ending_start(event.verses)
        elif isinstance(event, EndingEnd):
            builder.ending_end(event.verses, event.is_final)
    if builder is None:
        raise ScoreFormatError("Expecting at least one <measure> in the first <part>")
    return builder.build()


def collect_syllables(events: Iterable[Event], repeats: Repeats, part_id: str = "") -> Optional[List[Syllable]]:
    collector = SyllableCollector(repeats, part_id)
    for event in events:
        if isinstance(event, BarStart):
            collector.bar_start(event.number)
        elif isinstance(event, Forward):
            collector.forward(event.ticks)
        elif isinstance(event, Backward):
            collector.backward(event.ticks)
        elif isinstance(event, Lyric):
            collector.lyric(event.voice, event.verse, event.kind, event.text, event.ticks)
    return collector.part_end()


def merge_phrase(phrases: List[Phrase], other: Phrase, start: int) -> int:
    """
    Places a phrase from a secondary part into the primary phrase list.

    Only phrases from `start` onwards are considered, so phrases of one part
    must arrive in time order.

    Args:
        phrases (List[Phrase]): The primary phrases, modified in place.
        other (Phrase): The phrase to place.
        start (int): Index to start scanning from.

    Returns:
        int: The index to continue scanning from for the next phrase.
    """
    for index in range(start, len(phrases)):
        existing: Phrase = phrases[index]
        if existing == other:
            return index
        if other.start < existing.start and other.end < existing.end:
            logger.debug(f"Inserting phrase at {other.start} before phrase at {existing.start}")
            phrases.insert(index, other)
            return index + 1
    phrases.append(other)
    return len(phrases)


def merge_parts(parts: List[List[Phrase]]) -> List[Phrase]:
    """
    Merges the phrases of every other part into the first part's phrases.

    One cursor is shared by all the other parts, so a phrase is never placed
    before one that an earlier part has already matched.
    """
    if not parts:
        return []
    phrases: List[Phrase] = list(parts[0])
    cursor: int = 0
    for other in parts[1:]:
        for phrase in other:
            cursor = merge_phrase(phrases, phrase, cursor)
    return phrases


def read_music(xml: Union[str, bytes]) -> Music:
    """
    Reads the lyric timeline of a MusicXML score.

    The first part decides the repeat structure for all parts. Parts without
    lyrics are ignored, the rest are merged in score order.

    Args:
        xml (Union[str, bytes]): The score-partwise document.

    Returns:
        Music: Title and merged phrases.
    """
    root = read_document(xml)
    parts = score_parts(root)
    repeats: Repeats = read_repeats(part_events(parts[0]))

    lyric_parts: List[List[Phrase]] = []
    for index, part in enumerate(parts):
        part_id: str = part.get("id") or str(index + 1)
        syllables: Optional[List[Syllable]] = collect_syllables(part_events(part), repeats, part_id)
        if syllables is None:
            continue
        lyric_parts.append(assemble(syllables))

    music = Music(title=score_title(root), phrases=merge_parts(lyric_parts))
    logger.info(
        f"Read {len(parts)} parts, {len(lyric_parts)} with lyrics, {len(music.phrases)} phrases"
    )
    return music
