#!/usr/bin/env python3

"""
Walk a MusicXML score-partwise document and turn every part into a flat
stream of events: bar starts, time moving forward or backward, repeat and
ending barlines, and lyric syllables.
"""

from dataclasses import dataclass
from lxml import etree

import logging
import re
from typing import Iterator, List, Optional, Tuple, Union

from .errors import ScoreFormatError
from .globals import CROTCHET, DEFAULT_VOICE, ENDING_TYPES, REPEAT_DIRECTIONS
from .syllables import Kind
from .utils.elements import attribute, child_text, iter_children, parse_document, parse_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarStart:
    number: int


@dataclass(frozen=True)
class Forward:
    ticks: int


@dataclass(frozen=True)
class Backward:
    ticks: int


@dataclass(frozen=True)
class RepeatStart:
    pass


@dataclass(frozen=True)
class RepeatEnd:
    pass


@dataclass(frozen=True)
class EndingStart:
    verses: Tuple[int, ...]


@dataclass(frozen=True)
class EndingEnd:
    verses: Tuple[int, ...]
    is_final: bool


@dataclass(frozen=True)
class Lyric:
    voice: int
    verse: int
    kind: Kind
    text: str
    ticks: int


Event = Union[BarStart, Forward, Backward, RepeatStart, RepeatEnd, EndingStart, EndingEnd, Lyric]

_VERSE_SUFFIX = re.compile(r"verse(\d+)$")
_VERSE_SEPARATOR = re.compile(r"[,\s]+")


def read_document(xml: Union[str, bytes]) -> etree._Element:
    root: etree._Element = parse_document(xml)
    if root.tag != "score-partwise":
        raise ScoreFormatError(f"Expecting root <score-partwise>, found <{root.tag}>")
    return root


def score_parts(root: etree._Element) -> List[etree._Element]:
    parts: List[etree._Element] = root.findall("part")
    if not parts:
        raise ScoreFormatError("Expecting at least one <part> in <score-partwise>")
    return parts


def score_title(root: etree._Element) -> Optional[str]:
    """Returns the work title, or the movement title when the work has none."""
    for path in ("work/work-title", "movement-title"):
        title: Optional[str] = root.findtext(path)
        if title and title.strip():
            return title.strip()
    return None


def parse_lyric_verse(number: Optional[str]) -> int:
    """
    Resolves a <lyric number="..."> attribute to a 0-based verse index.

    Args:
        number (Optional[str]): The attribute value, e.g. "1", "part1verse2" or "chorus".

    Returns:
        int: The verse index.
    """
    if number is None:
        return 0
    value: str = number.strip()
    match = _VERSE_SUFFIX.search(value)
    if match:
        verse: int = int(match.group(1))
    elif value.endswith("chorus"):
        verse = 1
    elif value.isdigit():
        verse = int(value)
    else:
        raise ScoreFormatError(f"Unexpected <lyric number=`{number}`>")
    if verse < 1:
        raise ScoreFormatError(f"Unexpected <lyric number=`{number}`>")
    return verse - 1


def parse_verses(number: str) -> Tuple[int, ...]:
    """Parses an ending number list like "1, 2" into sorted 0-based verses."""
    verses = set()
    for item in _VERSE_SEPARATOR.split(number.strip()):
        if not item.isdigit() or int(item) < 1:
            raise ScoreFormatError(f"Unexpected <ending number=`{number}`>")
        verses.add(int(item) - 1)
    return tuple(sorted(verses))


def _ticks(node: etree._Element, divisions: int) -> int:
    duration: int = parse_int(child_text(node, "duration"), f"<{node.tag}><duration>")
    return duration * CROTCHET // divisions


def _lyric_text(lyric: etree._Element) -> str:
    texts: List[str] = [(text.text or "").strip() for text in lyric.findall("text")]
    return " ".join(text for text in texts if text)


def _note_events(note: etree._Element, divisions: int) -> Iterator[Event]:
    if note.find("chord") is not None or note.find("grace") is not None:
        return
    ticks: int = _ticks(note, divisions)
    voice_text: Optional[str] = note.findtext("voice")
    voice: int = DEFAULT_VOICE
    if voice_text is not None:
        voice = parse_int(voice_text.strip(), "<note><voice>")
        if voice < 1:
            raise ScoreFormatError(f"Unexpected <note><voice> `{voice_text}`")
    for lyric in note.findall("lyric"):
        text: str = _lyric_text(lyric)
        if not text:
            logger.debug("Skipping <lyric> without text")
            continue
        yield Lyric(
            voice=voice - 1,
            verse=parse_lyric_verse(lyric.get("number")),
            kind=Kind.from_syllabic(lyric.findtext("syllabic") or "single"),
            text=text,
            ticks=ticks,
        )
    yield Forward(ticks)


def _barline_events(barline: etree._Element) -> Iterator[Event]:
    location: str = barline.get("location", "right")
    if location == "middle":
        return
    directions: List[str] = []
    for repeat in barline.findall("repeat"):
        direction: str = attribute(repeat, "direction")
        if direction not in REPEAT_DIRECTIONS:
            raise ScoreFormatError(f"Unexpected <repeat direction=`{direction}`>")
        directions.append(direction)
    endings: List[Tuple[str, Tuple[int, ...]]] = []
    for ending in barline.findall("ending"):
        ending_type: str = attribute(ending, "type")
        if ending_type not in ENDING_TYPES:
            raise ScoreFormatError(f"Unexpected <ending type=`{ending_type}`>")
        endings.append((ending_type, parse_verses(attribute(ending, "number"))))

    is_final: bool = "backward" not in directions
    if "forward" in directions:
        yield RepeatStart()
    for ending_type, verses in endings:
        if ending_type == "start":
            yield EndingStart(verses)
    for ending_type, verses in endings:
        if ending_type != "start":
            yield EndingEnd(verses, is_final)
    if "backward" in directions:
        yield RepeatEnd()


def part_events(part: etree._Element) -> Iterator[Event]:
    """
    Yields the events of one <part> in document order.

    Durations are scaled to CROTCHET ticks per quarter note using the
    part's <divisions>.

    Args:
        part (etree._Element): The <part> element.

    Yields:
        Event: One event at a time.
    """
    divisions: int = CROTCHET
    for measure in iter_children(part):
        if measure.tag != "measure":
            raise ScoreFormatError(f"Unexpected <{measure.tag}> in <part>")
        yield BarStart(parse_int(attribute(measure, "number"), "<measure number>"))
        for node in iter_children(measure):
            tag: str = node.tag
            if tag == "note":
                yield from _note_events(node, divisions)
            elif tag == "backup":
                yield Backward(_ticks(node, divisions))
            elif tag == "forward":
                yield Forward(_ticks(node, divisions))
            elif tag == "barline":
                yield from _barline_events(node)
            elif tag == "attributes":
                divisions_text: Optional[str] = node.findtext("divisions")
                if divisions_text is not None:
                    divisions = parse_int(divisions_text.strip(), "<attributes><divisions>")
                    if divisions == 0:
                        raise ScoreFormatError("Unexpected <attributes><divisions> `0`")
            else:
                logger.debug(f"Skipping <{tag}> in bar {measure.get('number')}")
