#!/usr/bin/env python3

"""
Compare a lyric script against the lyrics of a score.

Words are aligned on a normalized key (ASCII letters, lower case) and each
aligned pair that is not identical is diffed again character by character.
The result follows the script's structure: sections start at headings and
lines start at line numbers.
"""

from dataclasses import dataclass, field

import logging
from typing import List, Sequence, Union

from .music import Music, read_music
from .script import Heading, LineNumber, ScriptWord, Token, read_script
from .utils.lcs import Side, lcs_diff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Same:
    text: str


@dataclass(frozen=True)
class ScriptOnly:
    text: str


@dataclass(frozen=True)
class MusicOnly:
    text: str


@dataclass(frozen=True)
class CaseOnly:
    """Differs only in letter case, carries the music's text."""

    text: str


@dataclass(frozen=True)
class Replace:
    script: str
    music: str


Diff = Union[Same, ScriptOnly, MusicOnly, CaseOnly, Replace]


@dataclass
class DiffLine:
    number: str = ""
    diffs: List[Diff] = field(default_factory=list)


@dataclass
class DiffSection:
    heading: str = ""
    lines: List[DiffLine] = field(default_factory=list)


def key(text: str) -> str:
    """
    Returns the comparison key of a word: its ASCII letters in lower case.

    Words without any letters, like "...", are their own key.
    """
    letters: str = "".join(c.lower() for c in text if c.isascii() and c.isalpha())
    return letters or text


def _changed(script: str, music: str) -> Diff:
    if len(script) == 1 and len(music) == 1 and script.lower() == music.lower():
        return CaseOnly(music)
    return Replace(script, music)


def _last_changed(script: str, music: str) -> Diff:
    if not music:
        return ScriptOnly(script)
    if not script:
        return MusicOnly(music)
    return _changed(script, music)


def diff_word(script: str, music: str) -> List[Diff]:
    """
    Diffs two aligned words.

    A changed run inside the word is a Replace, possibly with one empty
    side. Only the run at the end of the word becomes ScriptOnly or
    MusicOnly when one side is empty.

    Args:
        script (str): The word in the script.
        music (str): The word in the score.

    Returns:
        List[Diff]: Same for identical words, one CaseOnly for words where a
        single letter differs in case, otherwise runs of same and changed
        characters.
    """
    if script == music:
        return [Same(script)]
    if len(script) == len(music) and sum(a != b for a, b in zip(script, music)) == 1:
        if script.lower() == music.lower():
            return [CaseOnly(music)]

    diffs: List[Diff] = []
    same: str = ""
    script_run: str = ""
    music_run: str = ""
    for side, i, j in lcs_diff(script, music):
        if side == Side.BOTH:
            if script_run or music_run:
                diffs.append(_changed(script_run, music_run))
                script_run = music_run = ""
            same += script[i]
        else:
            if same:
                diffs.append(Same(same))
                same = ""
            if side == Side.LEFT:
                script_run += script[i]
            else:
                music_run += music[j]
    if same:
        diffs.append(Same(same))
    if script_run or music_run:
        diffs.append(_last_changed(script_run, music_run))
    return diffs


class DiffBuilder:
    """
    Groups aligned words into sections and lines.

    Unmatched words are buffered until the next matched word or script
    marker, then written out as one diff.
    """

    def __init__(self) -> None:
        self.sections: List[DiffSection] = []
        self.section: DiffSection = DiffSection()
        self.line: DiffLine = DiffLine()
        self.scripts: List[str] = []
        self.musics: List[str] = []
        self._built: bool = False

    def heading(self, text: str) -> None:
        self._flush_pending()
        self._flush_line()
        self._flush_section()
        self.section.heading = text

    def line_number(self, label: str) -> None:
        self._flush_pending()
        self._flush_line()
        self.line.number = label

    def both(self, script: str, music: str) -> None:
        self._flush_pending()
        self.line.diffs.extend(diff_word(script, music))

    def script(self, text: str) -> None:
        self.scripts.append(text)

    def music(self, text: str) -> None:
        self.musics.append(text)

    def _flush_pending(self) -> None:
        if len(self.scripts) == 1 and len(self.musics) == 1:
            self.line.diffs.extend(diff_word(self.scripts[0], self.musics[0]))
        elif self.scripts and self.musics:
            self.line.diffs.append(Replace(" ".join(self.scripts), " ".join(self.musics)))
        elif self.scripts:
            self.line.diffs.append(ScriptOnly(" ".join(self.scripts)))
        elif self.musics:
            self.line.diffs.append(MusicOnly(" ".join(self.musics)))
        self.scripts = []
        self.musics = []

    def _flush_line(self) -> None:
        if self.line.number or self.line.diffs:
            self.section.lines.append(self.line)
        self.line = DiffLine()

    def _flush_section(self) -> None:
        if self.section.heading or self.section.lines:
            self.sections.append(self.section)
        self.section = DiffSection()

    def build(self) -> List[DiffSection]:
        if self._built:
            raise RuntimeError("Diff has already been built")
        self._built = True
        self._flush_pending()
        self._flush_line()
        self._flush_section()
        return self.sections


def _script_keys(tokens: Sequence[Token]) -> List[str]:
    keys: List[str] = []
    for index, token in enumerate(tokens):
        if isinstance(token, ScriptWord):
            keys.append(key(token.text))
        else:
            # Never equal to a music key, XML text cannot hold NUL
            keys.append(f"\0{type(token).__name__}:{index}")
    return keys


def diff_lyrics(tokens: Sequence[Token], music: Music) -> List[DiffSection]:
    """
    Aligns script tokens against the words of the music.

    Args:
        tokens (Sequence[Token]): Tokens from read_script.
        music (Music): Lyrics from read_music.

    Returns:
        List[DiffSection]: The differences grouped by script heading and line.
    """
    words: List[str] = [word.text for word in music.words()]
    music_keys: List[str] = [key(text) for text in words]

    builder = DiffBuilder()
    for side, i, j in lcs_diff(_script_keys(tokens), music_keys):
        if side == Side.RIGHT:
            builder.music(words[j])
            continue
        token: Token = tokens[i]
        if isinstance(token, Heading):
            builder.heading(token.text)
        elif isinstance(token, LineNumber):
            builder.line_number(token.label)
        elif side == Side.BOTH:
            builder.both(token.text, words[j])
        else:
            builder.script(token.text)
    sections: List[DiffSection] = builder.build()
    logger.debug(f"Compared {len(tokens)} script tokens with {len(words)} music words")
    return sections


def check_lyrics(script_text: str, xml: Union[str, bytes]) -> List[DiffSection]:
    """Reads a script and a MusicXML score and diffs their lyrics."""
    music: Music = read_music(xml)
    tokens: List[Token] = read_script(script_text)
    return diff_lyrics(tokens, music)
