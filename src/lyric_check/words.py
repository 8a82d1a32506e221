#!/usr/bin/env python3

from dataclasses import dataclass, field

import logging
from typing import Iterable, List, Optional

from .globals import MINIM
from .syllables import Kind, Syllable

logger = logging.getLogger(__name__)


@dataclass
class Word:
    start: int
    end: int
    text: str


@dataclass
class Phrase:
    start: int = 0
    end: int = 0
    words: List[Word] = field(default_factory=list)


def is_capital(text: str) -> bool:
    """True if the text starts with an ASCII capital, optionally after an apostrophe."""
    if text[:1] == "'":
        text = text[1:]
    return text[:1].isascii() and text[:1].isupper()


class PhraseBuilder:
    """
    Joins syllables into words and words into phrases.

    A phrase ends after a word ending in "." or "!", or after a bracketed
    ad-lib group closes with "]". A new phrase starts at a capital letter
    after any rest, after a rest of a minim or more, or at a "[".
    """

    def __init__(self) -> None:
        self.phrases: List[Phrase] = []
        self.phrase: Phrase = Phrase()
        self.word: Optional[Word] = None
        self.in_group: bool = False
        self._built: bool = False

    def syllable(self, syllable: Syllable) -> None:
        kind: Kind = syllable.kind
        if kind == Kind.SINGLE:
            self._flush_word()
            self._add_word(Word(syllable.start, syllable.end, syllable.text))
        elif kind == Kind.BEGIN:
            self._flush_word()
            self.word = Word(syllable.start, syllable.end, syllable.text)
        elif kind == Kind.MIDDLE:
            if self.word is None:
                # Missing begin, start the word here
                self.word = Word(syllable.start, syllable.end, syllable.text)
            else:
                self.word.end = syllable.end
                self.word.text += syllable.text
        elif kind == Kind.END:
            if self.word is None:
                self._add_word(Word(syllable.start, syllable.end, syllable.text))
            else:
                self.word.end = syllable.end
                self.word.text += syllable.text
                self._flush_word()
        else:
            raise ValueError(f"Unknown syllable kind {kind!r}")

    def _flush_word(self) -> None:
        if self.word is not None:
            word: Word = self.word
            self.word = None
            self._add_word(word)

    def _add_word(self, word: Word) -> None:
        # Some exports put several words in one syllable, give each its own tick
        pieces: List[str] = [piece for piece in word.text.split(" ") if piece]
        start: int = word.start
        for piece in pieces[:-1]:
            self._add_single(Word(start, start + 1, piece))
            start += 1
        if pieces:
            self._add_single(Word(start, max(word.end, start), pieces[-1]))

    def _flush_phrase(self) -> None:
        if self.phrase.words:
            self.phrases.append(self.phrase)
        self.phrase = Phrase()

    def _add_single(self, word: Word) -> None:
        group_start: bool = word.text.startswith("[")
        group_end: bool = word.text.endswith("]")
        if self.in_group or group_start:
            is_end: bool = group_end
        else:
            is_end = word.text.endswith(".") or word.text.endswith("!")

        if self.phrase.words and not self.in_group:
            rest_then_capital: bool = is_capital(word.text) and word.start > self.phrase.end
            long_rest: bool = word.start >= self.phrase.end + MINIM
            if group_start or rest_then_capital or long_rest:
                self._flush_phrase()

        if not self.phrase.words:
            self.phrase.start = word.start
        self.phrase.end = word.end
        self.phrase.words.append(word)
        if is_end:
            self._flush_phrase()

        if group_start:
            self.in_group = True
        if group_end:
            self.in_group = False

    def build(self) -> List[Phrase]:
        if self._built:
            raise RuntimeError("Phrases have already been built")
        self._built = True
        self._flush_word()
        self._flush_phrase()
        return self.phrases


def assemble(syllables: Iterable[Syllable]) -> List[Phrase]:
    builder = PhraseBuilder()
    for syllable in syllables:
        builder.syllable(syllable)
    phrases: List[Phrase] = builder.build()
    logger.debug(f"Assembled {sum(len(p.words) for p in phrases)} words into {len(phrases)} phrases")
    return phrases
