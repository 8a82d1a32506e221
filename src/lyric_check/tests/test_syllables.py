# Test bucketing of syllables per bar and verse and their replay in playback order

import pytest

from lyric_check.errors import LyricCheckError, ScoreFormatError
from lyric_check.globals import CROTCHET, SEMIBREVE
from lyric_check.repeats import Repeats, Segment
from lyric_check.syllables import Kind, Syllable, SyllableCollector


def whole_bars(count: int, segments) -> Repeats:
    return Repeats(first_bar_number=1, durations=[SEMIBREVE] * count, segments=segments)


def texts(syllables):
    return [syllable.text for syllable in syllables]


def test_kind_from_syllabic():
    assert Kind.from_syllabic("single") == Kind.SINGLE
    assert Kind.from_syllabic("end") == Kind.END
    with pytest.raises(LyricCheckError):
        Kind.from_syllabic("other")


def test_syllables_sort_by_time_then_kind():
    later = Syllable(CROTCHET, 2 * CROTCHET, Kind.SINGLE, "b")
    end = Syllable(0, CROTCHET, Kind.END, "a")
    begin = Syllable(0, CROTCHET, Kind.BEGIN, "z", verse=1, voice=1)
    assert sorted([later, end, begin]) == [begin, end, later]


def test_replay_adds_bar_ticks():
    collector = SyllableCollector(whole_bars(2, [Segment(None, range(0, 2))]))
    collector.bar_start(1)
    collector.lyric(0, 0, Kind.SINGLE, "one", CROTCHET)
    collector.forward(CROTCHET)
    collector.lyric(0, 0, Kind.SINGLE, "two", CROTCHET)
    collector.bar_start(2)
    collector.forward(2 * CROTCHET)
    collector.lyric(0, 0, Kind.SINGLE, "three", CROTCHET)
    syllables = collector.part_end()
    assert [(s.start, s.end, s.text) for s in syllables] == [
        (0, CROTCHET, "one"),
        (CROTCHET, 2 * CROTCHET, "two"),
        (SEMIBREVE + 2 * CROTCHET, SEMIBREVE + 3 * CROTCHET, "three"),
    ]


def test_voices_are_merged_in_time_order():
    collector = SyllableCollector(whole_bars(1, [Segment(None, range(0, 1))]))
    collector.bar_start(1)
    collector.forward(CROTCHET)
    collector.lyric(0, 0, Kind.SINGLE, "second", CROTCHET)
    collector.backward(CROTCHET)
    collector.lyric(1, 0, Kind.SINGLE, "first", CROTCHET)
    assert texts(collector.part_end()) == ["first", "second"]


def test_repeat_uses_verse_lyrics():
    repeats = whole_bars(1, [Segment(0, range(0, 1)), Segment(1, range(0, 1))])
    collector = SyllableCollector(repeats)
    collector.bar_start(1)
    collector.lyric(0, 0, Kind.SINGLE, "first", CROTCHET)
    collector.lyric(0, 1, Kind.SINGLE, "second", CROTCHET)
    syllables = collector.part_end()
    assert texts(syllables) == ["first", "second"]
    assert [s.start for s in syllables] == [0, SEMIBREVE]


def test_verse_falls_back_to_common_lyrics():
    repeats = whole_bars(2, [Segment(0, range(0, 2)), Segment(1, range(0, 2))])
    collector = SyllableCollector(repeats)
    collector.bar_start(1)
    collector.lyric(0, 0, Kind.SINGLE, "Glo", CROTCHET)
    collector.forward(CROTCHET)
    collector.lyric(0, 0, Kind.SINGLE, "ri", CROTCHET)
    collector.bar_start(2)
    collector.lyric(0, 0, Kind.SINGLE, "a", CROTCHET)
    syllables = collector.part_end()
    assert texts(syllables) == ["Glo", "ri", "a", "Glo", "ri", "a"]
    assert [s.start for s in syllables][3:] == [2 * SEMIBREVE, 2 * SEMIBREVE + CROTCHET, 3 * SEMIBREVE]


def test_verse_takes_common_lyrics_only_after_its_own():
    repeats = whole_bars(1, [Segment(1, range(0, 1))])
    collector = SyllableCollector(repeats)
    collector.bar_start(1)
    collector.lyric(0, 0, Kind.SINGLE, "one", CROTCHET)
    collector.lyric(0, 1, Kind.SINGLE, "two", CROTCHET)
    collector.forward(CROTCHET)
    collector.lyric(0, 0, Kind.SINGLE, "all", CROTCHET)
    assert texts(collector.part_end()) == ["two", "all"]


def test_part_without_lyrics():
    collector = SyllableCollector(whole_bars(1, [Segment(None, range(0, 1))]))
    collector.bar_start(1)
    collector.forward(SEMIBREVE)
    assert collector.part_end() is None


def test_error_bar_count_mismatch():
    collector = SyllableCollector(whole_bars(2, [Segment(None, range(0, 2))]), "P2")
    collector.bar_start(1)
    collector.lyric(0, 0, Kind.SINGLE, "la", CROTCHET)
    with pytest.raises(ScoreFormatError, match="Part P2 has 1 bars, expecting 2"):
        collector.part_end()


def test_error_unexpected_bar_number():
    collector = SyllableCollector(whole_bars(2, [Segment(None, range(0, 2))]), "P2")
    collector.bar_start(1)
    with pytest.raises(ScoreFormatError, match="Unexpected bar 3 in part P2, expecting 2"):
        collector.bar_start(3)


def test_part_end_only_once():
    collector = SyllableCollector(whole_bars(1, [Segment(None, range(0, 1))]))
    collector.bar_start(1)
    collector.part_end()
    with pytest.raises(RuntimeError):
        collector.part_end()
