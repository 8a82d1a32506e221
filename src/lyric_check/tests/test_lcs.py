from lyric_check.utils.lcs import Side, lcs_diff


def test_equal_sequences():
    assert lcs_diff("abc", "abc") == [(Side.BOTH, 0, 0), (Side.BOTH, 1, 1), (Side.BOTH, 2, 2)]


def test_empty_sequences():
    assert lcs_diff([], []) == []
    assert lcs_diff("ab", "") == [(Side.LEFT, 0, None), (Side.LEFT, 1, None)]
    assert lcs_diff("", "ab") == [(Side.RIGHT, None, 0), (Side.RIGHT, None, 1)]


def test_insert_and_delete():
    ops = lcs_diff(["amazing", "grace", "how"], ["amazing", "how", "sweet"])
    assert ops == [
        (Side.BOTH, 0, 0),
        (Side.LEFT, 1, None),
        (Side.BOTH, 2, 1),
        (Side.RIGHT, None, 2),
    ]


def test_substitution_lists_right_before_left():
    assert lcs_diff("cat", "cut") == [
        (Side.BOTH, 0, 0),
        (Side.RIGHT, None, 1),
        (Side.LEFT, 1, None),
        (Side.BOTH, 2, 2),
    ]


def test_every_item_appears_once():
    left, right = "the sweet sound", "that saved a wretch"
    ops = lcs_diff(left, right)
    assert [i for side, i, _ in ops if side != Side.RIGHT] == list(range(len(left)))
    assert [j for side, _, j in ops if side != Side.LEFT] == list(range(len(right)))
    for side, i, j in ops:
        if side == Side.BOTH:
            assert left[i] == right[j]
