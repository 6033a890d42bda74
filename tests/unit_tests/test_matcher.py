import difflib

import pytest

from span_diff.engine import MatchLevel
from span_diff.matcher import SpanSequenceMatcher
from span_diff.sequences import LineSequence
from span_diff.spans import EditStatus


def apply_opcodes(a, b, opcodes):
    result = []
    for tag, i1, i2, j1, j2 in opcodes:
        if tag == 'equal':
            result.extend(a[i1:i2])
        elif tag in ('replace', 'insert'):
            result.extend(b[j1:j2])
    return result

# --- Comparison with difflib ---

def test_compare_with_difflib_text():
    # Same lines as the stream matcher tests: here the heuristic agrees with difflib.
    lines_a = ["Apple\n", "Banana\n", "Cherry\n", "Date\n"]
    lines_b = ["Apple\n", "Berry\n", "Cherry\n", "Date\n", "Elderberry\n"]

    matcher = SpanSequenceMatcher(None, lines_a, lines_b)
    std_opcodes = difflib.SequenceMatcher(None, lines_a, lines_b, autojunk=False).get_opcodes()

    assert list(matcher.get_opcodes()) == std_opcodes

def test_replace_with_remainder_is_one_opcode():
    matcher = SpanSequenceMatcher(None, "abcXYZd", "abcQd")
    assert list(matcher.get_opcodes()) == [
        ('equal', 0, 3, 0, 3),
        ('replace', 3, 6, 3, 4),
        ('equal', 6, 7, 4, 5),
    ]
    # The underlying edit script keeps the replace and the delete apart
    assert [span.status for span in matcher.get_edit_spans()] == [
        EditStatus.UNCHANGED, EditStatus.REPLACE, EditStatus.DELETE, EditStatus.UNCHANGED,
    ]

def test_replace_with_insert_remainder_is_one_opcode():
    matcher = SpanSequenceMatcher(None, "ab", "XYZb")
    # Edit script: replace a->X, insert YZ, keep b
    assert [span.status for span in matcher.get_edit_spans()] == [
        EditStatus.REPLACE, EditStatus.INSERT, EditStatus.UNCHANGED,
    ]
    assert list(matcher.get_opcodes()) == [
        ('replace', 0, 1, 0, 3),
        ('equal', 1, 2, 3, 4),
    ]

def test_opcodes_are_cached():
    matcher = SpanSequenceMatcher(None, "abcd", "abXd")
    first = list(matcher.get_opcodes())
    cached = matcher.opcodes
    assert list(matcher.get_opcodes()) == first
    assert matcher.opcodes is cached

    matcher.set_seq1("abXd")
    assert matcher.opcodes is None
    assert list(matcher.get_opcodes()) == [('equal', 0, 4, 0, 4)]

def test_matching_blocks_end_with_sentinel():
    matcher = SpanSequenceMatcher(None, "abcd", "abXd")
    assert matcher.get_matching_blocks() == [(0, 0, 2), (3, 3, 1), (4, 4, 0)]

def test_ratio():
    assert SpanSequenceMatcher(None, "abcd", "abXd").ratio() == pytest.approx(0.75)
    assert SpanSequenceMatcher(None, "", "").ratio() == 1.0
    assert SpanSequenceMatcher(None, "abc", "xyz").ratio() == 0.0

@pytest.mark.parametrize("level", list(MatchLevel))
@pytest.mark.parametrize("a, b", [
    ("", "abc"),
    ("abc", ""),
    ("the quick brown fox", "a quick brown dog jumps"),
    ("ABCABBA", "CBABAC"),
])
def test_opcodes_rebuild_b(level, a, b):
    matcher = SpanSequenceMatcher(None, a, b, level=level)
    opcodes = list(matcher.get_opcodes())
    assert "".join(apply_opcodes(a, b, opcodes)) == b

    # Opcodes are contiguous on both sides
    i = j = 0
    for _tag, i1, i2, j1, j2 in opcodes:
        assert (i1, j1) == (i, j)
        i, j = i2, j2
    assert (i, j) == (len(a), len(b))

# --- Sequence handling ---

def test_line_sequences():
    a = LineSequence("one\ntwo\nthree\n")
    b = LineSequence("one\nthree\nfour\n")
    matcher = SpanSequenceMatcher(None, a, b)
    assert list(matcher.get_opcodes()) == [
        ('equal', 0, 1, 0, 1),
        ('delete', 1, 2, 1, 1),
        ('equal', 2, 3, 1, 2),
        ('insert', 3, 3, 2, 3),
    ]

def test_result_is_cached_until_sequence_changes():
    matcher = SpanSequenceMatcher(None, "abc", "abd")
    first = matcher.get_edit_spans()
    assert matcher.get_edit_spans() is first

    matcher.set_seq2("abc")
    assert matcher.get_edit_spans() is not first
    assert list(matcher.get_opcodes()) == [('equal', 0, 3, 0, 3)]

def test_set_seqs():
    matcher = SpanSequenceMatcher()
    assert list(matcher.get_opcodes()) == []
    matcher.set_seqs("ab", "b")
    assert list(matcher.get_opcodes()) == [('delete', 0, 1, 0, 0), ('equal', 1, 2, 0, 1)]
