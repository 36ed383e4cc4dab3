import pytest

from lyrictype.core.models import LyricLine, LyricSequence, TypingSession


def test_sequence_text_joins_with_single_space(gapped_sequence):
    assert gapped_sequence.text == "one two three four five six"


def test_line_offsets_match_text(gapped_sequence):
    offsets = gapped_sequence.line_offsets()
    assert offsets == [0, 14, 24]
    for offset, line in zip(offsets, gapped_sequence):
        assert gapped_sequence.text[offset:offset + len(line.text)] == line.text


def test_line_at_position(gapped_sequence):
    assert gapped_sequence.line_at_position(0) == 0
    assert gapped_sequence.line_at_position(13) == 0  # joining space
    assert gapped_sequence.line_at_position(14) == 1
    assert gapped_sequence.line_at_position(500) == 2
    assert gapped_sequence.line_at_position(-4) == 0
    assert LyricSequence().line_at_position(3) == -1


def test_empty_sequence_properties():
    seq = LyricSequence()
    assert seq.text == ""
    assert seq.is_empty
    assert seq.start_time == 0.0
    assert seq.end_time == 0.0
    assert seq.line_offsets() == []


def test_line_contains_is_half_open():
    line = LyricLine(text="x", start_time=1.0, end_time=2.0)
    assert line.contains(1.0)
    assert not line.contains(2.0)
    assert line.duration == 1.0


def test_lines_are_immutable():
    line = LyricLine(text="x", start_time=1.0, end_time=2.0)
    with pytest.raises(AttributeError):
        line.text = "y"


def test_typing_session_reset():
    session = TypingSession(typed="abc", started_at=5.0, errors=2, wpm=40, accuracy=50, completed=True)
    session.reset()
    assert session == TypingSession()
