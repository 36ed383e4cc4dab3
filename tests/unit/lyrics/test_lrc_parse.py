import pytest

from lyrictype.core import lrc
from lyrictype.core.models import LyricSequence


def test_parse_bracket_and_default_closing_window():
    seq = lrc.parse_lyrics("[00:05.5]hello\n[00:10]world")
    assert len(seq) == 2
    assert seq[0].start_time == pytest.approx(5.5)
    assert seq[0].end_time == pytest.approx(10.0)
    assert seq[1].start_time == pytest.approx(10.0)
    # "world" is 5 chars, so the short closing window applies
    assert seq[1].end_time == pytest.approx(11.0)


def test_parse_mixed_formats(sample_lrc_text):
    seq = lrc.parse_lyrics(sample_lrc_text)
    assert [line.text for line in seq] == [
        "First line of the song",
        "Second line here",
        "Third line arrives",
        "Last one",
    ]
    assert [line.start_time for line in seq] == pytest.approx([1.0, 5.5, 9.25, 14.0])
    assert seq[-1].end_time == pytest.approx(15.0)


def test_fraction_is_padded_and_truncated():
    assert lrc.parse_timestamp_line("[00:01.5]a")[0] == pytest.approx(1.5)
    assert lrc.parse_timestamp_line("[00:01.12]a")[0] == pytest.approx(1.12)
    assert lrc.parse_timestamp_line("[00:01.1239]a")[0] == pytest.approx(1.123)


def test_bare_fraction_not_shadowed_by_plain_form():
    start, text = lrc.parse_timestamp_line("01:02.75 words here")
    assert start == pytest.approx(62.75)
    assert text == "words here"


def test_bare_timestamp_requires_whitespace():
    start, text = lrc.parse_timestamp_line("12:30pm is late")
    assert start is None
    assert text == "12:30pm is late"


def test_untimed_lines_get_four_second_spacing():
    seq = lrc.parse_lyrics("alpha\nbeta\n\n   \ngamma is a long line")
    assert [line.start_time for line in seq] == [0.0, 4.0, 8.0]
    assert seq[-1].end_time == pytest.approx(12.0)


def test_untimed_line_follows_previous_timestamp():
    seq = lrc.parse_lyrics("[00:20]timed\nnext one")
    assert seq[1].start_time == pytest.approx(24.0)


def test_timestamp_with_empty_text_is_skipped():
    seq = lrc.parse_lyrics("[00:01]\n[00:03]  \n[00:05]words")
    assert len(seq) == 1
    assert seq[0].start_time == pytest.approx(5.0)


def test_empty_input_gives_empty_sequence():
    seq = lrc.parse_lyrics("")
    assert isinstance(seq, LyricSequence)
    assert len(seq) == 0
    assert seq.text == ""
    assert lrc.parse_lyrics("\n  \n\t\n").is_empty


def test_end_times_chain_to_next_start(sample_lrc_text):
    seq = lrc.parse_lyrics(sample_lrc_text)
    for current, nxt in zip(seq.lines, seq.lines[1:]):
        assert current.end_time == nxt.start_time
        assert current.end_time > current.start_time


def test_out_of_order_timestamps_are_sorted(caplog):
    seq = lrc.parse_lyrics("[00:30]a\n[00:10]b")
    assert [(line.text, line.start_time) for line in seq] == [("b", 10.0), ("a", 30.0)]
    assert seq[0].end_time == 30.0
    assert "out of order" in caplog.text


def test_repeated_timestamps_are_shifted_forward(caplog):
    seq = lrc.parse_lyrics("[00:10]first\n[00:05]second\n[00:10]third")
    assert [line.text for line in seq] == ["second", "first", "third"]
    starts = [line.start_time for line in seq]
    assert starts == pytest.approx([5.0, 10.0, 10.01])
    for line in seq:
        assert line.end_time > line.start_time
    assert "starts at or before previous line" in caplog.text


def test_format_timestamp_round_trip():
    for raw in ["[00:05.500]", "[01:02.003]", "[12:59.999]", "[00:00.000]"]:
        start, _ = lrc.parse_timestamp_line(raw + "x")
        assert lrc.format_timestamp(start) == raw


def test_format_timestamp_without_brackets():
    assert lrc.format_timestamp(65.25, brackets=False) == "01:05.250"


def test_render_lrc_reparses_to_same_timing(sample_lrc_text):
    seq = lrc.parse_lyrics(sample_lrc_text)
    again = lrc.parse_lyrics(lrc.render_lrc(seq))
    assert [l.start_time for l in again] == pytest.approx([l.start_time for l in seq], abs=1e-3)
    assert [l.text for l in again] == [l.text for l in seq]


def test_has_timestamps():
    assert lrc.has_timestamps("plain\n[00:01]timed")
    assert not lrc.has_timestamps("plain\nlyrics only")


def test_parse_timed_lines_keeps_explicit_end_in_gap():
    seq = lrc.parse_timed_lines([(18.0, 21.0, "We're no"), (21.5, 25.0, "strangers")])
    assert seq[0].end_time == pytest.approx(21.0)
    assert seq[1].start_time == pytest.approx(21.5)
    assert seq[1].end_time == pytest.approx(25.0)


def test_parse_timed_lines_chains_when_end_missing_or_overlapping():
    seq = lrc.parse_timed_lines([(0.0, "a  b"), (2.0, 9.0, "c"), (3.0, "")])
    assert [l.text for l in seq] == ["a b", "c"]
    assert seq[0].end_time == pytest.approx(2.0)
    # Explicit end past the chained window is ignored; "c" is short
    assert seq[1].end_time == pytest.approx(3.0)


def test_parse_timed_lines_empty():
    assert lrc.parse_timed_lines([]).is_empty


def test_parse_timed_lines_sorts_hints_and_keeps_their_ends():
    seq = lrc.parse_timed_lines([(8.5, 11.0, "second"), (5.0, 8.0, "first")])
    assert [(l.text, l.start_time, l.end_time) for l in seq] == [
        ("first", 5.0, 8.0),
        ("second", 8.5, 11.0),
    ]
