"""Tests for the lyrictype command-line interface."""

from click.testing import CliRunner

from lyrictype.cli import cli


def _write(tmp_path, text, name="song.lrc"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_parse_prints_timed_lines(tmp_path, sample_lrc_text):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", _write(tmp_path, sample_lrc_text)])

    assert result.exit_code == 0
    assert "  1  00:01.000 -> 00:05.500  First line of the song" in result.output
    assert "  4  00:14.000 -> 00:15.000  Last one" in result.output


def test_parse_retimes_untimed_lyrics(tmp_path, plain_lyrics_text):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["parse", _write(tmp_path, plain_lyrics_text), "--duration", "33"]
    )

    assert result.exit_code == 0
    assert "  1  00:03.000" in result.output
    assert "Because a vision softly creeping!" in result.output


def test_parse_rejects_bad_duration(tmp_path, plain_lyrics_text):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["parse", _write(tmp_path, plain_lyrics_text), "--duration", "0"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_parse_empty_file(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", _write(tmp_path, "[Chorus]\n\n")])

    assert result.exit_code == 0
    assert "No lyrics found" in result.output


def test_sync_reports_active_line(tmp_path, sample_lrc_text):
    runner = CliRunner()
    path = _write(tmp_path, sample_lrc_text)

    result = runner.invoke(cli, ["sync", path, "6.0"])
    assert result.exit_code == 0
    assert "0:06  Line 2: Second line here" in result.output

    result = runner.invoke(cli, ["sync", path, "100"])
    assert result.exit_code == 0
    assert "1:40  No active line" in result.output


def test_sync_rejects_negative_time(tmp_path, sample_lrc_text):
    runner = CliRunner()
    result = runner.invoke(cli, ["sync", _write(tmp_path, sample_lrc_text), "--", "-1"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_score_reports_stats():
    runner = CliRunner()
    result = runner.invoke(cli, ["score", "hello world", "hello worle", "--seconds", "60"])

    assert result.exit_code == 0
    assert "Errors:   1" in result.output
    assert "WPM:      1" in result.output
    assert "Accuracy: 91% (A)" in result.output
    assert "Complete: yes" in result.output


def test_score_rejects_non_positive_seconds():
    runner = CliRunner()
    result = runner.invoke(cli, ["score", "a", "a", "--seconds", "0"])

    assert result.exit_code == 1


def test_demo_known_and_unknown_song():
    runner = CliRunner()

    result = runner.invoke(cli, ["demo", "https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
    assert result.exit_code == 0
    assert "  1  00:18.000 -> 00:21.000  We're no strangers to love" in result.output

    result = runner.invoke(cli, ["demo", "unknown"])
    assert result.exit_code == 0
    assert "Welcome to LyricType!" in result.output


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_parse_rejects_binary_file(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_bytes(b"\xff\xfe\x00bad")

    runner = CliRunner()
    result = runner.invoke(cli, ["parse", str(path)])

    assert result.exit_code == 1
    assert "not UTF-8 text" in result.output
