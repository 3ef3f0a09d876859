"""Tests for the tab parser."""

import logging

import pytest

from tab_piano.errors import InsufficientLinesError
from tab_piano.pitch import STRING_NAMES
from tab_piano.tab import ParsedNote, ParseResult, TabEvent, parse
from tab_piano.tab.parser import (
    decode_cell,
    decode_fixed_width,
    decode_variable_width,
    detect_encoding,
    is_fixed_width,
    read_fret_token,
)


def make_tab(**bodies: str) -> str:
    """Build a six-line tab, filling unspecified strings with dashes."""
    width = max((len(body) for body in bodies.values()), default=8)
    rows = [f"{name}|{bodies.get(name, '-' * width)}|" for name in STRING_NAMES]
    return "\n".join(rows)


def notes_by_step(result: ParseResult) -> dict[int, list[tuple[str, int]]]:
    return {
        event.step: [(n.string, n.fret) for n in event.notes]
        for event in result.events
        if event.notes
    }


class TestFixedWidthDetection:
    """Test encoding detection."""

    def test_valid_cells(self) -> None:
        assert is_fixed_width("--0-12--")
        assert is_fixed_width("")

    def test_misaligned_digit(self) -> None:
        assert not is_fixed_width("--0--2--")

    def test_odd_length(self) -> None:
        assert not is_fixed_width("--0")

    def test_technique_marks_are_not_fixed(self) -> None:
        assert not is_fixed_width("5h7-")

    def test_non_ascii_digits_are_not_fixed(self) -> None:
        assert not is_fixed_width("٣-")

    def test_all_rows_must_be_fixed(self) -> None:
        rows = ["--0-"] * 5 + ["-0--"]
        assert detect_encoding(rows) == "legacy"
        assert detect_encoding(["--0-"] * 6) == "fixed"

    def test_decode_cell(self) -> None:
        assert decode_cell("7-") == 7
        assert decode_cell("24") == 24
        assert decode_cell("--") is None


class TestFixedWidthDecode:
    """Test fixed-width decoding."""

    def test_spread_single_digits(self) -> None:
        """Test open and fretted notes on the A string, one per odd step."""
        text = make_tab(A="--0---2---3---5-")
        result = parse(text)

        assert result.encoding == "fixed"
        assert result.steps == 8
        assert len(result.events) == 8
        assert notes_by_step(result) == {
            1: [("A", 0)],
            3: [("A", 2)],
            5: [("A", 3)],
            7: [("A", 5)],
        }
        keyed = [n.piano_key for e in result.events for n in e.notes]
        assert keyed == [25, 27, 28, 30]
        assert [n.midi for e in result.events for n in e.notes] == [45, 47, 48, 50]

    def test_rest_steps_are_kept(self) -> None:
        result = parse(make_tab(A="--0---2---3---5-"))
        empty = [e.step for e in result.events if e.is_empty]
        assert empty == [0, 2, 4, 6]

    def test_two_digit_fret(self) -> None:
        """Test a 12 on the low E string."""
        result = parse(make_tab(E="----12--"))
        note = result.events[2].notes[0]
        assert note == ParsedNote(
            string="E", fret=12, midi=52, piano_key=32, note_name="E3"
        )

    def test_low_e_fret_24_in_range(self) -> None:
        result = parse(make_tab(E="24--"))
        assert result.events[0].notes[0].midi == 64

    def test_high_e_fret_24(self) -> None:
        result = parse(make_tab(e="24--"))
        assert result.events[0].notes[0].midi == 88

    def test_frets_above_24_excluded(self) -> None:
        """Test a 25 cell produces no note but keeps its step."""
        result = parse(make_tab(e="25--", B="0---"))
        assert result.encoding == "fixed"
        assert result.events[0].notes == (
            ParsedNote(string="B", fret=0, midi=59, piano_key=39, note_name="B3"),
        )

    def test_out_of_range_pitch_dropped_event_kept(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test pitches above C8 are dropped without dropping the step."""
        monkeypatch.setattr("tab_piano.tab.models.open_midi", lambda string: 100)
        padded = ["10--", "0---", "----", "----", "----", "----"]
        result = decode_fixed_width(padded)

        assert result.steps == 2
        assert result.events[0].step == 0
        assert [(n.string, n.midi) for n in result.events[0].notes] == [("B", 100)]

    def test_from_fret_range(self) -> None:
        assert ParsedNote.from_fret("e", 44) is not None
        assert ParsedNote.from_fret("e", 45) is None

    def test_chord_notes_in_string_order(self) -> None:
        """Test stacked notes come out high string first."""
        text = make_tab(e="0-", B="1-", G="0-", D="2-", A="3-")
        result = parse(text)
        assert [n.string for n in result.events[0].notes] == ["e", "B", "G", "D", "A"]
        assert [n.midi for n in result.events[0].notes] == [64, 60, 55, 52, 48]

    def test_deterministic(self) -> None:
        text = make_tab(e="--3-12--", A="5-----10")
        assert parse(text) == parse(text)

    def test_step_order(self) -> None:
        result = parse(make_tab(D="0-1-2-3-4-"))
        assert [e.step for e in result.events] == list(range(5))

    def test_empty_bodies(self) -> None:
        result = parse("e||\nB||\nG||\nD||\nA||\nE||")
        assert result == ParseResult(events=(), steps=0, encoding="fixed")


class TestVariableWidthDecode:
    """Test legacy variable-width decoding."""

    def test_misaligned_single_digits(self) -> None:
        """Test a tab that is not two-character aligned."""
        text = make_tab(A="--0--2--3--5----")
        result = parse(text)

        assert result.encoding == "legacy"
        assert result.steps == 16
        assert notes_by_step(result) == {
            2: [("A", 0)],
            5: [("A", 2)],
            8: [("A", 3)],
            11: [("A", 5)],
        }

    def test_multi_digit_consumed_once(self) -> None:
        result = parse(make_tab(G="--12---"))
        assert notes_by_step(result) == {2: [("G", 12)]}
        assert len(result.events) == 7

    def test_three_digits_clamped(self) -> None:
        result = parse(make_tab(E="-199-"))
        assert notes_by_step(result) == {1: [("E", 24)]}

    def test_four_digits_split(self) -> None:
        """Test tokens stop after three digits."""
        result = parse(make_tab(E="-1234-"))
        assert notes_by_step(result) == {1: [("E", 24)], 4: [("E", 4)]}

    def test_two_digit_above_24_clamped(self) -> None:
        result = parse(make_tab(e="-30--"))
        assert notes_by_step(result) == {1: [("e", 24)]}

    def test_gap_ends_token(self) -> None:
        """Test digits separated by a dash are separate notes."""
        result = parse(make_tab(B="-5-3-"))
        assert notes_by_step(result) == {1: [("B", 5)], 3: [("B", 3)]}

    def test_technique_marks_ignored(self) -> None:
        result = parse(make_tab(G="-5h7p5-"))
        assert notes_by_step(result) == {1: [("G", 5)], 3: [("G", 7)], 5: [("G", 5)]}

    def test_rows_are_independent(self) -> None:
        """Test a multi-digit token on one row does not hide notes on another."""
        result = parse(make_tab(e="-10-", B="--3-"))
        assert notes_by_step(result) == {1: [("e", 10)], 2: [("B", 3)]}

    def test_read_fret_token(self) -> None:
        assert read_fret_token("--12--", 2) == (12, 2)
        assert read_fret_token("7", 0) == (7, 1)
        assert read_fret_token("-199-", 1) == (24, 3)

    def test_decoder_is_pure(self) -> None:
        padded = ["-12-", "----", "----", "----", "----", "----"]
        first = decode_variable_width(padded)
        second = decode_variable_width(padded)
        assert first == second
        assert padded[0] == "-12-"


class TestParseInputs:
    """Test realistic pasted inputs."""

    def test_surrounding_noise(self) -> None:
        text = "\n".join(
            [
                "Song Title - Artist",
                "Tuning: Standard",
                "",
                "Am          C",
                make_tab(A="0-------", B="----1---"),
                "",
                "(repeat x2)",
            ]
        )
        result = parse(text)
        assert notes_by_step(result) == {0: [("A", 0)], 2: [("B", 1)]}

    def test_sectioned_bars(self) -> None:
        text = "\n".join(
            [
                "e|--------|--------|",
                "B|--1-----|--------|",
                "G|--------|--0-----|",
                "D|--------|--------|",
                "A|--------|--------|",
                "E|--------|--------|",
            ]
        )
        result = parse(text)
        assert result.encoding == "fixed"
        assert result.steps == 8
        assert notes_by_step(result) == {1: [("B", 1)], 5: [("G", 0)]}

    def test_flat_without_closing_bar(self) -> None:
        text = "e|0-\nB|--\nG|--\nD|--\nA|--\nE|--"
        result = parse(text)
        assert notes_by_step(result) == {0: [("e", 0)]}

    def test_flat_whitespace_removed(self) -> None:
        text = "e|0- --\nB|-- --\nG|-- --\nD|-- --\nA|-- --\nE|-- 3-"
        result = parse(text)
        assert result.encoding == "fixed"
        assert notes_by_step(result) == {0: [("e", 0)], 1: [("E", 3)]}

    def test_short_lines_padded(self) -> None:
        text = "e|0-2-4-|\nB|--|\nG|--|\nD|--|\nA|--|\nE|--|"
        result = parse(text)
        assert result.steps == 3
        assert notes_by_step(result) == {0: [("e", 0)], 1: [("e", 2)], 2: [("e", 4)]}

    def test_windows_line_endings(self) -> None:
        text = make_tab(e="3-").replace("\n", "\r\n")
        assert notes_by_step(parse(text)) == {0: [("e", 3)]}

    def test_three_lines_raises(self) -> None:
        with pytest.raises(InsufficientLinesError):
            parse("e|----|\nB|----|\nG|----|")

    def test_empty_text_raises(self) -> None:
        with pytest.raises(InsufficientLinesError):
            parse("")

    def test_insufficient_lines_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse("just words")

    def test_logs_classification(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="tab_piano"):
            parse(make_tab(A="0-"))
        assert "sectioned/fixed" in caplog.text


class TestEventModel:
    """Test event helpers."""

    def test_event_midis(self) -> None:
        result = parse(make_tab(e="0-", E="0-"))
        assert result.events[0].midis == (64, 40)

    def test_event_at(self) -> None:
        result = parse(make_tab(e="0---"))
        assert result.event_at(1) == TabEvent(step=1, notes=())
        assert result.event_at(2) is None
        assert result.event_at(-1) is None
