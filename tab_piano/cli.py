"""Command line interface for tab-piano.

Usage:
    tab-piano parse <input_file> [-o output_file] [--pretty]
    tab-piano normalize <input_file> [-o output_file]
    tab-piano chords <input_file>
    tab-piano blank [--steps N] [-o output_file]

Examples:
    tab-piano parse song.txt --pretty
    tab-piano normalize old_tab.txt -o fixed_tab.txt
    tab-piano --verbose chords song.txt
    tab-piano blank --steps 32 -o new_tab.txt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

from tab_piano.chords import identify_chord
from tab_piano.config import Settings, load_settings
from tab_piano.errors import TabPianoError
from tab_piano.tab import (
    ParsedNote,
    ParseResult,
    TabEvent,
    TabGrid,
    normalize,
    parse,
)
from tab_piano.timeline import ms_per_step, note_duration

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def note_to_dict(note: ParsedNote) -> dict[str, Any]:
    """Convert a ParsedNote to a JSON-serializable dict."""
    return {
        "string": note.string,
        "fret": note.fret,
        "midi": note.midi,
        "piano_key": note.piano_key,
        "note_name": note.note_name,
    }


def event_to_dict(event: TabEvent) -> dict[str, Any]:
    """Convert a TabEvent to a JSON-serializable dict."""
    return {
        "step": event.step,
        "notes": [note_to_dict(note) for note in event.notes],
    }


def result_to_dict(result: ParseResult, settings: Settings) -> dict[str, Any]:
    """Convert a ParseResult to a JSON-serializable dict with timing info."""
    return {
        "steps": result.steps,
        "encoding": result.encoding,
        "bpm": settings.bpm,
        "ms_per_step": ms_per_step(settings.bpm, settings.steps_per_beat),
        "note_duration": note_duration(
            settings.bpm, settings.gate, settings.steps_per_beat
        ),
        "events": [event_to_dict(event) for event in result.events],
    }


def write_output(text: str, output: Path | None) -> None:
    if output is not None:
        output.write_text(text, encoding="utf-8")
        logger.info("Wrote output to %s", output)
    else:
        print(text)


def cmd_parse(text: str, args: argparse.Namespace, settings: Settings) -> int:
    result = parse(text)
    indent = 2 if args.pretty else None
    data = result_to_dict(result, settings)
    write_output(json.dumps(data, indent=indent, ensure_ascii=False), args.output)
    return 0


def cmd_normalize(text: str, args: argparse.Namespace, settings: Settings) -> int:
    write_output(normalize(text), args.output)
    return 0


def cmd_chords(text: str, args: argparse.Namespace, settings: Settings) -> int:
    result = parse(text)
    for event in result.events:
        if not event.notes:
            continue
        name = identify_chord(event) or "-"
        notes = " ".join(note.note_name for note in event.notes)
        print(f"{event.step}\t{name}\t{notes}")
    return 0


def cmd_blank(text: str | None, args: argparse.Namespace, settings: Settings) -> int:
    grid = TabGrid.from_settings(settings)
    if args.steps is not None:
        grid.resize(args.steps)
    write_output(grid.to_text(), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tab-piano",
        description="Convert ASCII guitar tabs to piano keys",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse song.txt --pretty
  %(prog)s normalize old_tab.txt -o fixed_tab.txt
  %(prog)s --bpm 120 parse song.txt
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: ~/.config/tab-piano/config.yaml)",
    )
    parser.add_argument(
        "--bpm",
        type=float,
        default=None,
        help="Playback tempo, overrides the settings file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Export tab events as JSON")
    parse_cmd.add_argument("input", type=Path, help="Input tab file")
    parse_cmd.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output JSON file (default: stdout)",
    )
    parse_cmd.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output",
    )
    parse_cmd.set_defaults(handler=cmd_parse)

    normalize_cmd = subparsers.add_parser(
        "normalize", help="Rewrite a tab in fixed-width form"
    )
    normalize_cmd.add_argument("input", type=Path, help="Input tab file")
    normalize_cmd.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output tab file (default: stdout)",
    )
    normalize_cmd.set_defaults(handler=cmd_normalize)

    chords_cmd = subparsers.add_parser("chords", help="Name the chord at each step")
    chords_cmd.add_argument("input", type=Path, help="Input tab file")
    chords_cmd.set_defaults(handler=cmd_chords)

    blank_cmd = subparsers.add_parser(
        "blank", help="Write an empty fixed-width tab for editing"
    )
    blank_cmd.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Grid length, clamped to the editor bounds (default: from settings)",
    )
    blank_cmd.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output tab file (default: stdout)",
    )
    blank_cmd.set_defaults(handler=cmd_blank, input=None)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    text = None
    if args.input is not None:
        if not args.input.exists():
            print(f"Error: Input file not found: {args.input}", file=sys.stderr)
            return 1
        try:
            text = args.input.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: Cannot read input file {args.input}: {e}", file=sys.stderr)
            return 1

    try:
        settings = load_settings(args.config)
        if args.bpm is not None:
            settings = replace(settings, bpm=args.bpm)
    except (OSError, ValueError) as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    try:
        return args.handler(text, args, settings)
    except TabPianoError as e:
        print(f"Error parsing file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
