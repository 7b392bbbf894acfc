"""
Command Line Interface for the Fretboard Resolver
=================================================

Looks up chord voicings and scale fingerings from the terminal and runs the
table checks.

Usage Examples:
    # Chord diagrams
    fretboard chord Cmaj7 "F#m7b5" Am/G

    # A scale box, transposed to a root
    fretboard scale dorian --root A --position 1

    # Check the tables (exit code 1 on errors)
    fretboard validate

    # JSON output - for scripting/integration
    fretboard --json chord Dm7

    # See what the resolver substituted
    fretboard -v chord C13

Author: Rohan Rajendra Dhanawade
"""

import argparse
import json
import sys
from typing import List, Optional

import fretboard
from fretboard.config import CONFIG_ENV_VAR, get_config
from fretboard.data.schema import ChordResolution, ScaleResolution, Voicing
from fretboard.logger import setup_logging
from fretboard.rules.chord_library import chord_tone_names, is_muted_voicing, resolve_chord
from fretboard.rules.scale_library import resolve_scale, resolve_scale_notes
from fretboard.rules.scale_modes import scale_display_name
from fretboard.rules.theory import STRING_NAMES
from fretboard.rules.validation import validate_scale_library, validate_store


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser object
    """
    parser = argparse.ArgumentParser(
        prog="fretboard",
        description="""
Fretboard Resolver - chord voicings and scale fingerings for guitar in
standard tuning.

Examples:
  fretboard chord Cmaj7 Am/G
  fretboard scale "D dorian"
  fretboard scale "minor pentatonic" --root E --position 2
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Show what the resolver substituted (-vv for debug output)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON (useful for scripting)"
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help=f"YAML file with setting overrides (default: ${CONFIG_ENV_VAR})"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {fretboard.__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ─────────────────────────────────────────────────────────────────────────
    # chord
    # ─────────────────────────────────────────────────────────────────────────
    chord = subparsers.add_parser("chord", help="Show voicings for one or more chords")
    chord.add_argument("names", nargs="+", metavar="NAME", help="Chord names, e.g. Cmaj7 F#m7b5 Am/G")

    # ─────────────────────────────────────────────────────────────────────────
    # scale
    # ─────────────────────────────────────────────────────────────────────────
    scale = subparsers.add_parser("scale", help="Show a scale fingering")
    scale.add_argument("descriptor", help='Scale name, optionally with a root: "D dorian"')
    scale.add_argument("--root", help="Root to transpose to (overrides the descriptor)")
    scale.add_argument("--position", type=int, default=0,
                       help="Position box, 0 being the lowest on the neck (default: 0)")

    # ─────────────────────────────────────────────────────────────────────────
    # validate
    # ─────────────────────────────────────────────────────────────────────────
    validate = subparsers.add_parser("validate", help="Check the voicing and scale tables")
    validate.add_argument("--no-progress", action="store_true", help="Hide the progress bars")

    return parser


# =============================================================================
# PART 2: OUTPUT FORMATTING FUNCTIONS
# =============================================================================

def format_voicing(voicing: Voicing) -> str:
    """
    One voicing as a fret row under the string names.

    Example:
        Open
          E  A  D  G  B  e
          x  3  2  0  1  0
    """
    title = voicing.label or "Voicing"
    if voicing.is_barre:
        title += f" (first fret {voicing.first_fret})"

    names = "".join(f"{name:>3}" for name in STRING_NAMES)
    frets = "".join(f"{str(fret):>3}" for fret in voicing.frets)
    return "\n".join([title, f"  {names}", f"  {frets}"])


def format_chord(resolution: ChordResolution) -> str:
    lines = [f"{resolution.name}: {' '.join(chord_tone_names(resolution.root, resolution.quality))}"]
    if resolution.is_substitute:
        lines.append(f"  ({resolution.source} substitute"
                     + (f" from {resolution.matched_key})" if resolution.matched_key else ")"))

    for voicing in resolution.voicings:
        if is_muted_voicing(voicing):
            lines.append("  no playable voicing found")
            continue
        lines.append("")
        lines.extend("  " + line for line in format_voicing(voicing).splitlines())

    return "\n".join(lines)


def format_scale(resolution: ScaleResolution) -> str:
    """
    Fingering grid with the high e string on top, like tablature.

    Example:
        D Dorian - position 1 of 7
        e | 12 13 15
        B | 12 13 15
        ...
    """
    title = (f"{resolution.root} {scale_display_name(resolution.scale_key)} - "
             f"position {resolution.position + 1} of {resolution.position_count}")
    lines = [title]

    for string_index in reversed(range(len(resolution.fingering))):
        frets = " ".join(f"{fret:>2}" for fret in resolution.fingering[string_index])
        lines.append(f"{STRING_NAMES[string_index]} | {frets}")

    notes = resolve_scale_notes(resolution.root, resolution.scale_key)
    lines.append(f"Notes: {' '.join(notes)}")
    if resolution.lossy:
        lines.append("(some frets were clamped to fit the neck)")
    return "\n".join(lines)


# =============================================================================
# PART 3: COMMANDS
# =============================================================================

def run_chord(names: List[str], output_json: bool = False) -> int:
    resolutions = [resolve_chord(name) for name in names]

    if output_json:
        print(json.dumps([r.model_dump(mode="json") for r in resolutions], indent=2))
    else:
        print("\n\n".join(format_chord(r) for r in resolutions))
    return 0


def run_scale(descriptor: str, root: Optional[str] = None, position: int = 0,
              output_json: bool = False) -> int:
    resolution = resolve_scale(descriptor, root, position)

    if output_json:
        print(resolution.model_dump_json(indent=2))
    else:
        print(format_scale(resolution))
    return 0


def run_validate(show_progress: bool = True, output_json: bool = False) -> int:
    """Run both table checks. Returns 1 if either found an error."""
    chords = validate_store(show_progress=show_progress)
    scales = validate_scale_library(show_progress=show_progress)

    if output_json:
        print(json.dumps({
            "voicings": {"is_valid": chords.is_valid, "errors": chords.errors,
                         "warnings": chords.warnings},
            "scales": {"is_valid": scales.is_valid, "errors": scales.errors,
                       "warnings": scales.warnings},
        }, indent=2))
    else:
        print(f"Voicings: {chords}")
        print(f"Scales: {scales}")

    return 0 if chords.is_valid and scales.is_valid else 1


def run_command(args: argparse.Namespace) -> int:
    """Set up logging from the active config and run the chosen command."""
    config = get_config()
    if args.verbose:
        setup_logging(args.verbose)
    else:
        setup_logging(level=config["log_level"])

    if args.command == "chord":
        return run_chord(args.names, args.json)
    if args.command == "scale":
        return run_scale(args.descriptor, args.root, args.position, args.json)
    return run_validate(show_progress=config["show_progress"] and not args.no_progress,
                        output_json=args.json)


# =============================================================================
# PART 4: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Process exit code
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    if args.config:
        with fretboard.config_file(args.config):
            return run_command(args)
    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
