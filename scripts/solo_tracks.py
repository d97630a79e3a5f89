#!/usr/bin/env python3
"""
solo_tracks.py — Build per-track practice files from a MIDI file

For every track in the input file, writes a copy in which all other tracks
have their note-on velocities reduced, plus an untouched "_All" copy, and
bundles them into <name>.zip.

Usage:
    python scripts/solo_tracks.py song.mid
    python scripts/solo_tracks.py --reduce 40 song.mid
    python scripts/solo_tracks.py --output-dir out/ song.mid other.mid

Flags:
    --reduce N        Velocity reduction for the other tracks (0-127, default 30)
    --output-dir DIR  Where to write the archive (default: next to the input)
    --json            Output results as JSON
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Allow running from a source checkout without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tracksolo.config import DEFAULT_VELOCITY_REDUCTION  # noqa: E402
from tracksolo.errors import InvalidAmountError, TrackSoloError  # noqa: E402
from tracksolo.models import InputFile  # noqa: E402
from tracksolo.services.processor import process_file  # noqa: E402
from tracksolo.services.velocity import validate_amount  # noqa: E402


def solo_file(
    midi_path: Path, amount: int, output_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """Process one file and write its archive; returns a result dict."""
    input_file = InputFile(name=midi_path.name, data=midi_path.read_bytes())
    result = process_file(input_file, amount)

    target_dir = output_dir or midi_path.parent
    target_dir.mkdir(parents=True, exist_ok=True)
    archive_path = target_dir / result.download_name
    archive_path.write_bytes(result.archive_bytes)

    return {
        "input": str(midi_path),
        "archive": str(archive_path),
        "entries": list(result.entry_names),
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Build per-track practice files from MIDI files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("path", nargs="+", help="MIDI file(s) to process")
    parser.add_argument(
        "--reduce",
        "-r",
        default=str(DEFAULT_VELOCITY_REDUCTION),
        help="Reduce the note velocities of the other tracks by (0-127)",
    )
    parser.add_argument(
        "--output-dir", "-o", type=Path, default=None, help="Archive output directory"
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")

    args = parser.parse_args(argv)

    try:
        amount = validate_amount(args.reduce)
    except InvalidAmountError as e:
        print(f"❌ {e}")
        return 2

    results: List[Dict[str, Any]] = []
    failed = False

    for target in args.path:
        midi_path = Path(target)
        if not midi_path.is_file():
            print(f"❌ Not a file: {target}")
            failed = True
            continue

        try:
            results.append(solo_file(midi_path, amount, args.output_dir))
        except (TrackSoloError, OSError) as e:
            print(f"❌ {midi_path.name}: {e}")
            failed = True

    if args.json:
        print(json.dumps(results, indent=2))
    else:
        for result in results:
            print()
            print(f"📦 {result['archive']}")
            for entry in result["entries"]:
                print(f"    ✅ {entry}")
        print()

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
