"""CLI to capture file snapshots and compare them against a baseline.

Usage examples:
  python -m cli.snapshot_compare capture out/extracted --out tests/_file_snapshots/sample.csv
  python -m cli.snapshot_compare compare tests/_file_snapshots/sample.csv out/extracted

Exit codes: 0 match / written, 1 mismatch, 2 unreadable or unwritable snapshot or bad arguments.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from bindinglist.errors import SnapshotFormatError
from bindinglist.testing import FileSnapshot, compare_snapshots

log = logging.getLogger(__name__)


def _load_target(target: Path) -> FileSnapshot:
    if target.is_dir():
        return FileSnapshot.from_directory(target)
    return FileSnapshot.load(target)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="snapshot-compare", description="Capture and compare file snapshots")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    cap = sub.add_parser("capture", help="Write a snapshot of a directory")
    cap.add_argument("root", help="Directory to capture")
    cap.add_argument("--out", required=True, help="Snapshot file to write (overwritten)")
    cap.add_argument("--name", help="Logical name stored with the snapshot (default: directory name)")

    cmp_ = sub.add_parser("compare", help="Compare a baseline against a snapshot file or directory")
    cmp_.add_argument("baseline", help="Baseline snapshot file")
    cmp_.add_argument("target", help="Snapshot file or directory to check")
    return p


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "capture":
        root = Path(args.root)
        if not root.is_dir():
            ap.error(f"Not a directory: {root}")
        snap = FileSnapshot.from_directory(root, args.name)
        try:
            out = snap.save(args.out)
        except SnapshotFormatError as exc:
            print(f"Cannot write snapshot: {exc}", file=sys.stderr)
            return 2
        print(f"Snapshot written: {out} (entries={len(snap)})")
        return 0

    baseline_file = Path(args.baseline)
    target = Path(args.target)
    for path in (baseline_file, target):
        if not path.exists():
            ap.error(f"Path not found: {path}")
    try:
        baseline = FileSnapshot.load(baseline_file)
        current = _load_target(target)
    except SnapshotFormatError as exc:
        print(f"Invalid snapshot: {exc}", file=sys.stderr)
        return 2
    result = compare_snapshots(baseline, current)
    if result:
        print(f"Match: {len(baseline)} entries")
        return 0
    print(result.message)
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
