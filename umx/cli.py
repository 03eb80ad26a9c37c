"""
Command line tools for Unreal packages.

Usage:
    umx probe FILE...                   # Report whether each file is a package
    umx info FILE                       # Header, tables and exports
    umx extract FILE [-o DIR]           # Write embedded music/sound files
    umx extract FILE --class Music      # Only one export class
"""

import argparse
import os
import sys

from . import config
from .errors import UMXError
from .formats import detect_format, sanitize_filename
from .header import probe
from .log import setup_logging
from .package import UMXPackage
from .types import ProbeResult


def cmd_probe(args) -> int:
    status = 0
    for path in args.files:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            print(f"{path}: error ({e.strerror})")
            status = 1
            continue
        verdict = probe(data, len(data), args.require)
        print(f"{path}: {verdict.value}")
        if verdict is not ProbeResult.SUCCESS:
            status = 1
    return status


def cmd_info(args) -> int:
    try:
        pkg = UMXPackage.from_file(args.file)
    except (OSError, UMXError) as e:
        print(f"❌ {args.file}: {e}")
        return 1

    pkg.dump_info()
    print()
    print(f"  {'#':>4}  {'Class':<16} {'Name':<32} {'Offset':>10} {'Size':>10}")
    for i, export in enumerate(pkg.exports, 1):
        print(
            f"  {i:>4}  {pkg.class_name(export):<16} {pkg.object_name(export):<32} "
            f"{export.serial_offset:>10} {export.serial_size:>10}"
        )
    return 0


def cmd_extract(args) -> int:
    try:
        pkg = UMXPackage.from_file(args.file)
    except (OSError, UMXError) as e:
        print(f"❌ {args.file}: {e}")
        return 1

    class_names = [args.export_class] if args.export_class else config.PAYLOAD_CLASSES
    os.makedirs(args.output, exist_ok=True)

    written = 0
    for export, name, payload in pkg.iter_payloads(class_names):
        filename = f"{sanitize_filename(name)}.{detect_format(payload)}"
        out_path = os.path.join(args.output, filename)
        with open(out_path, "wb") as f:
            f.write(payload)
        print(f"  ✓ {name} -> {out_path} ({len(payload):,} bytes)")
        written += 1

    print(f"\n{written} file(s) extracted from {args.file}")
    return 0 if written else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="umx", description="Inspect Unreal music/sound packages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("probe", help="Check whether files are Unreal packages")
    p.add_argument("files", nargs="+")
    p.add_argument("--require", metavar="NAME", help="Name that must be in the name table")
    p.set_defaults(func=cmd_probe)

    p = sub.add_parser("info", help="Show header and export table")
    p.add_argument("file")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("extract", help="Extract embedded music/sound files")
    p.add_argument("file")
    p.add_argument("-o", "--output", default=config.OUTPUT_DIR, help="Output directory")
    p.add_argument("--class", dest="export_class", help="Only extract exports of this class")
    p.set_defaults(func=cmd_extract)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
