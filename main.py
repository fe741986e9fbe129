"""
main.py

Command-line entry point: load pdfanno annotation files into an
annotation container and print what was imported.

Usage:
    pdfanno-import --primary mine.toml --reference gold.toml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import debug_trace
from annotation import AnnotationContainer, AnnotationSchemaError, RelationAnnotation
from settings import SettingsManager

log = logging.getLogger(__name__)


def _read_batch(paths: List[str]) -> List[str]:
    texts = []
    for p in paths:
        texts.append(Path(p).read_text(encoding="utf-8"))
    return texts


def _describe(a) -> str:
    part = "reference" if a.read_only else "primary"
    line = f"{part:9} {a.type:8} {a.uuid:34} {a.color or '-':9} {a.text}"
    if isinstance(a, RelationAnnotation):
        line += f"  [{a.direction}: {a.rel1} -> {a.rel2}]"
    return line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfanno-import",
        description="Import pdfanno annotation files and list the resulting annotations.",
    )
    parser.add_argument("--primary", nargs="*", default=[], metavar="FILE",
                        help="Annotation files imported as the editable set")
    parser.add_argument("--reference", nargs="*", default=[], metavar="FILE",
                        help="Annotation files imported as the read-only reference set")
    parser.add_argument("--color-map", metavar="JSON",
                        help="JSON file with the color map (defaults to the settings colors)")
    parser.add_argument("--settings-dir", metavar="DIR",
                        help="Directory holding settings.toml")
    parser.add_argument("--trace", action="store_true", help="Print pipeline trace lines")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings_manager = SettingsManager(settings_dir=Path(args.settings_dir) if args.settings_dir else None)
    general = settings_manager.settings.general
    if args.trace or general.debug_trace:
        debug_trace.set_enabled(True, general.trace_log_file or None)

    color_map = None
    if args.color_map:
        color_map = json.loads(Path(args.color_map).read_text(encoding="utf-8"))

    container = AnnotationContainer(settings=settings_manager.settings)
    try:
        for paths, is_primary in ((args.primary, True), (args.reference, False)):
            if not paths:
                continue
            batch = {"annotations": _read_batch(paths), "colorMap": color_map}
            container.import_annotations(batch, is_primary=is_primary)
    except AnnotationSchemaError as e:
        log.error("Import rejected: %s", e)
        for msg in e.errors:
            print(f"  {msg}", file=sys.stderr)
        return 2
    except OSError as e:
        log.error("Could not read annotation file: %s", e)
        return 1
    finally:
        debug_trace.close_log()

    for a in sorted(container.get_all_annotations(), key=lambda a: (a.read_only, a.type, a.text)):
        print(_describe(a))
    print(f"{len(container)} annotation(s): "
          f"{len(container.get_primary_annotations())} primary, "
          f"{len(container.get_reference_annotations())} reference")
    return 0


if __name__ == "__main__":
    sys.exit(main())
