"""
modsnap — entry point.

Usage:
    python -m modsnap serve                      # web server on :8000
    python -m modsnap serve --port 3000
    python -m modsnap check-catalog [PATH]       # validate a catalog file
"""

import argparse
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="modsnap", description="Modular building placement and snapping")
    sub = p.add_subparsers(dest="cmd")

    sv = sub.add_parser("serve", help="Start the placement web server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    ck = sub.add_parser("check-catalog", help="Load a catalog file and list validation errors")
    ck.add_argument("path", nargs="?", default=None, help="Catalog JSON (default: bundled catalog)")

    return p


def _check_catalog(path: str | None) -> int:
    from modsnap.catalog import load_catalog

    result = load_catalog(Path(path) if path else None)
    for preset in result.presets:
        print(f"  {preset.id:>6}  {preset.name}  [{preset.category}]  {preset.model_path}")
    for err in result.errors:
        print(f"  ERROR {err}")
    print(f"{len(result.presets)} presets, {len(result.errors)} errors")
    return 0 if result.ok else 1


def main() -> int:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd in (None, "serve"):
        from modsnap.web.server import main as serve
        serve(host=getattr(args, "host", "127.0.0.1"), port=getattr(args, "port", 8000))
        return 0

    if args.cmd == "check-catalog":
        return _check_catalog(args.path)

    return 2


if __name__ == "__main__":
    sys.exit(main())
