"""Command line front end for caption injection.

Usage:
    inject-captions <map.json> <layers.json> <output.json>
    inject-captions --batch MAP:LAYERS [MAP:LAYERS ...] [--outdir DIR]

Single mode writes <output.json> plus <output>.tree.txt. Batch mode writes
<map-name>.captions.json for each pair, into --outdir or beside the map file.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from loguru import logger

from mapcaptions.config import Settings
from mapcaptions.errors import InputDocumentError, UsageError
from mapcaptions.logging_setup import setup_logging
from mapcaptions.pipeline import parse_pair, process_batch, process_one

BATCH_EXAMPLE = "--batch map_1.json:layers.json map_2.json:layers2.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inject-captions",
        description="Inject layer captions into a map definition and print its tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "paths", nargs="*", metavar="PATH",
        help="<map.json> <layers.json> <output.json> (single mode)",
    )
    parser.add_argument(
        "--batch", nargs="+", metavar="MAP:LAYERS",
        help="Process one or more map:layers pairs",
    )
    parser.add_argument(
        "--outdir", default="",
        help="Batch output directory (default: beside each map file)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Log level for stderr diagnostics (default: from settings)",
    )
    return parser


def run(args: argparse.Namespace, cfg: Settings) -> None:
    """Dispatch parsed arguments to single or batch processing.

    Raises:
        UsageError: If the arguments do not describe a runnable job.
    """
    if args.batch is not None:
        pairs = [pair for pair in map(parse_pair, args.batch) if pair is not None]
        if not pairs:
            raise UsageError(f"No pairs provided. Example: {BATCH_EXAMPLE}")
        process_batch(pairs, args.outdir or None, cfg)
        return

    if len(args.paths) != 3:
        raise UsageError("expected exactly three paths: <map.json> <layers.json> <output.json>")
    map_path, layers_path, out_path = args.paths
    process_one(map_path, layers_path, out_path, cfg)


def main(argv: Sequence[str] | None = None, cfg: Settings | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = cfg or Settings()
    setup_logging(args.log_level or cfg.log_level)

    try:
        run(args, cfg)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: {exc}", file=sys.stderr)
        return 1
    except InputDocumentError as exc:
        logger.error(f"Failed to load input: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
