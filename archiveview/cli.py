"""Command-line front door for archiveview.

Loads a ZIP container through the fingerprinted cache (or restores the last
active one), prints its tree, and optionally prints a windowed slice of one
entry.
"""

from __future__ import annotations

import argparse
import asyncio
import locale
import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path

from .config import DEFAULT_CACHE_DB_PATH, LastActivePointer, load_auto_expand, load_style
from .ingest import FingerprintedCache, SqliteContentStore
from .logutil import setup_logging
from .path_index import format_tree_row
from .session import ArchiveSession
from .window import Viewport, WindowRenderer, sanitize_terminal_text, terminal_row_probe
from .window.ansi import clip_ansi_line, wrap_ansi_line
from .window.highlight import colorize

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a ZIP archive's tree and entries without re-decompressing it on every visit."
    )
    parser.add_argument(
        "archive",
        nargs="?",
        default=None,
        help="Path to a ZIP archive. Defaults to the last active archive from the cache.",
    )
    parser.add_argument("--show", metavar="PATH", help="Print a windowed slice of the entry at PATH.")
    parser.add_argument("--scroll", type=_nonnegative_int, default=0, help="First screen row of the slice.")
    parser.add_argument("--rows", type=_positive_int, default=None, help="Viewport height in rows.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Viewport width in columns.")
    parser.add_argument(
        "--expand",
        metavar="NAME",
        action="append",
        default=None,
        help="Expand directories with this name (repeatable).",
    )
    parser.add_argument("--expand-all", action="store_true", help="Expand every directory.")
    parser.add_argument("--no-cache", action="store_true", help="Always decompress; never read or write the cache database.")
    parser.add_argument("--cache-db", metavar="PATH", default=None, help="Cache database path.")
    parser.add_argument("--list-cache", action="store_true", help="List cached archives and exit.")
    parser.add_argument("--clear-cache", action="store_true", help="Wipe the cache and forget the last active archive.")
    parser.add_argument("--style", default=None, help="Pygments style name.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log cache and ingestion details to stderr.")
    return parser


def scroll_percent(scroll_top: float, total_height: float, viewport_height: float) -> float:
    """Vertical scroll position as a percentage of the scrollable range."""
    max_start = max(0.0, total_height - viewport_height)
    if max_start <= 0:
        return 0.0
    return (max(0.0, min(scroll_top, max_start)) / max_start) * 100.0


def render_window(
    renderer: WindowRenderer,
    path: str,
    scroll: int,
    rows: int,
    width: int,
    style: str,
    no_color: bool,
) -> list[str]:
    """Return the screen rows intersecting ``[scroll, scroll + rows)``.

    Only materialized blocks are formatted; heights are in screen rows.
    """
    top = renderer.scroll_to(scroll, rows)
    bottom = top + rows
    out: list[str] = []
    for item in renderer.materialize(Viewport(top, rows)):
        text = sanitize_terminal_text(renderer.blocks[item.index].text)
        if not no_color:
            text = colorize(text, path, style)
        screen_rows = [chunk for line in text.split("\n") for chunk in wrap_ansi_line(line, width)]
        for offset, row in enumerate(screen_rows):
            y = item.start + offset
            if top <= y < bottom:
                out.append(row if no_color else f"{row}\033[0m")
    return out


def _format_timestamp(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


async def _run(args: argparse.Namespace) -> None:
    term = shutil.get_terminal_size((80, 24))
    width = args.max_cols if args.max_cols is not None else max(1, term.columns)
    rows = args.rows if args.rows is not None else max(1, term.lines - 2)
    style = args.style or load_style()

    store = SqliteContentStore(Path(args.cache_db) if args.cache_db else DEFAULT_CACHE_DB_PATH)
    cache = FingerprintedCache(store, LastActivePointer())
    renderer = WindowRenderer(measure=terminal_row_probe(width))
    auto_expand = args.expand if args.expand is not None else load_auto_expand()
    session = ArchiveSession(cache, renderer=renderer, auto_expand=auto_expand)
    write = sys.stdout.write

    try:
        if args.list_cache or args.clear_cache:
            await cache.init()
            if args.list_cache:
                for summary in await cache.summaries():
                    write(f"{summary.key[:16]}  {summary.entry_count:>7} entries  {_format_timestamp(summary.timestamp)}\n")
            if args.clear_cache:
                if not await session.clear_cache():
                    raise SystemExit(f"Could not clear cache: {session.last_error}")
                write("Cache cleared.\n")
            if args.archive is None:
                return

        if args.archive is not None:
            archive_path = Path(args.archive)
            if not archive_path.is_file():
                raise SystemExit(f"Archive not found: {archive_path}")
            if not args.no_cache:
                await cache.init()
            result = await session.upload(archive_path.read_bytes(), remember=not args.no_cache)
            if result is None:
                raise SystemExit(f"Cannot read archive: {session.last_error}")
        else:
            if args.no_cache or await session.start() is None:
                raise SystemExit("No archive given and no cached archive to restore.")

        if args.expand_all:
            session.index.expand_all()

        preview = None
        if args.show is not None:
            preview = session.open_entry(args.show)
            if preview is None:
                raise SystemExit(f"Entry not found: {args.show}")

        state = session.index.state
        focused = session.index.focused()
        for row in session.index.rows():
            node = row.node
            line = format_tree_row(
                row,
                state.expanded_dirs,
                focused=focused is not None and node.entry is focused,
                selected=not node.is_directory and node.path == state.selected_path,
                no_color=args.no_color,
            )
            write(clip_ansi_line(line, width) + ("" if args.no_color else "\033[0m") + "\n")

        if preview is None:
            return
        write("\n")
        if preview.is_binary:
            write(preview.text + "\n")
            return
        for line in render_window(renderer, preview.path, args.scroll, rows, width, style, args.no_color):
            write(line + "\n")
        percent = scroll_percent(renderer.scroll_top, renderer.total_height(), rows)
        write(f"-- {preview.path}  {len(renderer.blocks)} blocks  {percent:.0f}% --\n")
    finally:
        await cache.close()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one archiveview command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        # tree sibling order collates with the user locale
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("user collation locale unavailable, using C order")
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
