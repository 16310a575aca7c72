#!/usr/bin/env python3
"""
nfm_to_html.py

Command line front end for the No-Flavor Markdown parser.

- reads one document from a file or from stdin (nfm_reader)
- converts it with nfm_parser.parse()
- writes the HTML to stdout or to a file, optionally wrapped in a
  complete HTML document (--standalone)

Exit status: 0 on success, 1 when reading or writing fails, 2 for usage
errors (no input, empty stdin, invalid input path, unreadable config).
"""
from __future__ import annotations

import argparse
import html
import sys
import time
from pathlib import Path
from typing import Optional

from config_loader import NfmConfig, load_config_if_present
from helper import print_gray
from nfm_parser import parse, parse_file
from nfm_reader import read_stdin, safe_input_path

LICENSE_NOTICE = """\
nfm: A parser for No-Flavor Markdown.

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>."""


def escape_html(text: str) -> str:
    """Escape text for HTML output."""
    return html.escape(text, quote=True)


def open_html_document(cfg: NfmConfig, title: Optional[str] = None) -> str:
    """Return the HTML prolog for a standalone document."""
    safe_title = escape_html(title or cfg.title)

    stylesheet = ""
    if cfg.stylesheet:
        stylesheet = f'  <link rel="stylesheet" href="{escape_html(cfg.stylesheet)}" />\n'

    return (
        "<!doctype html>\n"
        f"<html lang=\"{escape_html(cfg.lang)}\">\n"
        "<head>\n"
        "  <meta charset=\"utf-8\" />\n"
        f"  <title>{safe_title}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        + stylesheet +
        "</head>\n"
        "<body>\n"
    )


def close_html_document() -> str:
    """Return the HTML epilog."""
    return "</body>\n</html>\n"


def render_document(body_html: str, cfg: NfmConfig, *, title: Optional[str] = None) -> str:
    """Wrap converted body HTML into a complete document."""
    return open_html_document(cfg, title) + body_html + close_html_document()


def write_output(html_text: str, output_path: Optional[Path], *, encoding: str = "utf-8") -> None:
    """Write to `output_path` (created/truncated), or to stdout when None."""
    if output_path is None:
        sys.stdout.write(html_text)
        return
    output_path.write_text(html_text, encoding=encoding)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nfm",
        description="Convert No-Flavor Markdown to HTML.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Markdown file to convert")
    parser.add_argument("-i", "--read-stdin", action="store_true", help="Read the document from stdin")
    parser.add_argument("-o", "--output-path", default=None, help="Write HTML to this file instead of stdout")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Parse but do not write any output")
    parser.add_argument("-t", "--timing", action="store_true", help="Report the parse time in seconds")
    parser.add_argument("-l", "--license-notice", action="store_true", help="Print the license notice and exit")
    parser.add_argument("-c", "--config", default="config.yml", help="Config YAML file (default: config.yml)")
    parser.add_argument("-s", "--standalone", action="store_true", help="Emit a complete HTML document")
    parser.add_argument("--title", default=None, help="Title for --standalone (default: from config)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.license_notice:
        print(LICENSE_NOTICE)
        return 0

    try:
        cfg = load_config_if_present(Path(args.config))
    except Exception as e:
        print(f"[nfm] Failed to load config: {e}", file=sys.stderr)
        return 2

    try:
        if args.read_stdin:
            text = read_stdin()
            start = time.perf_counter()
            body_html = parse(text)
        elif args.path:
            input_path = safe_input_path(args.path)
            start = time.perf_counter()
            body_html = parse_file(input_path, encoding=cfg.encoding)
        else:
            print("[nfm] Argument PATH must be provided when not reading from stdin.", file=sys.stderr)
            return 2
        elapsed = time.perf_counter() - start
    except IsADirectoryError as e:
        print(f"[nfm] Invalid input path: {e}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as e:
        print(f"[nfm] Error while reading: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[nfm] {e}", file=sys.stderr)
        return 2

    if args.standalone:
        body_html = render_document(body_html, cfg, title=args.title)

    if not args.dry_run:
        output_path = Path(args.output_path) if args.output_path else None
        try:
            write_output(body_html, output_path, encoding=cfg.encoding)
        except OSError as e:
            print(f"[nfm] Error while writing: {e}", file=sys.stderr)
            return 1

    if args.timing:
        print_gray(f"{elapsed}s")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
