"""Command line front end for the chat response formatter."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env BEFORE importing config: config.py reads CHAT_FORMAT_* variables at import time
PACKAGE_ROOT = Path(__file__).resolve().parent
REPO_ROOT = PACKAGE_ROOT.parent
load_dotenv(REPO_ROOT / ".env")

from .config import THEMES, resolve_config
from .content_detector import ContentShape, detect_content
from .message_renderer import format_message, render_message_text, render_preview_page
from .segmenters import segment_numbered_list
from .text_cleanup import clean_response_text, validate_response_text


def read_input(source: Optional[str]) -> str:
    if not source or source == "-":
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding="utf-8")


def write_output(content: str, destination: Optional[str]) -> None:
    if destination:
        path = Path(destination).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logging.info("[output] Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
    else:
        sys.stdout.write(content)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Format chatbot responses into HTML")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Format a response into HTML or plaintext")
    render_parser.add_argument("input", nargs="?", help="File holding the raw response (default: stdin)")
    render_parser.add_argument("--theme", choices=THEMES, help="Color theme (default: CHAT_FORMAT_THEME or light)")
    render_parser.add_argument("--accent-color", help="Accent color for titles, e.g. '#2563eb'")
    render_parser.add_argument("--font-class", help="CSS class applied to the container for typography")
    render_parser.add_argument(
        "--no-animations",
        dest="enable_animations",
        action="store_const",
        const=False,
        default=None,
        help="Omit the fade-in animation class",
    )
    render_parser.add_argument(
        "--format",
        choices=("html", "text"),
        default="html",
        help="Output HTML markup or a plaintext rendering of it (default: html)",
    )
    render_parser.add_argument(
        "--standalone",
        action="store_true",
        help="Wrap the HTML fragment in a complete document for previewing in a browser",
    )
    render_parser.add_argument("--output", help="Write to this path instead of stdout")
    render_parser.add_argument("--verbose", action="store_true", help="Log classification and segmentation details")

    detect_parser = subparsers.add_parser("detect", help="Report the detected content shape")
    detect_parser.add_argument("input", nargs="?", help="File holding the raw response (default: stdin)")
    detect_parser.add_argument("--verbose", action="store_true", help="Log classification and segmentation details")

    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def run_render(args: argparse.Namespace) -> int:
    raw_text = read_input(args.input)
    config = resolve_config({
        "theme": args.theme,
        "accentColor": args.accent_color,
        "fontClass": args.font_class,
        "enableAnimations": args.enable_animations,
    })

    markup = format_message(raw_text, config)
    if args.format == "text":
        output = render_message_text(markup)
    elif args.standalone:
        output = render_preview_page(markup, config)
    else:
        output = markup + "\n" if markup else ""

    write_output(output, args.output)
    return 0


def run_detect(args: argparse.Namespace) -> int:
    text = clean_response_text(read_input(args.input))
    profile = detect_content(text)

    lines = [f"shape: {profile.shape.value}", f"product_like: {str(profile.product_like).lower()}"]
    segmentation = segment_numbered_list(text) if profile.shape is ContentShape.NUMBERED_LIST else None
    if segmentation is not None:
        lines.append(f"strategy: {segmentation.strategy}")
        lines.append(f"items: {len(segmentation.items)}")
    for warning in validate_response_text(text):
        lines.append(f"warning: {warning}")

    sys.stdout.write("\n".join(lines) + "\n")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "render":
            return run_render(args)
        elif args.command == "detect":
            return run_detect(args)
    except OSError as exc:
        logging.error("[input] %s", exc)
        return 1
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
