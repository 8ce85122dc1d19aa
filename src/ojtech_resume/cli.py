from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from ojtech_resume.constants.resume_constants import DEFAULT_TEMPLATE
from ojtech_resume.services.resume_renderer import render_content
from ojtech_resume.templates import list_templates


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ojtech-resume",
        description="Render stored CV content to a standalone HTML resume.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Render CV content to HTML")
    render_parser.add_argument("input", help="File with raw CV content, or - for stdin")
    render_parser.add_argument(
        "-o", "--output", type=Path, help="Write HTML here instead of stdout"
    )
    render_parser.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        choices=list_templates(),
        help=f"Resume template (default: {DEFAULT_TEMPLATE})",
    )

    subparsers.add_parser("templates", help="List available resume templates")
    return parser


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def run_render(source: str, output: Path | None, template_name: str) -> int:
    """Render *source* and write the HTML document.

    Returns:
        Exit code (0 for success, 1 when there is nothing to render).
    """
    outcome = render_content(_read_input(source), template_name)
    if not outcome.ok:
        print(f"❌ {outcome.error.user_message}", file=sys.stderr)
        return 1

    if output is None:
        sys.stdout.write(outcome.html)
    else:
        output.write_text(outcome.html, encoding="utf-8")
        print(f"✅ Wrote {output} ({outcome.path.value})")
    return 0


def run_templates() -> int:
    for name in list_templates():
        print(name)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the CLI application."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "render":
            return run_render(args.input, args.output, args.template)
        return run_templates()
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user. Exiting.", file=sys.stderr)
        return 130
    except OSError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
