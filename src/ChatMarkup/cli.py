from __future__ import annotations

import argparse
import json
import logging

from . import markdown_parser, renderer_html
from .config import RenderOptions, load_config
from .message import build_message_content
from .utils import configure_logging, read_message, write_output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatmarkup",
        description="Render a chat message written in markdown into Matrix HTML.",
    )
    parser.add_argument("input", type=str, help="Path to the message text, or - for stdin")
    parser.add_argument("-o", "--output", type=str, help="Write the result to this file instead of stdout")
    parser.add_argument("--config", type=str, help="YAML file with render options")
    parser.add_argument(
        "--format",
        choices=("html", "json", "tree"),
        default="html",
        help="html fragment, message content JSON, or the parsed document tree",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    options = load_config(args.config) if args.config else RenderOptions()

    logging.debug("Reading %s", args.input)
    text = read_message(args.input)
    logging.debug("Message length: %d chars", len(text))

    if args.format == "json":
        result = json.dumps(build_message_content(text, options), ensure_ascii=False, indent=2)
    elif args.format == "tree":
        result = "\n".join(repr(node) for node in markdown_parser.parse_markdown(text))
    else:
        result = renderer_html.render_html(markdown_parser.parse_markdown(text), options)

    write_output(result, args.output)
    if args.output:
        logging.info("Saved %s output to %s", args.format, args.output)


if __name__ == "__main__":
    main()
