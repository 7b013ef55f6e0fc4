"""CLI entry point for image-descriptor.

Generate or translate the ``alt`` text of the HTML ``<img>`` element at
a cursor position, using an AI provider.

Usage::

    image-descriptor describe page.html --offset 120
    image-descriptor describe page.html --line 4 --column 10 --workspace-root .
    image-descriptor translate page.html --offset 120 --provider mistral
    image-descriptor show-prompt describe
    image-descriptor providers
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import colorlog
import httpx

from image_descriptor import __version__
from image_descriptor.errors import ImageDescriptorError
from image_descriptor.locator import offset_at
from image_descriptor.pipeline import AltTextEdit, suggest_alt_text, translate_alt_text
from image_descriptor.prompt import PROMPTS
from image_descriptor.provider_api import DEFAULT_TIMEOUT_S, ProviderApi
from image_descriptor.providers import (
    DEFAULT_PROVIDER,
    PROVIDERS,
    resolve_provider_config,
)

_log = logging.getLogger("image-descriptor")

ENV_PROVIDER = "IMAGE_DESCRIPTOR_PROVIDER"
"""Environment variable supplying the default ``--provider``."""

ENV_API_KEY = "IMAGE_DESCRIPTOR_API_KEY"
"""Environment variable supplying the default ``--api-key``."""


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_colorized_logging():
    """Configure colorized logging output."""
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)-12s%(reset)s: "
            "%(message)s",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)

    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _setup_logging(verbose: bool) -> None:
    """Initialize colorized logging and optionally enable debug level."""
    setup_colorized_logging()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    # -- Parent parser shared by describe/translate ----------------------------
    edit_parent = argparse.ArgumentParser(add_help=False)
    edit_parent.add_argument(
        "document",
        type=Path,
        help="HTML document containing the img element",
    )
    position = edit_parent.add_argument_group("cursor position")
    position.add_argument(
        "--offset",
        type=int,
        default=None,
        metavar="N",
        help="Zero-based character offset of the cursor",
    )
    position.add_argument(
        "--line",
        type=int,
        default=None,
        metavar="L",
        help="Zero-based cursor line (use with --column)",
    )
    position.add_argument(
        "--column",
        type=int,
        default=0,
        metavar="C",
        help="Zero-based cursor column (default: %(default)s)",
    )
    edit_parent.add_argument(
        "--provider",
        choices=list(PROVIDERS.keys()),
        default=os.environ.get(ENV_PROVIDER) or DEFAULT_PROVIDER,
        help=f"AI provider (default: ${ENV_PROVIDER} or %(default)s)",
    )
    edit_parent.add_argument(
        "--api-key",
        default=None,
        metavar="KEY",
        help=f"Provider API key (default: ${ENV_API_KEY})",
    )
    edit_parent.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        metavar="SECONDS",
        help="HTTP timeout for the provider request (default: %(default)s)",
    )
    edit_parent.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rewritten tag instead of writing the document",
    )
    edit_parent.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    # -- Main parser -----------------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="image-descriptor",
        description="Generate accessible alternative text for HTML images "
                    "using AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Commands:
  describe      Suggest alt text for the img at the cursor (needs API key)
  translate     Translate the img's alt text to English (needs API key)
  show-prompt   Print a system prompt to stdout
  providers     List supported AI providers

Examples:
  %(prog)s describe page.html --offset 120
  %(prog)s describe page.html --line 4 --column 10 --workspace-root .
  %(prog)s translate page.html --offset 120 --provider mistral
  %(prog)s describe page.html --offset 120 --dry-run

The API key is read from --api-key or ${ENV_API_KEY}.
Run '%(prog)s COMMAND --help' for command-specific options.
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # -- describe --------------------------------------------------------------
    p_describe = subparsers.add_parser(
        "describe",
        parents=[edit_parent],
        help="Suggest alt text for the img at the cursor",
        description="Send the image of the img element at the cursor to the "
                    "AI provider and write the suggested alt text back into "
                    "the element.",
    )
    p_describe.add_argument(
        "--workspace-root",
        type=Path,
        default=None,
        metavar="DIR",
        help="Workspace folder for local images; '/'-prefixed src paths "
             "are relative to it (default: current directory)",
    )

    # -- translate -------------------------------------------------------------
    subparsers.add_parser(
        "translate",
        parents=[edit_parent],
        help="Translate the img's alt text to English",
        description="Translate the existing alt text of the img element at "
                    "the cursor into English and write it back.",
    )

    # -- show-prompt -----------------------------------------------------------
    p_show = subparsers.add_parser(
        "show-prompt",
        help="Print a system prompt to stdout",
        description="Print the system prompt for a command and exit.",
    )
    p_show.add_argument(
        "which",
        nargs="?",
        choices=list(PROMPTS.keys()),
        default="describe",
        help="Which prompt to print (default: %(default)s)",
    )

    # -- providers -------------------------------------------------------------
    subparsers.add_parser(
        "providers",
        help="List supported AI providers",
        description="List supported AI providers with endpoint and model.",
    )

    return parser


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _read_document(path: Path) -> str:
    """Read *path* without newline translation so offsets match the file."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write_document(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def _resolve_offset(args: argparse.Namespace, text: str) -> int | None:
    """Cursor offset from ``--offset`` or ``--line``/``--column``.

    Returns ``None`` (after logging) when neither or both are given, or
    when a value is negative.
    """
    if args.offset is not None and args.line is not None:
        _log.error("--offset and --line are mutually exclusive")
        return None
    if args.offset is not None:
        if args.offset < 0:
            _log.error("--offset must not be negative")
            return None
        return args.offset
    if args.line is not None:
        if args.line < 0 or args.column < 0:
            _log.error("--line and --column must not be negative")
            return None
        return offset_at(text, args.line, args.column)
    _log.error("Cursor position required: --offset N or --line L --column C")
    return None


def _finish(args: argparse.Namespace, edit: AltTextEdit, text: str) -> None:
    """Write the edit to the document (or print it with ``--dry-run``)."""
    if args.dry_run:
        print(edit.rewrite.new_tag_text)
        return
    _write_document(args.document, edit.apply(text))
    _log.info("✓ alt text written: %s", edit.alt_text)


def _run_edit_command(args: argparse.Namespace) -> int:
    """Shared driver for ``describe`` and ``translate``."""
    _setup_logging(args.verbose)

    doc_path: Path = args.document.resolve()
    if not doc_path.is_file():
        _log.error("Document not found: %s", args.document)
        return 1

    try:
        text = _read_document(doc_path)
        offset = _resolve_offset(args, text)
        if offset is None:
            return 1

        config = resolve_provider_config(
            args.provider, args.api_key or os.environ.get(ENV_API_KEY),
        )
        _log.debug("Provider: %s (%s)", config.provider, config.model)

        # The document is re-read after the AI call so the rewrite is
        # validated against what is on disk at that point.
        latest: dict[str, str] = {}

        def current_text() -> str:
            latest["text"] = _read_document(doc_path)
            return latest["text"]

        with httpx.Client(timeout=args.timeout) as http:
            api = ProviderApi(config, http)
            if args.command == "describe":
                workspace_root = (args.workspace_root or Path.cwd()).resolve()
                edit = suggest_alt_text(
                    text, offset, doc_path, api.describe_image,
                    workspace_root=workspace_root,
                    current_text=current_text,
                )
            else:
                edit = translate_alt_text(
                    text, offset, api.translate_text,
                    current_text=current_text,
                )

        _finish(args, edit, latest["text"])
        return 0

    except ImageDescriptorError as e:
        _log.error("Failed to %s alt text: %s", args.command, e)
        return 1
    except Exception as e:
        _log.error("Fatal error: %s: %s", type(e).__name__, e)
        return 1


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_show_prompt(args: argparse.Namespace) -> int:
    """Handle the ``show-prompt`` command."""
    print(PROMPTS[args.which])
    return 0


def _cmd_providers(args: argparse.Namespace) -> int:
    """Handle the ``providers`` command."""
    for name, pdef in PROVIDERS.items():
        marker = "*" if name == DEFAULT_PROVIDER else " "
        print(f"{marker} {name:<10s} {pdef.model:<22s} {pdef.endpoint}")
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = _build_parser()

    # Show help if no arguments provided.
    if argv is None and len(sys.argv) == 1 or argv == []:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    # No subcommand given.
    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "describe": _run_edit_command,
        "translate": _run_edit_command,
        "show-prompt": _cmd_show_prompt,
        "providers": _cmd_providers,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
