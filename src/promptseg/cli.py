"""promptseg CLI: render or explain the Node.js segment for a directory."""

import argparse
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main():
    """Main CLI entry point for promptseg commands."""
    try:
        promptseg_version = get_version("promptseg")
    except PackageNotFoundError:
        promptseg_version = "dev"

    parser = argparse.ArgumentParser(
        prog="promptseg",
        description="promptseg: Node.js version segment for shell prompts"
    )
    parser.add_argument("--version", action="version", version=f"promptseg {promptseg_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Directory to evaluate (defaults to the current directory)"
    )
    parent_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML configuration file (defaults to $PROMPTSEG_CONFIG or ~/.config/promptseg.toml)"
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug details to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "prompt",
        help="Print the rendered segment (prints nothing when the segment is omitted)",
        parents=[parent_parser]
    )
    subparsers.add_parser(
        "explain",
        help="Print the evaluation result as JSON",
        parents=[parent_parser]
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)

    # Lazy import
    from promptseg.api import evaluate
    from promptseg._internal.config import load_config

    directory = (args.path or Path.cwd()).resolve()
    result = evaluate(directory, load_config(args.config))

    if args.command == "prompt":
        if result.output is not None:
            sys.stdout.write(result.output)
            sys.stdout.flush()
    elif args.command == "explain":
        payload = result.model_dump(mode="json")
        print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))


if __name__ == "__main__":
    main()
