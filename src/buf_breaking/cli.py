"""buf-breaking CLI: run buf breaking and report to GitHub Actions."""

import argparse
import logging
import os
import sys
from importlib.metadata import version as get_version, PackageNotFoundError

from .api import run
from .config import load_config
from .errors import ConfigurationError
from ._internal.workflow import WorkflowCommands


def main():
    """Main CLI entry point for the buf-breaking command."""
    # Get version for --version argument (handle PackageNotFoundError)
    try:
        package_version = get_version("buf-breaking-action")
    except PackageNotFoundError:
        package_version = "dev"

    parser = argparse.ArgumentParser(
        prog="buf-breaking",
        description=(
            "Detect breaking changes with buf. Arguments default to the "
            "GitHub Actions inputs (INPUT_* environment variables)."
        )
    )
    parser.add_argument("--version", action="version", version=f"buf-breaking {package_version}")
    parser.add_argument(
        "--input",
        default=None,
        help="Current schema reference (local path, module or git ref)"
    )
    parser.add_argument(
        "--against",
        default=None,
        help="Baseline schema reference to check against"
    )
    parser.add_argument(
        "--since",
        default=None,
        help="Older baseline; only report changes that are not already breaking against it"
    )
    parser.add_argument(
        "--buf-path",
        dest="buf_path",
        default=None,
        help="Path to the buf binary (defaults to PATH lookup)"
    )
    parser.add_argument(
        "--comment",
        action="store_true",
        default=None,
        help="Post findings as pull request comments (needs github_token)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )

    args = parser.parse_args()

    verbose = args.verbose or os.environ.get("RUNNER_DEBUG") == "1"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(
            input=args.input,
            against=args.against,
            since=args.since,
            buf_path=args.buf_path,
            comment=args.comment,
        )
    except ConfigurationError as e:
        WorkflowCommands().set_failed(e.message)
        sys.exit(1)

    sys.exit(run(config))


if __name__ == "__main__":
    main()
