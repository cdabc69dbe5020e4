"""CLI entrypoint for the diagnostics collector."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from fossa_diag import __version__
from fossa_diag.collection import run_collection
from fossa_diag.collection.messages import REQUIREMENTS_DONE, REQUIREMENTS_HEADER, RUN_HEADER
from fossa_diag.config import DEFAULT_OUTPUT_PATH, get_settings
from fossa_diag.errors import DiagnosticsError, MissingDependencyError
from fossa_diag.options import confirm_save_path, require_release_inputs, resolve_options
from fossa_diag.tooling import REQUIRED_TOOLS, check_dependencies

PROG = "fossa-diag"

USAGE_EXAMPLES = f"""
usage examples:
  Run with no flags and every input is prompted for:
    {PROG}

  Check for missing commands this one depends on:
    {PROG} -R

  Setting both of these assumes non-interactive mode:
    {PROG} -r <RELEASE_NAME> -n <NAMESPACE>

  Setting the file name explicitly skips the save path prompt:
    {PROG} -f mydata.tar.gz

  Forced non-interactive mode errors instead of prompting:
    NON_INTERACTIVE=true {PROG} -r <RELEASE_NAME> -n <NAMESPACE>
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Cluster diagnostics collection. Pulls information from the cluster about your "
            "FOSSA deployment and produces a tarball that can be shared with support."
        ),
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-r", "--release-name", default=None, help="name of the fossa-core release")
    parser.add_argument("-n", "--namespace", default=None, help="namespace fossa-core is installed in")
    parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        type=Path,
        default=None,
        help=f"file save path to output tarball with info (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="output_path",
        type=Path,
        help="same as -o; the save path prompt is skipped",
    )
    parser.add_argument(
        "-R",
        "--check-requirements",
        dest="explain_only",
        action="store_true",
        help="list missing commands required for this tool to work, then exit",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="enable debugging")
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument("--context", default=None, help="kubernetes context to use")
    parser.add_argument("-h", "--help", action="store_true", help="this help message")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=Console(stderr=True))],
    )
    logger = logging.getLogger("fossa_diag")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for fossa-diag CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help()
        return 1
    _configure_logging(args.debug)
    console = Console(soft_wrap=True)

    try:
        command = shlex.join([PROG, *(sys.argv[1:] if argv is None else argv)])
        settings = get_settings()
        options = resolve_options(args, settings, command=command)

        console.print(
            RUN_HEADER.format(command=command, started_at=datetime.now().strftime("%c")),
            markup=False,
            highlight=False,
        )

        if options.explain_only:
            console.print(REQUIREMENTS_HEADER)
        list_all = options.explain_only or settings.no_exit
        missing = check_dependencies(REQUIRED_TOOLS, console, exit_on_missing=not list_all)
        if options.explain_only:
            console.print(REQUIREMENTS_DONE)
            console.print()
            return 0
        if missing:
            names = ", ".join(tool.name for tool in missing)
            raise MissingDependencyError(f"required commands are not installed: {names}")

        options = confirm_save_path(options, console)
        require_release_inputs(options)
        run_collection(options, settings, console)
        return 0
    except DiagnosticsError as e:
        print(f"{PROG}: ERROR: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"{PROG}: ERROR: invalid configuration: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(f"{PROG}: interrupted", file=sys.stderr)
        return 130
    except Exception as e:
        logging.exception("Collection failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
