"""
CLI for profiling a Python script or module.

Runs the target inside a profiling session, with profiling enabled for the
whole process, and writes the hierarchical and leaf time reports when it
finishes (or fails).
"""

import argparse
import json
import logging
import os
import runpy
import sys

from ..config import ProfilerConfig
from ..session import Session, set_session
from ..utils import setup_logging, BaseArgumentParser, validate_common_arguments, configure_logging_level


def create_parser():
    """Create argument parser for the run command."""
    parser = BaseArgumentParser.create_base_parser(
        prog="treeprof-run",
        description="Run a Python script or module with treeprof enabled and print its call-tree report.",
        epilog=(
            "Examples:\n"
            "  treeprof-run build.py --release\n"
            "  treeprof-run --clock wall --filter 1 -m mypkg.tool arg1\n"
            "  treeprof-run --json -o profile.json build.py"
        )
    )
    parser.add_argument(
        "-m",
        dest="module",
        default=None,
        help="Run a library module as a script instead of a file"
    )
    parser.add_argument(
        "--bucket",
        default=None,
        help="Name of the root bucket (default: the script or module name)"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the report to this file instead of stdout"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write the call tree as JSON instead of the text report"
    )
    BaseArgumentParser.add_report_arguments(parser)
    BaseArgumentParser.add_verbose_quiet_arguments(parser)
    parser.add_argument("target", nargs="?", help="Python script to profile")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the target")
    return parser


def validate_arguments(args: argparse.Namespace) -> bool:
    """
    Validate parsed arguments.

    Returns:
        True if arguments are valid, False otherwise
    """
    if not validate_common_arguments(args):
        return False

    if not args.module and not args.target:
        logging.error("A script path or -m MODULE is required")
        return False

    if not args.module and not os.path.isfile(args.target):
        logging.error(f"Script does not exist: {args.target}")
        return False

    return True


def _target_argv(args: argparse.Namespace) -> list:
    if args.module:
        rest = ([args.target] if args.target else []) + list(args.args)
        return [args.module] + rest
    return [args.target] + list(args.args)


def _write_output(text: str, output_path=None) -> None:
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        logging.info(f"Report written to: {output_path}")
    else:
        print(text)


def profile_target(args: argparse.Namespace) -> int:
    """
    Run the target described by `args` inside a profiling session.

    The report is written even when the target raises; the exception is then
    re-raised.

    Returns:
        Exit code requested by the target through SystemExit, or 0
    """
    session = Session(ProfilerConfig(enabled=True, filter_ms=args.filter, clock=args.clock))
    set_session(session)

    bucket = args.bucket or args.module or os.path.basename(args.target)
    saved_argv = sys.argv[:]
    saved_path = sys.path[:]
    sys.argv = _target_argv(args)
    if args.module:
        sys.path.insert(0, os.getcwd())
    else:
        sys.path.insert(0, os.path.dirname(os.path.abspath(args.target)))

    def target():
        if args.module:
            runpy.run_module(args.module, run_name="__main__", alter_sys=True)
        else:
            runpy.run_path(args.target, run_name="__main__")

    exit_code = 0
    session.start()
    try:
        session.time(bucket, target)
    except SystemExit as e:
        if isinstance(e.code, int):
            exit_code = e.code
        elif e.code is None:
            exit_code = 0
        else:
            logging.error(str(e.code))
            exit_code = 1
    finally:
        sys.argv = saved_argv
        sys.path[:] = saved_path
        text = session.stop()
        if args.json:
            text = json.dumps(session.build_tree().to_dict(), indent=2)
        _write_output(text, args.output)

    return exit_code


def main():
    """Main entry point for treeprof-run command."""
    setup_logging()
    parser = create_parser()
    args = parser.parse_args()

    configure_logging_level(args)

    if not validate_arguments(args):
        sys.exit(1)

    try:
        exit_code = profile_target(args)
    except KeyboardInterrupt:
        logging.info("Profiling cancelled by user.")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Profiled program failed: {e}")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
