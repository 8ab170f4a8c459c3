"""
CLI to redact schemas and send crash reports from the command line.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from panicreport import __version__
from panicreport.config import ReporterConfig
from panicreport.core.reporter import PanicReporter
from panicreport.errors import (
    ConfigError,
    EnginePanic,
    ExitCode,
    PanicReportError,
    as_exit_code,
)
from panicreport.logging import get_logger, setup_logging
from panicreport.privacy import SchemaRedactor
from panicreport.schemas.base import ErrorArea
from panicreport.submitters import get_submitter

logger = get_logger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="panicreport",
        description="Redact schema credentials and send crash reports",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        help="Log level (default: PANICREPORT_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")

    redact = subparsers.add_parser("redact", help="Print a schema with credentials removed")
    redact.add_argument("file_path", type=Path, help="Path to the schema file")
    redact.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file path (default: stdout)",
    )
    redact.add_argument(
        "--show-blocks",
        action="store_true",
        help="Print how each datasource URL was classified instead of the text",
    )

    submit = subparsers.add_parser("submit", help="Send a crash report")
    submit.add_argument("--schema", type=Path, help="Path to the schema file")
    submit.add_argument(
        "--area",
        default=ErrorArea.QUERY_ENGINE.value,
        choices=[a.value for a in ErrorArea],
        help="Subsystem that crashed",
    )
    submit.add_argument("--message", default="Engine panicked", help="Error message")
    submit.add_argument(
        "--stack-file",
        type=Path,
        help="File holding the engine stack trace",
    )
    submit.add_argument("--request-file", type=Path, help="JSON file with the failing request")
    submit.add_argument("--cli-version", default=__version__, help="Version of the calling tool")
    submit.add_argument("--binary-version", default="unknown", help="Version of the engine")
    target = submit.add_mutually_exclusive_group()
    target.add_argument("--endpoint", help="Report endpoint URL")
    target.add_argument("--outbox", type=Path, help="Write the report to a directory instead")
    submit.add_argument(
        "--strict",
        action="store_true",
        help="Fail loudly instead of silently when the report cannot be sent",
    )

    return parser


def run_redact(args) -> int:
    try:
        text = args.file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read {args.file_path}: {e}", file=sys.stderr)
        return int(ExitCode.REPORT_FAILED)

    redactor = SchemaRedactor()

    if args.show_blocks:
        blocks = [
            {
                "name": block.name,
                "closed": block.closed,
                "urls": [
                    {"key": a.key, "kind": type(a.value).__name__}
                    for a in block.assignments
                ],
            }
            for block in redactor.find_datasources(text)
        ]
        output = json.dumps(blocks, indent=2)
    else:
        output = redactor.redact(text)

    if args.output:
        args.output.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return int(ExitCode.OK)


def _read_optional(path):
    if path is None:
        return None
    return path.read_text(encoding="utf-8")


def run_submit(args) -> int:
    try:
        config = ReporterConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return as_exit_code(e)

    if args.endpoint:
        submitter = get_submitter("graphql", endpoint=args.endpoint, timeout=config.timeout)
    elif args.outbox:
        submitter = get_submitter("local", outbox=args.outbox)
    else:
        submitter = None

    try:
        stack = _read_optional(args.stack_file) or ""
        request_text = _read_optional(args.request_file)
        request = json.loads(request_text) if request_text else None
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return int(ExitCode.CONFIG_ERROR)

    panic = EnginePanic(
        args.message,
        rust_stack=stack,
        area=args.area,
        request=request,
        schema_path=args.schema,
    )

    reporter = PanicReporter(config=config, submitter=submitter, raise_errors=args.strict)
    try:
        result = reporter.send(panic, args.cli_version, args.binary_version, argv=sys.argv)
    except PanicReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return as_exit_code(e)
    finally:
        reporter.close()
        if submitter is not None:
            submitter.close()

    if not result.success:
        logger.info("Report not sent: %s", result.error)
        return int(ExitCode.REPORT_FAILED)

    print(result.report_id)
    return int(ExitCode.OK)


def main(argv=None):
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if args.command == "redact":
        sys.exit(run_redact(args))
    if args.command == "submit":
        sys.exit(run_submit(args))

    parser.print_help()
    sys.exit(int(ExitCode.CONFIG_ERROR))


if __name__ == "__main__":
    main()
