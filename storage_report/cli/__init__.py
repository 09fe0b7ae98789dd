from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, replace
from typing import Any, TextIO

from simple_parsing import ArgumentParser, field

from storage_report.config import ConfigurationError, config
from storage_report.logging import setupLogging
from storage_report.pipeline import build_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
# argparse exits with this status on a usage error
EXIT_USAGE_ERROR = 2


@dataclass
class CLI:
    """Summarize the physical storage used per user and per storage node.

    Reads the concatenated usage dumps on standard input and writes the
    report on standard output.
    """

    no_resolve: bool = field(
        alias=["--no-resolve"],
        default=False,
        help="do not resolve user identifiers to login names",
    )
    max_users: int | None = field(
        alias=["--max-users"],
        default=None,
        help="number of top users to report (default from config, 30)",
    )
    verbose: int = field(
        alias=["-v"],
        default=0,
        help="logging levels of information about the process (-v: INFO. -vv: DEBUG)",
        action="count",
    )

    def execute(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout

        try:
            setupLogging(verbose_level=self.verbose)

            cfg = config()
            report_config = cfg.report
            if self.max_users is not None:
                report_config = replace(report_config, max_users=self.max_users)

            # Ranking needs the whole data set, read everything first
            lines = stdin.readlines()
            report = build_report(
                lines,
                report_config=report_config,
                lookup=cfg.lookup,
                resolve=not self.no_resolve,
            )
        except ConfigurationError as err:
            logger.error("Invalid configuration: %s", err)
            return EXIT_RUNTIME_ERROR
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Could not build the storage report")
            return EXIT_RUNTIME_ERROR

        stdout.write(report)
        stdout.flush()
        return EXIT_OK


def main(argv: list[Any] | None = None) -> int:
    """Main commandline for storage-report"""

    parser = ArgumentParser()
    parser.add_arguments(CLI, dest="command")
    args = parser.parse_args(argv)
    command: CLI = args.command
    if command.max_users is not None and command.max_users < 1:
        parser.error(f"--max-users must be at least 1, got {command.max_users}")

    return command.execute()


if __name__ == "__main__":
    returncode = main()
    if returncode > 0:
        raise SystemExit(returncode)
