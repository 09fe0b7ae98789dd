import logging
from collections.abc import Iterable

from storage_report.aggregation import Accumulators
from storage_report.config import LookupConfig, ReportConfig
from storage_report.core.parsing import parse_lines
from storage_report.identity import IdentityResolver
from storage_report.report import render_report
from storage_report.traces import trace_decorator

logger = logging.getLogger(__name__)


@trace_decorator()
def build_report(
    lines: Iterable[str],
    report_config: ReportConfig | None = None,
    lookup: LookupConfig | None = None,
    resolve: bool = True,
    resolver: IdentityResolver | None = None,
) -> str:
    """
    Build the storage report from the buffered usage lines.

    Steps run in a fixed order: every line is parsed and accumulated, then
    the top users are resolved one by one, and only then the report is
    rendered.
    """
    if report_config is None:
        report_config = ReportConfig()

    accumulators = Accumulators().accumulate_all(parse_lines(list(lines)))
    details = accumulators.users.finalize(report_config.max_users)
    logger.info(
        "Accumulated %d users and %d nodes",
        len(accumulators.users.totals),
        len(accumulators.nodes.nodes),
    )

    if resolver is None:
        resolver = IdentityResolver(
            lookup=lookup,
            special_identifiers=report_config.special_identifiers,
            enabled=resolve,
        )
    identities = resolver.resolve(detail.identifier for detail in details)
    logger.info("Resolved %d of %d top users", len(identities), len(details))

    return render_report(details, identities, accumulators.nodes.nodes, report_config)
