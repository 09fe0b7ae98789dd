"""
Rendering of the storage report.

The report has two sections: the top users by physical storage, then one row
per storage node with a breakdown of the space used on it.
"""

from collections.abc import Collection

from storage_report.config import ReportConfig
from storage_report.core.models.usage import SNAPSHOTS, NodeSummary, UserDetail
from storage_report.core.utils import round_half_away

GIGABYTE = 1024**3
UNKNOWN = "?"
NO_DATA = "-"

USERS_TITLE = "Top users by physical storage used"
USERS_HEADER = f"{'GB':>9} {'%TOT':>5} {'%CUM':>6} USER"

NODES_TITLE = "Physical storage used per node"
NODES_HEADER = (
    f"{'NODE':<24} {'USED_GB':>7} {'TOTAL_GB':>8} {'%USED':>6} "
    f"{'%MANTA':>6} {'%SNAPS':>6} {'%CRASH':>6} {'%REST':>6}"
)
NODES_LEGEND = """\
Legend:
  USED_GB   space used on the node, in gigabytes
  TOTAL_GB  size of the node's pool (used + available), in gigabytes
  %USED     share of the pool that is used
  %MANTA    share of the used space held by object data, snapshots excluded
  %SNAPS    share of the used space held by snapshots ("?" if not reported)
  %CRASH    share of the used space held by crash dumps
  %REST     share of the used space not accounted for by %MANTA or %CRASH,
            which includes the space held by snapshots"""


def _percent(part: float, whole: float) -> float | None:
    if whole == 0:
        return None
    return 100 * part / whole


def display_label(
    identifier: str, identities: dict[str, str], special_identifiers: Collection[str]
) -> str:
    if identifier in special_identifiers:
        return identifier
    if identifier in identities:
        return f"login: {identities[identifier]}"
    return f"uuid:  {identifier}"


def _format_user_percent(value: float | None) -> str:
    return NO_DATA if value is None else f"{value:.1f}"


def render_users(
    details: list[UserDetail],
    identities: dict[str, str],
    special_identifiers: Collection[str] = frozenset(),
) -> list[str]:
    lines = [USERS_TITLE, USERS_HEADER]
    for detail in details:
        label = display_label(detail.identifier, identities, special_identifiers)
        lines.append(
            f"{detail.gigabytes:>9} "
            f"{_format_user_percent(detail.percent_of_total):>5} "
            f"{_format_user_percent(detail.cumulative_percent):>6} "
            f"{label}"
        )
    return lines


def summarize_node(
    label: str, categories: dict[str, int], report_config: ReportConfig
) -> NodeSummary:
    used = categories.get(report_config.used_category, 0)
    avail = categories.get(report_config.avail_category, 0)
    total = used + avail

    manta = sum(
        count
        for category, count in categories.items()
        if category.startswith(report_config.dataset_prefix)
    )
    crash = (
        categories.get(report_config.crash_category, 0)
        * report_config.crash_unit_factor
    )

    pct_manta = _percent(manta, used)
    pct_crash = _percent(crash, used)
    if pct_manta is None or pct_crash is None:
        pct_rest = None
    else:
        # Snapshot space stays in the unaccounted share
        pct_rest = 100 - (pct_manta + pct_crash)

    pct_snaps = None
    if SNAPSHOTS in categories:
        pct_snaps = _percent(categories[SNAPSHOTS], used)
        # The datasets already include the space held by their snapshots
        if pct_manta is not None and pct_snaps is not None:
            pct_manta -= pct_snaps

    return NodeSummary(
        label=label,
        used_gb=int(round_half_away(used / GIGABYTE)),
        total_gb=int(round_half_away(total / GIGABYTE)),
        pct_used=_percent(used, total),
        pct_manta=pct_manta,
        pct_snaps=pct_snaps,
        pct_crash=pct_crash,
        pct_rest=pct_rest,
    )


def _format_node_percent(value: float | None) -> str:
    return UNKNOWN if value is None else f"{value:.1f}%"


def render_nodes(
    nodes: dict[str, dict[str, int]], report_config: ReportConfig
) -> list[str]:
    lines = [NODES_TITLE, NODES_HEADER]
    for label in sorted(nodes):
        summary = summarize_node(label, nodes[label], report_config)
        lines.append(
            f"{summary.label:<24} {summary.used_gb:>7} {summary.total_gb:>8} "
            f"{_format_node_percent(summary.pct_used):>6} "
            f"{_format_node_percent(summary.pct_manta):>6} "
            f"{_format_node_percent(summary.pct_snaps):>6} "
            f"{_format_node_percent(summary.pct_crash):>6} "
            f"{_format_node_percent(summary.pct_rest):>6}"
        )
    lines.append("")
    lines.extend(NODES_LEGEND.splitlines())
    return lines


def render_report(
    details: list[UserDetail],
    identities: dict[str, str],
    nodes: dict[str, dict[str, int]],
    report_config: ReportConfig | None = None,
) -> str:
    if report_config is None:
        report_config = ReportConfig()
    lines = render_users(details, identities, set(report_config.special_identifiers))
    lines.append("")
    lines.extend(render_nodes(nodes, report_config))
    return "\n".join(lines) + "\n"
