import logging

from storage_report.core.models.usage import SNAPSHOTS, UsageRecord

logger = logging.getLogger(__name__)


class NodeAccumulator:
    """Per node, the value of each accounting category."""

    def __init__(self):
        self.nodes: dict[str, dict[str, int]] = {}

    def accumulate(self, record: UsageRecord) -> None:
        assert record.is_node_level, record
        category = SNAPSHOTS if record.subject == SNAPSHOTS else record.category
        categories = self.nodes.setdefault(record.node, {})

        # Best effort: the last value reported for a category wins
        if category in categories:
            logger.warning(
                'line %d: node "%s" category "%s" already set to %d, overwriting with %d',
                record.lineno,
                record.node,
                category,
                categories[category],
                record.count,
            )
        categories[category] = record.count
