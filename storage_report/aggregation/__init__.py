from collections.abc import Iterable

from storage_report.core.models.usage import UsageRecord

from .nodes import NodeAccumulator
from .users import UserAccumulator


class Accumulators:
    """Both aggregate views, filled by a single pass over the records."""

    def __init__(self):
        self.users = UserAccumulator()
        self.nodes = NodeAccumulator()

    def route(self, record: UsageRecord) -> None:
        if record.is_node_level:
            self.nodes.accumulate(record)
        else:
            self.users.accumulate(record)

    def accumulate_all(self, records: Iterable[UsageRecord]) -> "Accumulators":
        for record in records:
            self.route(record)
        return self
