from pydantic import BaseModel, ConfigDict

# Subjects that mark node-level accounting rather than a user
NODE_SENTINELS = ("-", "snapshots")
SNAPSHOTS = "snapshots"


class UsageRecord(BaseModel):
    """One line of the concatenated per-node dumps."""

    model_config = ConfigDict(frozen=True)

    datacenter: str
    host: str
    category: str
    subject: str
    count: int
    lineno: int = 0

    @property
    def node(self) -> str:
        return f"{self.datacenter} {self.host}"

    @property
    def is_node_level(self) -> bool:
        return self.subject in NODE_SENTINELS


class UserDetail(BaseModel):
    """
    Usage of one of the top users.

    The percentages are None when nothing was accounted to any user, so that
    an empty report is not confused with a user at 0%.
    """

    identifier: str
    raw_count: int
    percent_of_total: float | None
    cumulative_percent: float | None
    gigabytes: str


class NodeSummary(BaseModel):
    label: str
    used_gb: int
    total_gb: int
    pct_used: float | None
    pct_manta: float | None
    pct_snaps: float | None
    pct_crash: float | None
    pct_rest: float | None
