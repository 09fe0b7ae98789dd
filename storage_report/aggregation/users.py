import logging

from storage_report.core.models.usage import UsageRecord, UserDetail
from storage_report.core.utils import round_half_away

logger = logging.getLogger(__name__)

DEFAULT_MAX_USERS = 30


class UserAccumulator:
    """Cumulative usage per user identifier."""

    def __init__(self):
        self.totals: dict[str, int] = {}
        self.grand_total = 0

    def accumulate(self, record: UsageRecord) -> None:
        assert not record.is_node_level, record
        self.totals[record.subject] = self.totals.get(record.subject, 0) + record.count
        self.grand_total += record.count

    def ranked(self) -> list[tuple[str, int]]:
        """Users with a positive total, biggest first."""
        # sorted() is stable, ties keep the order in which users were first seen
        return sorted(
            ((user, count) for user, count in self.totals.items() if count > 0),
            key=lambda item: item[1],
            reverse=True,
        )

    def finalize(self, max_users: int = DEFAULT_MAX_USERS) -> list[UserDetail]:
        """
        Build the details of the top `max_users` users.

        The cumulative percentage runs over every ranked user, so it is
        computed before truncating the list.
        """
        details: list[UserDetail] = []
        cumulative = 0.0

        for identifier, count in self.ranked():
            if self.grand_total == 0:
                percent = None
                cumulative_percent = None
            else:
                percent = 100 * count / self.grand_total
                cumulative += percent
                cumulative_percent = cumulative

            details.append(
                UserDetail(
                    identifier=identifier,
                    raw_count=count,
                    percent_of_total=percent,
                    cumulative_percent=cumulative_percent,
                    gigabytes=f"{round_half_away(count / 1024, 1):.1f}",
                )
            )

        logger.debug(
            "%d users with usage, keeping the top %d", len(details), max_users
        )
        return details[:max_users]
