import logging

import pytest

from storage_report.aggregation import Accumulators
from storage_report.aggregation.nodes import NodeAccumulator
from storage_report.core.parsing import parse_lines


def test_node_categories():
    records = parse_lines(
        [
            "dc1 host1 zones:used - 500",
            "dc1 host1 zones:avail - 1500",
            "dc1 host1 /manta/abc - 300",
            "dc2 host1 zones:used - 7",
            "dc1 host1 /manta/abc snapshots 42",
        ]
    )
    acc = NodeAccumulator()
    for record in records:
        acc.accumulate(record)

    assert acc.nodes == {
        "dc1 host1": {
            "zones:used": 500,
            "zones:avail": 1500,
            "/manta/abc": 300,
            "snapshots": 42,
        },
        "dc2 host1": {"zones:used": 7},
    }


def test_node_duplicate_last_wins(caplog):
    records = parse_lines(
        ["dc1 host1 zones:used - 500", "dc1 host1 zones:used - 800"]
    )
    acc = NodeAccumulator()
    with caplog.at_level(logging.WARNING):
        for record in records:
            acc.accumulate(record)

    assert acc.nodes == {"dc1 host1": {"zones:used": 800}}
    assert len(caplog.records) == 1
    message = caplog.records[0].getMessage()
    assert "line 2" in message
    assert "dc1 host1" in message
    assert "zones:used" in message
    assert "500" in message and "800" in message


def test_node_duplicate_snapshots(caplog):
    records = parse_lines(
        ["dc1 host1 /manta/a snapshots 5", "dc1 host1 /manta/b snapshots 6"]
    )
    acc = NodeAccumulator()
    with caplog.at_level(logging.WARNING):
        for record in records:
            acc.accumulate(record)

    assert acc.nodes == {"dc1 host1": {"snapshots": 6}}
    assert len(caplog.records) == 1


def test_node_rejects_user_records():
    (record,) = parse_lines(["dc1 host1 x usr-a 1"])
    with pytest.raises(AssertionError):
        NodeAccumulator().accumulate(record)


def test_route_each_record_once():
    lines = [
        "dc1 host1 x usr-a 100",
        "dc1 host1 zones:used - 500",
        "dc1 host1 /manta/x snapshots 20",
        "dc1 host2 y usr-b 300",
        "dc1 host2 /var/crash - 10",
    ]
    acc = Accumulators().accumulate_all(parse_lines(lines))

    assert acc.users.totals == {"usr-a": 100, "usr-b": 300}
    assert acc.users.grand_total == 400
    nb_node_entries = sum(len(c) for c in acc.nodes.nodes.values())
    assert len(acc.users.totals) + nb_node_entries == len(lines)
