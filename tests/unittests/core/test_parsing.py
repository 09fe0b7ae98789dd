import logging

import pytest

from storage_report.core.parsing import MalformedLineError, parse_line, parse_lines


def test_parse_line():
    record = parse_line(3, "us-east-1 ms-0042 /manta/abc abc 4096\n")
    assert record.datacenter == "us-east-1"
    assert record.host == "ms-0042"
    assert record.category == "/manta/abc"
    assert record.subject == "abc"
    assert record.count == 4096
    assert record.lineno == 3
    assert record.node == "us-east-1 ms-0042"
    assert not record.is_node_level


def test_parse_line_tabs_and_spaces():
    record = parse_line(1, "dc1\thost1   zones:used\t-  500")
    assert record.category == "zones:used"
    assert record.subject == "-"
    assert record.count == 500
    assert record.is_node_level


def test_parse_line_negative_count():
    assert parse_line(1, "dc1 host1 x usr-a -12").count == -12


@pytest.mark.parametrize("line", ["", "   ", "\t\n"])
def test_parse_line_blank(line):
    assert parse_line(1, line) is None


@pytest.mark.parametrize(
    "line,reason",
    [
        ("dc1 host1 x usr-a", "expected 5 fields, got 4"),
        ("dc1 host1 x usr-a 100 extra", "expected 5 fields, got 6"),
        ("dc1 host1 x usr-a 1.5", "is not an integer"),
        ("dc1 host1 x usr-a 0x10", "is not an integer"),
        ("dc1 host1 x usr-a 1_000", "is not an integer"),
        ("dc1 host1 x usr-a lots", "is not an integer"),
    ],
)
def test_parse_line_malformed(line, reason):
    with pytest.raises(MalformedLineError, match=reason) as exc_info:
        parse_line(7, line)
    assert exc_info.value.lineno == 7
    assert exc_info.value.line == line


def test_parse_lines_skips_and_warns(caplog):
    lines = [
        "dc1 host1 x usr-a 100\n",
        "\n",
        "dc1 host1 x usr-b\n",
        "dc1 host1 x usr-c ten\n",
        "dc1 host1 x usr-d 300\n",
    ]
    with caplog.at_level(logging.WARNING):
        records = list(parse_lines(lines))

    assert [r.subject for r in records] == ["usr-a", "usr-d"]
    assert [r.lineno for r in records] == [1, 5]

    warnings = [r.getMessage() for r in caplog.records]
    assert len(warnings) == 2
    assert "line 3" in warnings[0]
    assert "dc1 host1 x usr-b" in warnings[0]
    assert "line 4" in warnings[1]
