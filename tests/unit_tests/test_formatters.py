"""
Record building and rendering tests.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath

import orjson
import pytest

from taglog.builder import build_record, format_timestamp
from taglog.extractor import extract
from taglog.formatters import COLORS, HumanFormatter, StructuredFormatter, orjson_dumps
from taglog.levels import Level, is_enabled
from taglog.types import CallMetadata, Extraction

FIXED = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone(timedelta(hours=2)))


def _record(*args, tag="svc", message="hello", level=Level.INFO, metadata=None):
    extraction = extract(list(args), metadata)
    return build_record(level, tag, message, extraction, now=FIXED), extraction


class TestLevels:
    """Severity ordering"""

    def test_parse_is_case_insensitive(self) -> None:
        assert Level.parse("INFO") is Level.INFO
        assert Level.parse("warning") is Level.WARN

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError, match="unknown log level"):
            Level.parse("fatal")

    @pytest.mark.parametrize(
        ("level", "threshold", "expected"),
        [
            ("error", "info", True),
            ("info", "info", True),
            ("verbose", "info", False),
            ("silly", "debug", False),
            ("silly", "silly", True),
        ],
    )
    def test_threshold(self, level: str, threshold: str, expected: bool) -> None:
        assert is_enabled(level, threshold) is expected


class TestBuilder:
    """Canonical record construction"""

    def test_timestamp_format(self) -> None:
        local = FIXED.astimezone()
        expected = local.strftime("%Y-%m-%d %H:%M:%S") + ".123 " + local.strftime("%z")
        assert format_timestamp(FIXED) == expected

    def test_timestamp_shape_for_now(self) -> None:
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3} [+-]\d{4}", format_timestamp())

    def test_message_and_stack_are_promoted(self) -> None:
        record, _ = _record({"stack": "trace", "message": "inner"}, {"k": 1}, message="outer")
        assert record.message == "outer"
        assert record.stack == "trace"
        assert record.extras == {"k": 1}

    def test_error_mapping_keeps_only_message_and_stack(self) -> None:
        record, _ = _record({"stack": "trace", "message": "inner", "k": 1})
        assert record.stack == "trace"
        assert record.extras == {}

    def test_text_fragments_are_not_appended_to_message(self) -> None:
        record, _ = _record("a", 2, message="m")
        assert record.message == "m"
        assert record.text_fragments == ("a", "2")

    def test_no_error_means_no_stack(self) -> None:
        record, _ = _record({"k": 1})
        assert record.stack is None

    def test_tag_falls_back_to_metadata_then_empty(self) -> None:
        extraction = extract([], CallMetadata(tag="from-meta"))
        assert build_record(Level.INFO, None, "m", extraction).tag == "from-meta"
        assert build_record(Level.INFO, None, "m", Extraction(supplied=True)).tag == ""


class TestHumanFormatter:
    """Aligned text lines"""

    def test_layout(self) -> None:
        record, extraction = _record()
        line = HumanFormatter().render(record, extraction)
        assert line == f"{record.timestamp} - info:    {'svc'.ljust(20)} hello"

    def test_text_fragments_follow_message(self) -> None:
        record, extraction = _record("count", 3)
        assert HumanFormatter().render(record, extraction).endswith("hello count 3")

    def test_extras_are_inline_json(self) -> None:
        data = {"a": 1, "d": {"e": [1, "x"]}}
        record, extraction = _record(data)
        line = HumanFormatter().render(record, extraction)
        assert line.endswith(" " + orjson.dumps(data).decode())

    def test_stack_on_following_line(self) -> None:
        record, extraction = _record({"message": "m", "stack": "Trace: boom"}, {"k": 1})
        line = HumanFormatter().render(record, extraction)
        header, rest = line.split("\n", 1)
        assert header.endswith("hello")
        assert rest == 'Trace: boom {"k":1}'
        assert line.count("Trace: boom") == 1

    def test_bare_message_without_arguments(self) -> None:
        record = build_record(Level.INFO, "svc", "plain", Extraction())
        assert HumanFormatter().render(record, Extraction()) == "plain"

    def test_missing_tag_is_padded(self) -> None:
        record = build_record(Level.WARN, None, "m", Extraction(supplied=True), now=FIXED)
        assert HumanFormatter().render(record) == f"{record.timestamp} - warn:    {' ' * 20} m"

    def test_custom_widths(self) -> None:
        record, extraction = _record()
        line = HumanFormatter(level_width=6, tag_width=4).render(record, extraction)
        assert " - info:  svc  hello" in line

    @pytest.mark.parametrize("level", list(Level))
    def test_whole_line_is_colored(self, level: Level) -> None:
        record, extraction = _record({"k": 1}, level=level)
        plain = HumanFormatter().render(record, extraction)
        colored = HumanFormatter(colorize=True).render(record, extraction)
        assert colored == f"{COLORS[level.value]}{plain}{COLORS['reset']}"

    def test_rendering_is_idempotent(self) -> None:
        record, extraction = _record({"k": [1, 2]}, "t")
        formatter = HumanFormatter(colorize=True)
        assert formatter.render(record, extraction) == formatter.render(record, extraction)


class TestStructuredFormatter:
    """Flat dict output"""

    def test_minimal_record(self) -> None:
        record, extraction = _record()
        assert StructuredFormatter().render(record, extraction) == {
            "timestamp": record.timestamp,
            "level": "info",
            "tag": "svc",
            "message": "hello",
        }

    def test_extras_are_spread_at_top_level(self) -> None:
        record, extraction = _record({"hostname": "h", "ip": "1.2.3.4"})
        output = StructuredFormatter().render(record, extraction)
        assert output["hostname"] == "h"
        assert output["ip"] == "1.2.3.4"
        assert "extras" not in output

    def test_record_fields_are_authoritative(self) -> None:
        record, extraction = _record({"level": "spoofed", "tag": "other"})
        output = StructuredFormatter().render(record, extraction)
        assert output["level"] == "info"
        assert output["tag"] == "svc"

    def test_stack_only_when_present(self) -> None:
        record, extraction = _record({"message": "m", "stack": "trace"})
        output = StructuredFormatter().render(record, extraction)
        assert output["stack"] == "trace"
        assert output["message"] == "hello"

    def test_projection(self) -> None:
        record, extraction = _record({"k": 1})
        output = StructuredFormatter(fields=("message", "k", "missing")).render(record, extraction)
        assert output == {"message": "hello", "k": 1}

    def test_rendering_is_idempotent(self) -> None:
        record, extraction = _record({"k": {"n": 1}})
        formatter = StructuredFormatter()
        assert formatter.render(record, extraction) == formatter.render(record, extraction)


class TestSerialization:
    """Compact JSON for extras and JSON lines"""

    def test_non_string_keys(self) -> None:
        assert orjson.loads(orjson_dumps({"by_status": {200: 5}})) == {"by_status": {"200": 5}}

    def test_wide_integers_become_strings(self) -> None:
        data = {"id": 2**70, "ids": [1, -(2**64)], "ok": True}
        assert orjson.loads(orjson_dumps(data)) == {"id": str(2**70), "ids": [1, str(-(2**64))], "ok": True}

    def test_unknown_values_fall_back_to_str(self) -> None:
        assert orjson_dumps({"path": PurePosixPath("/var/log")}) == '{"path":"/var/log"}'

    def test_human_line_keeps_awkward_extras(self) -> None:
        record, extraction = _record({"by_status": {200: 5}, "id": 2**70})
        line = HumanFormatter().render(record, extraction)
        assert line.endswith(f' {{"by_status":{{"200":5}},"id":"{2**70}"}}')
