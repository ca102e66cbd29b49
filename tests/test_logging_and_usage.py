"""Tests for structured logging and LLM usage tracking."""

import logging
from unittest.mock import patch

from clarity.core.llm_usage import estimate_cost, record_llm_usage
from clarity.core.logging import StructuredFormatter


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("clarity.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_promotes_context_fields():
    line = StructuredFormatter().format(
        _record(
            "Generation failed",
            company_id="c1",
            stage="generating",
            error_kind="configuration",
            extra_data={"attempt": 1},
        )
    )

    assert "level=INFO" in line
    assert "company_id=c1" in line
    assert "stage=generating" in line
    assert "error_kind=configuration" in line
    assert "attempt=1" in line
    assert "message=Generation failed" in line


def test_estimate_cost_known_and_unknown_models():
    assert estimate_cost("claude-sonnet-4-5-20250929", 1_000_000, 0) == 3.0
    assert estimate_cost("some-other-model", 1000, 1000) == 0.0


def test_record_llm_usage_never_raises():
    with patch("clarity.core.llm_usage.get_supabase", side_effect=Exception("down")):
        record_llm_usage("ask_ai", "claude-sonnet-4-5-20250929", 10, 5)


def test_record_llm_usage_inserts_row():
    with patch("clarity.core.llm_usage.get_supabase") as mock_get:
        record_llm_usage("ask_ai", "claude-sonnet-4-5-20250929", 10, 5, duration_ms=42, company_id="c1")

    mock_get.return_value.table.assert_called_once_with("llm_usage")
    row = mock_get.return_value.table.return_value.insert.call_args.args[0]
    assert row["workflow"] == "ask_ai"
    assert row["tokens_input"] == 10
    assert row["company_id"] == "c1"
    assert row["duration_ms"] == 42
