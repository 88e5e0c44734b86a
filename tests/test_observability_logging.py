"""
Tests for structured logging and operation ids.
"""

import importlib
import json
import logging

import pytest

from routine_anchor import config
from routine_anchor.observability import (
    HumanFormatter,
    JSONFormatter,
    OperationContext,
    configure_from_env,
    configure_logging,
    get_operation_id,
    get_operation_name,
)
from routine_anchor.schedule import ScheduleService


def make_record(msg="Block saved", **extra):
    record = logging.LogRecord(
        name="routine_anchor.schedule",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestOperationContext:
    def test_sets_and_restores(self):
        assert get_operation_id() is None
        with OperationContext("add_block") as ctx:
            assert ctx.operation_id.startswith("op-")
            assert get_operation_id() == ctx.operation_id
        assert get_operation_id() is None

    def test_explicit_id_and_nesting(self):
        with OperationContext("outer", operation_id="op-outer"):
            with OperationContext("inner", operation_id="op-inner"):
                assert get_operation_id() == "op-inner"
            assert get_operation_id() == "op-outer"

    def test_name_visible_inside_only(self):
        assert get_operation_name() is None
        with OperationContext("set_status"):
            assert get_operation_name() == "set_status"
        assert get_operation_name() is None


class TestFormatters:
    def test_json_line(self):
        with OperationContext(operation_id="op-123"):
            line = JSONFormatter().format(make_record(block_id="block_abc"))
        data = json.loads(line)
        assert data["level"] == "INFO"
        assert data["logger"] == "routine_anchor.schedule"
        assert data["message"] == "Block saved"
        assert data["operation_id"] == "op-123"
        assert data["block_id"] == "block_abc"
        assert "pathname" not in data

    def test_json_carries_operation_name(self):
        with OperationContext("update_block", operation_id="op-456"):
            data = json.loads(JSONFormatter().format(make_record()))
        assert data["operation"] == "update_block"
        assert data["operation_id"] == "op-456"

    def test_json_without_operation(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert "operation_id" not in data
        assert "operation" not in data

    def test_human_line(self):
        with OperationContext(operation_id="op-0123456789abcdef"):
            line = HumanFormatter().format(make_record())
        assert "[INFO] routine_anchor.schedule: [op-012345678] Block saved" in line


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_handler(self):
        configure_logging("debug", json_format=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_human_handler(self):
        configure_logging("WARNING", json_format=False)
        assert isinstance(logging.getLogger().handlers[0].formatter, HumanFormatter)

    @pytest.fixture
    def reload_config(self, monkeypatch):
        yield lambda: importlib.reload(config)
        monkeypatch.delenv("ROUTINE_ANCHOR_LOG_JSON", raising=False)
        monkeypatch.delenv("ROUTINE_ANCHOR_LOG_LEVEL", raising=False)
        importlib.reload(config)

    def test_from_env_json(self, monkeypatch, reload_config):
        monkeypatch.setenv("ROUTINE_ANCHOR_LOG_JSON", "1")
        monkeypatch.setenv("ROUTINE_ANCHOR_LOG_LEVEL", "warning")
        reload_config()

        configure_from_env()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_from_env_human(self, monkeypatch, reload_config):
        monkeypatch.setenv("ROUTINE_ANCHOR_LOG_JSON", "false")
        reload_config()
        assert config.LOG_JSON is False

        configure_from_env()

        assert isinstance(logging.getLogger().handlers[0].formatter, HumanFormatter)


class TestWritePathLogging:
    def test_rejected_write_logs_warning_with_operation(self, store, settings, make_block, now, caplog):
        service = ScheduleService(store, settings=settings)
        seen = []

        class Capture(logging.Handler):
            def emit(self, record):
                seen.append((get_operation_id(), get_operation_name()))

        handler = Capture()
        logger = logging.getLogger("routine_anchor.schedule")
        logger.addHandler(handler)
        try:
            with caplog.at_level(logging.INFO, logger="routine_anchor.schedule"):
                service.add_block(make_block(9), now=now)
                service.add_block(make_block(9), now=now)
        finally:
            logger.removeHandler(handler)

        levels = [r.levelname for r in caplog.records if r.name == "routine_anchor.schedule"]
        assert levels == ["INFO", "WARNING"]
        assert all(op and op.startswith("op-") for op, _ in seen)
        assert {name for _, name in seen} == {"add_block"}
        assert seen[0] != seen[-1]
