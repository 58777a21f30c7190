# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.
"""Unit tests for structured JSON logging."""

import json
import logging

from multisite.core.logging import StructuredFormatter, setup_logging


def _record(msg="hello", **extra):
    record = logging.LogRecord("multisite.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_basic_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["module"] == "multisite.test"
        assert entry["message"] == "hello"
        assert "timestamp" in entry

    def test_tenant_context_attached(self):
        entry = json.loads(StructuredFormatter().format(
            _record(tenant_id="lapp", view_code="admin", host="admin.lapp.test")
        ))
        assert entry["tenant_id"] == "lapp"
        assert entry["view_code"] == "admin"
        assert entry["host"] == "admin.lapp.test"

    def test_empty_context_skipped(self):
        entry = json.loads(StructuredFormatter().format(_record(tenant_id=None, trace_id="")))
        assert "tenant_id" not in entry
        assert "trace_id" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord(
                "multisite.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info(),
            )
        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestSetupLogging:
    def test_installs_structured_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("debug")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
