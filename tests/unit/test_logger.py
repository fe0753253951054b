"""Tests for the log buffer and the context it keeps."""

import logging

from rails_expert.core.checks import run_checks
from rails_expert.core.marketplace import discover_plugins
from rails_expert.lib.logger import BufferedHandler, LogBuffer, get_log_buffer, setup_logging

from tests.conftest import write_json


class TestLogBuffer:
    def test_bounded(self):
        buffer = LogBuffer(maxlen=3)
        for i in range(5):
            buffer.append({"message": str(i)})
        assert [e["message"] for e in buffer.get_recent()] == ["2", "3", "4"]
        assert [e["message"] for e in buffer.get_recent(limit=1)] == ["4"]

    def test_filter_by_check(self):
        buffer = LogBuffer()
        buffer.append({"message": "a", "check": "links"})
        buffer.append({"message": "b", "check": "bang"})
        buffer.append({"message": "c"})
        assert [e["message"] for e in buffer.get_recent(check="bang")] == ["b"]


class TestBufferedHandler:
    def test_keeps_extra_context(self):
        buffer = LogBuffer()
        log = logging.getLogger("rails_expert.tests.buffered")
        log.propagate = False
        handler = BufferedHandler(buffer)
        log.addHandler(handler)
        try:
            log.warning("plain")
            log.warning("with context", extra={"check": "links", "path": "README.md"})
        finally:
            log.removeHandler(handler)

        plain, context = buffer.get_recent()
        assert "check" not in plain
        assert context["check"] == "links"
        assert context["path"] == "README.md"
        assert context["level"] == "WARNING"


class TestSetupLogging:
    def test_check_runs_are_tagged(self, repo):
        setup_logging(level="INFO")
        buffer = get_log_buffer()
        buffer.clear()

        run_checks(repo, only=["versions", "bang"])

        entries = buffer.get_recent(check="versions")
        assert len(entries) == 1
        assert entries[0]["findings"] == 0
        assert entries[0]["message"] == "Check versions: ok"

    def test_broken_plugin_warning_names_file(self, repo, plugin_path):
        setup_logging(level="WARNING")
        buffer = get_log_buffer()
        buffer.clear()
        write_json(plugin_path / ".claude-plugin" / "plugin.json", {"name": ["not", "a", "string"]})

        assert discover_plugins(repo) == []

        warning = buffer.get_recent()[-1]
        assert warning["level"] == "WARNING"
        assert warning["path"].endswith("plugin.json")
