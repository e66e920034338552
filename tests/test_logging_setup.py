"""
Tests for log configuration, log-file retention and the event-to-log listener.
"""
import logging
import os
import time
import pytest
from crossdedup.utils.logging_setup import (
    configure_logging, prune_old_logs, LogEventListener, LOG_FILE_PREFIX
)
from crossdedup.core.events import RunEvent, EventKind
from crossdedup.core.models import RelinkAction, ActionResult, ActionStatus, ContentGroup, FileRecord


class TestConfigureLogging:
    def test_console_only_returns_none(self, restore_root_logger):
        assert configure_logging("WARNING") is None
        assert logging.getLogger().level == logging.WARNING

    def test_log_file_is_created(self, tmp_path, restore_root_logger):
        log_file = configure_logging("INFO", str(tmp_path / "logs"))
        logging.getLogger("crossdedup.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith(LOG_FILE_PREFIX)
        assert "hello file" in log_file.read_text()

    def test_invalid_level_raises(self, restore_root_logger):
        with pytest.raises(ValueError):
            configure_logging("LOUD")


class TestPruneOldLogs:
    def test_keeps_most_recent(self, tmp_path):
        now = time.time()
        for i in range(7):
            path = tmp_path / f"{LOG_FILE_PREFIX}{i}.log"
            path.write_text(str(i))
            os.utime(path, (now - 100 + i, now - 100 + i))
        (tmp_path / "unrelated.log").write_text("keep me")

        removed = prune_old_logs(tmp_path, keep=5)

        assert sorted(p.name for p in removed) == [f"{LOG_FILE_PREFIX}0.log", f"{LOG_FILE_PREFIX}1.log"]
        assert (tmp_path / "unrelated.log").exists()
        assert len(list(tmp_path.glob(f"{LOG_FILE_PREFIX}*.log"))) == 5

    def test_dry_run_deletes_nothing(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        for i in range(7):
            (tmp_path / f"{LOG_FILE_PREFIX}{i}.log").write_text(str(i))

        would_remove = prune_old_logs(tmp_path, keep=5, dry_run=True)

        assert len(would_remove) == 2
        assert len(list(tmp_path.glob(f"{LOG_FILE_PREFIX}*.log"))) == 7
        assert any(r.getMessage().startswith("DRY RUN: would delete old log file") for r in caplog.records)


class TestLogEventListener:
    def _action(self):
        return RelinkAction("/v1/x", "/v2/torrents/x", "/v2", "/v2/x", 1)

    def test_simulated_results_get_dry_run_prefix(self, caplog):
        caplog.set_level(logging.INFO)
        result = ActionResult(self._action(), ActionStatus.APPLIED, "would hardlink", simulated=True)
        LogEventListener()(RunEvent(EventKind.ACTION_APPLIED, "would hardlink", "/v1/x", result=result))
        assert caplog.records[-1].getMessage().startswith("DRY RUN: action-applied '/v1/x'")

    def test_failures_are_errors(self, caplog):
        result = ActionResult(self._action(), ActionStatus.FAILED, "conflict")
        LogEventListener()(RunEvent(EventKind.ACTION_FAILED, "conflict", "/v1/x", result=result))
        assert caplog.records[-1].levelno == logging.ERROR

    def test_data_loss_is_critical(self, caplog):
        result = ActionResult(self._action(), ActionStatus.FAILED, "lost", data_loss=True)
        LogEventListener()(RunEvent(EventKind.ACTION_FAILED, "lost", "/v1/x", result=result))
        assert caplog.records[-1].levelno == logging.CRITICAL

    def test_no_canonical_lists_group_members(self, caplog):
        group = ContentGroup(b"d", 1, [FileRecord("/v1/x", "/v1"), FileRecord("/v2/x", "/v2")])
        LogEventListener()(RunEvent(EventKind.NO_CANONICAL, "no priority copy", "/v1/x", group=group))
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert messages[-2:] == ["  /v1/x", "  /v2/x"]
