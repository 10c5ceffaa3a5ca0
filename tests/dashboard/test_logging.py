"""Tests for shared/api_logging.py: decorators and file logging."""

from __future__ import annotations

import logging

import pytest

from shared.api_logging import log_api_call, log_service_call, log_warning


class _FakeSource:
    """Minimal class to test logging decorators."""

    @log_api_call
    def get_sessions(self, year: int) -> list[dict]:
        return [{"session_key": 9468}, {"session_key": 9472}]

    @log_api_call
    def get_laps(self, key: int) -> list[dict]:
        raise ValueError("feed unavailable")

    @log_service_call
    def build_frames(self, data: list) -> tuple:
        return tuple(data)

    @log_service_call
    def aggregate(self) -> None:
        raise RuntimeError("no classifications")


@pytest.fixture
def fake_source():
    return _FakeSource()


@pytest.fixture(autouse=True)
def _reset_logger_and_paths(tmp_path):
    """Reset the module-level logger and redirect log output to tmp_path."""
    import shared.api_logging as mod

    old_logger = mod._logger
    old_dir = mod._LOG_DIR
    old_file = mod._LOG_FILE

    # Clear the cached logger from Python's logging manager
    named_logger = logging.getLogger("f1_live.api")
    for h in named_logger.handlers[:]:
        named_logger.removeHandler(h)

    mod._logger = None
    mod._LOG_DIR = str(tmp_path)
    mod._LOG_FILE = str(tmp_path / "api_calls.log")

    yield tmp_path

    # Close file handlers to release file locks (important on Windows)
    if mod._logger is not None:
        for h in mod._logger.handlers[:]:
            h.close()
            mod._logger.removeHandler(h)
    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    mod._logger = old_logger
    mod._LOG_DIR = old_dir
    mod._LOG_FILE = old_file


class TestLogApiCall:
    def test_returns_result(self, fake_source, _reset_logger_and_paths):
        result = fake_source.get_sessions(2024)
        assert result == [{"session_key": 9468}, {"session_key": 9472}]

    def test_logs_call_and_ok(self, fake_source, _reset_logger_and_paths):
        fake_source.get_sessions(2024)
        log_file = _reset_logger_and_paths / "api_calls.log"
        content = log_file.read_text()
        assert "CALL: _FakeSource.get_sessions(2024)" in content
        assert "OK: _FakeSource.get_sessions(2024) -> 2 items" in content

    def test_logs_failure(self, fake_source, _reset_logger_and_paths):
        with pytest.raises(ValueError, match="feed unavailable"):
            fake_source.get_laps(123)
        log_file = _reset_logger_and_paths / "api_calls.log"
        content = log_file.read_text()
        assert "FAIL: _FakeSource.get_laps(123)" in content
        assert "ValueError" in content

    def test_preserves_function_name(self, fake_source):
        assert fake_source.get_sessions.__name__ == "get_sessions"


class TestLogServiceCall:
    def test_returns_result(self, fake_source, _reset_logger_and_paths):
        result = fake_source.build_frames([1, 2, 3])
        assert result == (1, 2, 3)

    def test_logs_service_call(self, fake_source, _reset_logger_and_paths):
        fake_source.build_frames([1, 2])
        log_file = _reset_logger_and_paths / "api_calls.log"
        content = log_file.read_text()
        assert "SERVICE CALL: _FakeSource.build_frames" in content
        assert "SERVICE OK: _FakeSource.build_frames" in content

    def test_logs_service_failure(self, fake_source, _reset_logger_and_paths):
        with pytest.raises(RuntimeError, match="no classifications"):
            fake_source.aggregate()
        log_file = _reset_logger_and_paths / "api_calls.log"
        content = log_file.read_text()
        assert "SERVICE FAIL: _FakeSource.aggregate" in content
        assert "RuntimeError" in content

    def test_creates_log_directory(self, tmp_path):
        """Log directory is created on first use."""
        import shared.api_logging as mod

        new_dir = tmp_path / "nested" / "logs"
        mod._LOG_DIR = str(new_dir)
        mod._LOG_FILE = str(new_dir / "api_calls.log")
        mod._logger = None

        named_logger = logging.getLogger("f1_live.api")
        for h in named_logger.handlers[:]:
            named_logger.removeHandler(h)

        repo = _FakeSource()
        repo.build_frames([])

        assert new_dir.exists()
        assert (new_dir / "api_calls.log").exists()


class TestLogWarning:
    def test_writes_warning(self, _reset_logger_and_paths):
        log_warning("skipping race session %s: %s", 9472, "timed out")
        content = (_reset_logger_and_paths / "api_calls.log").read_text()
        assert "WARNING | WARN: skipping race session 9472: timed out" in content

    def test_logger_does_not_propagate(self, _reset_logger_and_paths):
        import shared.api_logging as mod

        assert mod.get_logger().propagate is False
        assert mod.get_logger().name == "f1_live.api"


class TestGetLogger:
    def test_file_handler_added_alongside_other_handlers(self, _reset_logger_and_paths):
        import shared.api_logging as mod

        named_logger = logging.getLogger("f1_live.api")
        named_logger.addHandler(logging.NullHandler())

        logger = mod.get_logger()
        logger.info("replay built")

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        content = (_reset_logger_and_paths / "api_calls.log").read_text()
        assert "INFO | replay built" in content

    def test_file_handler_not_duplicated(self, _reset_logger_and_paths):
        import shared.api_logging as mod

        first = mod.get_logger()
        mod._logger = None
        second = mod.get_logger()

        assert first is second
        file_handlers = [h for h in second.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
