import pytest

from tweak_core import logger


@pytest.fixture
def fresh_logger(temp_dir, monkeypatch):
    """Force the next logger call to initialise again inside temp_dir"""
    monkeypatch.setenv("TWEAK_LOG_DIR", str(temp_dir))
    monkeypatch.setattr(logger, "_logger_initialized", False)
    monkeypatch.setattr(logger, "_logger", None)
    return temp_dir


def read_log(log_dir):
    for handler in logger.get_logger().handlers:
        handler.flush()
    return (log_dir / logger.LOG_FILENAME).read_text(encoding="utf-8")


class TestLogLocation:
    def test_log_dir_comes_from_environment(self, fresh_logger):
        assert logger._get_log_path() == fresh_logger / "tweak-rewriter.log"

    def test_messages_are_written_to_log_file(self, fresh_logger):
        logger.info("column adjusted for 'width'")
        content = read_log(fresh_logger)
        assert "Tweak Rewriter Logger Started" in content
        assert "column adjusted for 'width'" in content

    def test_records_show_calling_module(self, fresh_logger):
        logger.warning("apply failed")
        line = [l for l in read_log(fresh_logger).splitlines() if "apply failed" in l][0]
        assert "[test_logger:test_records_show_calling_module:" in line
        assert "[WARNING ]" in line


class TestLogRotation:
    def test_previous_log_is_renamed_with_timestamp(self, fresh_logger):
        (fresh_logger / logger.LOG_FILENAME).write_text("previous run\n", encoding="utf-8")

        logger.get_logger()

        rotated = list(fresh_logger.glob("tweak-rewriter_*.log"))
        assert len(rotated) == 1
        assert rotated[0].read_text(encoding="utf-8") == "previous run\n"
        assert "previous run" not in read_log(fresh_logger)

    def test_logger_is_initialised_once(self, fresh_logger):
        first = logger.get_logger()
        assert logger.get_logger() is first
        assert len(first.handlers) == 1
