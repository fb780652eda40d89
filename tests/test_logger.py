import json
import logging

import pytest

from logger import LOGGER_NAME, JSONFormatter, LogManager, TextFormatter, get_logger


@pytest.fixture(autouse=True)
def reset_app_logger():
    yield
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()


def make_record(msg, level=logging.INFO):
    return logging.LogRecord(LOGGER_NAME, level, __file__, 1, msg, None, None)


def test_text_formatter_with_dict_message():
    record = make_record(
        {"message": "Analyzing repository", "repository": "acme/api", "count": 3}
    )

    line = TextFormatter().format(record)

    assert 'level=INFO msg="Analyzing repository"' in line
    assert "repository=acme/api" in line
    assert "count=3" in line


def test_text_formatter_quotes_values_with_spaces():
    record = make_record({"message": "failed", "error": "HTTP 404: Not Found"})

    line = TextFormatter().format(record)

    assert 'error="HTTP 404: Not Found"' in line


def test_text_formatter_with_plain_message():
    line = TextFormatter().format(make_record("plain text", logging.WARNING))

    assert 'level=WARNING msg="plain text"' in line


def test_json_formatter():
    record = make_record({"message": "Completed", "total": 3, "healthy": 2})

    payload = json.loads(JSONFormatter().format(record))

    assert payload["msg"] == "Completed"
    assert payload["level"] == "INFO"
    assert payload["total"] == 3
    assert payload["healthy"] == 2


def test_log_manager_writes_to_stderr(capsys):
    logger = LogManager(app_name="fab-backlog", json_logs=True).logger

    get_logger("analyzers.multi_repository").info({"message": "hello", "org": "acme"})
    logger.debug({"message": "hidden"})

    captured = capsys.readouterr()
    assert captured.out == ""
    lines = [json.loads(line) for line in captured.err.splitlines()]
    assert len(lines) == 1
    assert lines[0]["msg"] == "hello"
    assert lines[0]["org"] == "acme"


def test_log_manager_level_filters(capsys):
    LogManager(app_name="fab-backlog", level=logging.ERROR)

    get_logger("app").warning({"message": "suppressed"})
    get_logger("app").error({"message": "shown"})

    err = capsys.readouterr().err
    assert "suppressed" not in err
    assert "shown" in err


def test_log_manager_file_handler(tmp_path):
    logger = LogManager(app_name="fab-backlog", log_dir=str(tmp_path / "logs")).logger

    logger.info({"message": "to file"})
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "logs" / "fab-backlog.log").read_text(encoding="utf-8")
    assert json.loads(content.splitlines()[0])["msg"] == "to file"


def test_log_manager_replaces_handlers():
    LogManager(app_name="fab-backlog")
    logger = LogManager(app_name="fab-backlog").logger

    assert len(logger.handlers) == 1
