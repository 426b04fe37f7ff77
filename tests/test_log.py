import io
import re

import pytest

from tftest import log
from tftest.log import Logger, LogLevel, parse_log_level

LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (.*)$")


@pytest.fixture
def default_logger_reset():
    yield
    log.set_default_log_level(LogLevel.INFO)
    log.set_default_prefix("")


@pytest.mark.parametrize("name", ["DEBUG", "INFO", "WARN", "ERROR", "FATAL"])
def test_parse_log_level_round_trips_names(name):
    level = parse_log_level(name)
    assert str(level) == name
    assert parse_log_level(name.lower()) is level


def test_parse_log_level_rejects_unknown():
    with pytest.raises(ValueError, match="invalid log level: nope"):
        parse_log_level("nope")


def test_levels_are_ordered():
    parsed = [parse_log_level(name) for name in ("debug", "info", "warn", "error", "fatal")]
    assert parsed == [
        LogLevel.DEBUG,
        LogLevel.INFO,
        LogLevel.WARN,
        LogLevel.ERROR,
        LogLevel.FATAL,
    ]
    assert parsed == sorted(parsed)
    assert parsed[0] < parsed[1] < parsed[2] < parsed[3] < parsed[4]


def test_line_format_without_prefix():
    stream = io.StringIO()
    Logger(LogLevel.DEBUG, "", stream).info("hello %s", "world")
    line = stream.getvalue()
    assert line.endswith("\n")
    match = LINE.match(line.rstrip("\n"))
    assert match is not None
    assert match.group(1) == "INFO: hello world"


def test_line_format_with_prefix():
    stream = io.StringIO()
    Logger(LogLevel.INFO, "Benchmark", stream).error("failed %d times", 3)
    match = LINE.match(stream.getvalue().rstrip("\n"))
    assert match is not None
    assert match.group(1) == "[Benchmark] ERROR: failed 3 times"


def test_message_without_args_is_not_formatted():
    stream = io.StringIO()
    Logger(LogLevel.INFO, "", stream).warn("100% done")
    assert stream.getvalue().rstrip("\n").endswith("WARN: 100% done")


def test_messages_below_level_are_dropped():
    stream = io.StringIO()
    logger = Logger(LogLevel.WARN, "", stream)
    logger.debug("d")
    logger.info("i")
    logger.warn("w")
    logger.error("e")
    lines = stream.getvalue().splitlines()
    assert [LINE.match(line).group(1) for line in lines] == ["WARN: w", "ERROR: e"]


def test_level_and_prefix_can_change():
    stream = io.StringIO()
    logger = Logger(LogLevel.ERROR, "", stream)
    logger.info("hidden")
    logger.level = LogLevel.DEBUG
    logger.prefix = "P"
    logger.debug("shown")
    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    assert LINE.match(lines[0]).group(1) == "[P] DEBUG: shown"


def test_fatal_logs_and_exits():
    stream = io.StringIO()
    with pytest.raises(SystemExit) as excinfo:
        Logger(LogLevel.INFO, "", stream).fatal("boom")
    assert excinfo.value.code == 1
    assert stream.getvalue().rstrip("\n").endswith("FATAL: boom")


def test_logger_defaults_to_stdout(capsys):
    Logger().info("to stdout")
    assert capsys.readouterr().out.rstrip("\n").endswith("INFO: to stdout")


def test_default_logger_level(capsys, default_logger_reset):
    log.debug("not yet")
    assert capsys.readouterr().out == ""
    log.set_default_log_level(LogLevel.DEBUG)
    log.debug("now")
    assert capsys.readouterr().out.rstrip("\n").endswith("DEBUG: now")


def test_default_logger_prefix(capsys, default_logger_reset):
    log.set_default_prefix("tftest")
    log.warn("careful")
    log.error("bad")
    lines = capsys.readouterr().out.splitlines()
    assert [LINE.match(line).group(1) for line in lines] == [
        "[tftest] WARN: careful",
        "[tftest] ERROR: bad",
    ]


def test_default_fatal_exits(capsys, default_logger_reset):
    with pytest.raises(SystemExit) as excinfo:
        log.fatal("stop %s", "now")
    assert excinfo.value.code == 1
    assert capsys.readouterr().out.rstrip("\n").endswith("FATAL: stop now")


def test_default_info(capsys, default_logger_reset):
    log.info("value=%s", 7)
    assert capsys.readouterr().out.rstrip("\n").endswith("INFO: value=7")