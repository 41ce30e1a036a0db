"""Tests for the console logger."""

import io

import pytest
from chip8jax.logging import ConsoleLogger


def make_logger(**kwargs):
    stream = io.StringIO()
    kwargs.setdefault("show_timestamps", False)
    return ConsoleLogger(stream=stream, **kwargs), stream


class TestConsoleLogger:

    def test_format(self):
        logger, stream = make_logger(name="emu")
        logger.info("hello")
        assert stream.getvalue() == "[    INFO][emu] hello\n"

    def test_timestamp(self):
        logger, stream = make_logger(show_timestamps=True)
        logger.warning("careful")
        line = stream.getvalue()
        assert line.startswith("[")
        assert "s][ WARNING][chip8jax] careful" in line

    def test_level_filtering(self):
        logger, stream = make_logger(log_level="WARNING")
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        logger.critical("c")
        lines = stream.getvalue().splitlines()
        assert [line.split("] ")[-1] for line in lines] == ["w", "e", "c"]

    def test_level_is_case_insensitive(self):
        logger, stream = make_logger(log_level="debug")
        logger.debug("shown")
        assert "shown" in stream.getvalue()

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            ConsoleLogger(log_level="LOUD")

    def test_no_colors_off_tty(self):
        logger, stream = make_logger(use_colors=True)
        logger.error("plain")
        assert "\033[" not in stream.getvalue()

    def test_log_config(self):
        logger, stream = make_logger()
        logger.log_config({"clock_rate": 700, "trace": False})
        output = stream.getvalue()
        assert "  clock_rate: 700" in output
        assert "  trace: False" in output
