# tests/3_independent/test_utils_logs.py


import logging
import sys
from io import StringIO

import pytest

import sass_make.logs as mod_logs
import sass_make.utils_logs as mod_utils_logs


def test_safe_log_writes_to_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    """safe_log() should write to __stderr__ without throwing."""
    # --- setup ---
    buf = StringIO()

    # --- patch and execute ---
    monkeypatch.setattr(sys, "__stderr__", buf)
    mod_utils_logs.safe_log("hello safe")

    # --- verify ---
    assert "hello safe" in buf.getvalue()


def test_safe_log_handles_print_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """If print() fails, safe_log() should fall back to .write()."""
    # --- setup ---
    buf = StringIO()

    # --- stubs ---
    def bad_print(*_args: object, **_kwargs: object) -> None:
        xmsg = "printer exploded"
        raise OSError(xmsg)

    # --- patch and execute ---
    monkeypatch.setattr(sys, "__stderr__", buf)
    monkeypatch.setattr("builtins.print", bad_print)
    mod_utils_logs.safe_log("broken print test")

    # --- verify ---
    assert "[INTERNAL]" in buf.getvalue()


def test_every_level_goes_to_stderr(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    """stdout is a data channel, so even info/debug must stay off it."""
    # --- execute ---
    direct_logger.debug("dbg line")
    direct_logger.info("info line")
    direct_logger.warning("warn line")

    # --- verify ---
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[DEBUG] dbg line" in captured.err
    assert "info line" in captured.err
    assert "warning: warn line" in captured.err


def test_tag_formatter_colors_only_when_enabled() -> None:
    # --- setup ---
    fmt = mod_utils_logs.TagFormatter("%(message)s")
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

    # --- execute and verify ---
    assert fmt.format(record) == "error: boom"
    record.enable_color = True
    assert fmt.format(record) == (
        f"{mod_utils_logs.RED}error:{mod_utils_logs.RESET} boom"
    )


def test_error_if_not_debug_traceback_only_when_verbose(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    def fail() -> None:
        xmsg = "bad input"
        raise ValueError(xmsg)

    # --- execute ---
    direct_logger.setLevel("info")
    try:
        fail()
    except ValueError as e:
        direct_logger.error_if_not_debug(str(e))
    quiet = capsys.readouterr().err

    direct_logger.setLevel("debug")
    try:
        fail()
    except ValueError as e:
        direct_logger.error_if_not_debug(str(e))
    verbose = capsys.readouterr().err

    # --- verify ---
    assert quiet == "error: bad input\n"
    assert verbose.startswith("error: bad input\n")
    assert "Traceback" in verbose


def test_handler_follows_stderr_swaps(
    monkeypatch: pytest.MonkeyPatch,
    direct_logger: mod_logs.AppLogger,
) -> None:
    """A replaced sys.stderr is picked up on the next record."""
    # --- setup ---
    first, second = StringIO(), StringIO()

    # --- execute ---
    monkeypatch.setattr(sys, "stderr", first)
    direct_logger.info("one")
    monkeypatch.setattr(sys, "stderr", second)
    direct_logger.info("two")

    # --- verify ---
    assert first.getvalue() == "one\n"
    assert second.getvalue() == "two\n"
    assert len(direct_logger.handlers) == 1


def test_determine_log_level_order(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI beats the program env var, which beats LOG_LEVEL and the default."""
    # --- setup ---
    logger = mod_logs.get_app_logger()

    class _Args:
        log_level: str | None = None

    # --- execute and verify ---
    assert logger.determine_log_level(args=_Args()) == "INFO"  # type: ignore[arg-type]

    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert logger.determine_log_level(args=_Args()) == "WARNING"  # type: ignore[arg-type]

    monkeypatch.setenv("SASS_MAKE_LOG_LEVEL", "error")
    assert logger.determine_log_level(args=_Args()) == "ERROR"  # type: ignore[arg-type]

    args = _Args()
    args.log_level = "debug"
    assert logger.determine_log_level(args=args) == "DEBUG"  # type: ignore[arg-type]


def test_color_detection_respects_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # --- execute and verify ---
    monkeypatch.setenv("NO_COLOR", "1")
    assert mod_logs.AppLogger.determine_color_enabled() is False

    monkeypatch.delenv("NO_COLOR")
    monkeypatch.setenv("FORCE_COLOR", "yes")
    assert mod_logs.AppLogger.determine_color_enabled() is True


def test_set_level_applies_to_unregistered_logger(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A logger built directly (not via getLogger) must honor later setLevel()."""
    # --- setup ---
    logger = mod_logs.AppLogger("unregistered_logger", enable_color=False)

    # --- execute ---
    logger.setLevel("info")
    logger.debug("hidden")
    logger.setLevel("debug")
    logger.debug("shown")

    # --- verify ---
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "[DEBUG] shown" in err


def test_enable_color_change_reaches_existing_handler(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.error("plain")
    assert capsys.readouterr().err == "error: plain\n"

    # --- execute ---
    direct_logger.enable_color = True
    direct_logger.error("colored")

    # --- verify ---
    assert capsys.readouterr().err == (
        f"{mod_utils_logs.RED}error:{mod_utils_logs.RESET} colored\n"
    )
