import logging

from core.logger import Logger


def test_logger_basic_info_does_not_crash():
    logger = Logger("test_logger")
    logger.info("Test message")


def test_logger_with_context(caplog):
    logger = Logger("test_logger_context")

    with caplog.at_level(logging.INFO, logger="test_logger_context"):
        logger.info("[DAILY] Day finalized", date="2026-01-12", high=112)

    assert "[DAILY] Day finalized | date=2026-01-12 high=112" in caplog.text


def test_logger_with_correlation_id(caplog):
    logger = Logger("test_logger_cid")
    logger.set_correlation_id("AAPL")

    with caplog.at_level(logging.INFO, logger="test_logger_cid"):
        logger.info("[SESSION] Session started", session="regular@1")

    assert "cid=AAPL session=regular@1" in caplog.text


def test_debug_suppressed_at_info_level(caplog):
    logger = Logger("test_logger_debug")

    with caplog.at_level(logging.INFO, logger="test_logger_debug"):
        logger.debug("per-bar noise")

    assert "per-bar noise" not in caplog.text
