import logging
import sys

from neural_enhance import logger as ne_logger


def _stderr_handlers(base):
    return [h for h in base.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr]


def test_setup_logger_idempotent_handlers():
    """Calling setup_logger() repeatedly should leave exactly one stderr StreamHandler."""
    base = ne_logger.setup_logger(level=logging.DEBUG)
    _ = ne_logger.setup_logger(level=logging.DEBUG)

    assert len(_stderr_handlers(base)) == 1
    assert base.propagate is False


def test_get_logger_returns_child():
    child = ne_logger.get_logger("session")
    assert child.name == "neural_enhance.session"
    assert ne_logger.get_logger().name == "neural_enhance"


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("NEURAL_ENHANCE_LOG_LEVEL", "warning")
    try:
        base = ne_logger.setup_logger(level=logging.DEBUG)
        assert base.level == logging.WARNING
    finally:
        monkeypatch.delenv("NEURAL_ENHANCE_LOG_LEVEL")
        ne_logger.setup_logger()


def test_category_filter(monkeypatch):
    monkeypatch.setenv("NEURAL_ENHANCE_LOG_CATS", "session, edit_client")
    try:
        base = ne_logger.setup_logger()
        (handler,) = _stderr_handlers(base)

        def record(name):
            return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

        assert handler.filter(record("neural_enhance.session"))
        assert handler.filter(record("neural_enhance.edit_client"))
        assert not handler.filter(record("neural_enhance.controller"))
    finally:
        monkeypatch.delenv("NEURAL_ENHANCE_LOG_CATS")
        base = ne_logger.setup_logger()
    assert _stderr_handlers(base)[0].filters == []
