import logging

from logging_config import setup_logging


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "viewer.log"
    setup_logging(logging.DEBUG, str(log_file))
    setup_logging(logging.DEBUG, str(log_file))
    root = logging.getLogger()
    assert len(root.handlers) == 2
    logging.getLogger("world").info("hello")
    for handler in root.handlers:
        handler.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
