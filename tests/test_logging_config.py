import logging

from gradientslide.logging_config import PACKAGE_LOGGER, setup_logging


def test_setup_logging_replaces_previous_handlers(tmp_path):
    log_file = tmp_path / "session.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    root = setup_logging(level=logging.WARNING, log_file=str(log_file))

    assert root.name == PACKAGE_LOGGER
    assert root.level == logging.WARNING
    assert len(root.handlers) == 2

    logging.getLogger("gradientslide.model.latex").warning("unknown command \\foo")
    for handler in root.handlers:
        handler.flush()
    assert "[gradientslide.model.latex] unknown command \\foo" in log_file.read_text(encoding="utf-8")

    setup_logging()
