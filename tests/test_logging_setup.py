import logging

import pytest

from measurelabel.utils.logging_setup import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet_levels = {name: logging.getLogger(name).level for name in ("matplotlib", "PIL")}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)


def test_level_name_is_applied():
    logger = setup_logging(level="warning")
    assert logger.name == "measurelabel"
    assert logging.getLogger().level == logging.WARNING


def test_debug_flag_forces_debug_but_keeps_matplotlib_quiet():
    setup_logging(level="ERROR", debug=True)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("matplotlib").level == logging.WARNING
    assert logging.getLogger("PIL").level == logging.WARNING


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "logs" / "measure.log"
    setup_logging(level="INFO", log_file=log_file)

    logging.getLogger("measurelabel.test").info("Length 5.00 µm")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "Length 5.00 µm" in text
    assert "also to" in text


def test_unknown_level_is_rejected():
    with pytest.raises(ValueError):
        setup_logging(level="LOUD")
