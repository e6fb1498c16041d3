import logging

from serfsd.logs import configure_logging


def test_timestamps_are_not_labelled_utc():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        configure_logging(logging.INFO, force=True)
        fmt = root.handlers[0].formatter
        assert not fmt.datefmt.endswith("Z")
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
