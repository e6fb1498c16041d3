import logging

from serfsd.db import EventJournal


def test_log_event_writes_row(tmp_path):
    journal = EventJournal(str(tmp_path / "audit.db"))
    journal.init()
    journal.log_event("warn", "Error initializing serf client: refused")

    rows = journal.latest_events(1)
    assert rows, "events should have at least one row"
    assert rows[0]["level"] == "WARN"
    assert rows[0]["source"] is None
    assert rows[0]["message"] == "Error initializing serf client: refused"


def test_log_event_forwards_to_logging(tmp_path, caplog):
    journal = EventJournal(str(tmp_path / "events.db"))
    journal.init()
    with caplog.at_level(logging.INFO, logger="serfsd.events"):
        journal.log_event("INFO", "Target group added: 10.0.0.1:9100", source="10.0.0.1:9100")
    assert "Target group added: 10.0.0.1:9100" in caplog.text


def test_directory_path_gets_db_file(tmp_path):
    journal = EventJournal(str(tmp_path))
    assert journal.path == str(tmp_path / "serfsd.db")


def test_missing_table_is_logged_not_raised(tmp_path, caplog):
    journal = EventJournal(str(tmp_path / "events.db"))
    with caplog.at_level(logging.WARNING, logger="serfsd.events"):
        journal.log_event("INFO", "hello")
    assert "Could not journal event" in caplog.text
