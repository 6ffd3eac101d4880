import logging

from config import Settings
from database.models import Client
from utils.logging_config import LOG_FILE_NAME, PeeweeFilter, setup_logging


def _record(msg: str, sql: str | None = None) -> logging.LogRecord:
    record = logging.LogRecord("peewee", logging.DEBUG, "", 0, msg, None, None)
    if sql is not None:
        record.sql = sql
    return record


def test_filter_excludes_select_queries():
    filt = PeeweeFilter()

    assert not filt.filter(_record("SELECT * FROM service_orders"))
    assert not filt.filter(_record("ignored", sql="   SELECT * FROM clients"))


def test_filter_keeps_other_queries():
    filt = PeeweeFilter()

    for query in ['INSERT INTO "clients" VALUES (?)', 'UPDATE "service_orders" SET "status" = ?']:
        assert filt.filter(_record(query))
        assert filt.filter(_record("ignored", sql=f"  {query}"))


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def test_filter_handles_records_logged_by_peewee(in_memory_db):
    peewee_logger = logging.getLogger("peewee")
    capture = _Capture()
    saved_level, saved_filters = peewee_logger.level, peewee_logger.filters[:]
    peewee_logger.filters.clear()
    peewee_logger.setLevel(logging.DEBUG)
    peewee_logger.addHandler(capture)
    try:
        list(Client.select())
        Client.delete().where(Client.id == "missing").execute()
    finally:
        peewee_logger.removeHandler(capture)
        peewee_logger.setLevel(saved_level)
        peewee_logger.filters[:] = saved_filters

    filt = PeeweeFilter()
    selects = [r for r in capture.records if "SELECT" in r.getMessage()]
    deletes = [r for r in capture.records if "DELETE" in r.getMessage()]
    assert selects and deletes
    assert not any(filt.filter(r) for r in selects)
    assert all(filt.filter(r) for r in deletes)


def test_setup_logging_writes_log_file(tmp_path):
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging(Settings(log_dir=str(tmp_path), log_level="INFO"))
        logging.getLogger("services.orders").info("order saved")
        for handler in root.handlers:
            handler.flush()
        assert "order saved" in (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers, level = saved
        root.setLevel(level)
