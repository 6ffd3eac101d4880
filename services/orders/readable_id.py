"""Human-readable service-order numbers: ``OS-YYYYMM-NNNN``.

The sequence is one more than the number of orders already entered in the
same calendar month.  Counting and inserting are separate store calls, so
two orders created at the same moment can receive the same number.
"""

from __future__ import annotations

import logging
from datetime import date

from database.repository import Filter, Repository
from utils.time_utils import month_bounds

logger = logging.getLogger(__name__)

READABLE_ID_PREFIX = "OS"


def format_readable_id(day: date, sequence: int) -> str:
    return f"{READABLE_ID_PREFIX}-{day.year:04d}{day.month:02d}-{sequence:04d}"


def count_orders_in_month(repo: Repository, day: date) -> int:
    start, next_start = month_bounds(day)
    docs = repo.get_filtered(
        Filter("entry_date", ">=", start),
        Filter("entry_date", "<", next_start),
    )
    return len(docs)


def next_readable_id(repo: Repository, entry_date: date) -> str:
    sequence = count_orders_in_month(repo, entry_date) + 1
    readable_id = format_readable_id(entry_date, sequence)
    logger.debug("Assigned readable id %s", readable_id)
    return readable_id
