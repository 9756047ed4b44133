import datetime
import time

from dateutil import parser as date_parser

import const
from storefront.errors.exceptions import BadRequest


def split_full_name(full_name):
    """First token is the first name, the rest is the last name.

    A single-token name is reused as the last name.
    """
    parts = (full_name or "").split()
    first_name = parts[0] if parts else ""
    last_name = " ".join(parts[1:]) or first_name
    return first_name, last_name


def generate_order_number(order_count, now_ms=None):
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return "{prefix}-{stamp}-{sequence}".format(
        prefix=const.ORDER_NUMBER_PREFIX,
        stamp=str(now_ms)[-8:],
        sequence=str(order_count + 1).zfill(4),
    )


def parse_datetime(value):
    """Datetime or ISO string to naive UTC; empty values give None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        date_value = value
    else:
        try:
            date_value = date_parser.isoparse(str(value))
        except ValueError:
            raise BadRequest(message=f"Invalid date: {value}")
    if date_value.tzinfo is not None:
        date_value = date_value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return date_value
