"""Utilities module initialization"""

from furs_client.utils.identifiers import (
    format_date_for_furs,
    format_datetime_for_zoi,
    format_issue_date_time,
    generate_id,
    generate_message_id,
    parse_datetime,
)

__all__ = [
    "format_date_for_furs",
    "format_datetime_for_zoi",
    "format_issue_date_time",
    "generate_id",
    "generate_message_id",
    "parse_datetime",
]
