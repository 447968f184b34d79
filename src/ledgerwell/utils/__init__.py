"""Utility functions for ledgerwell."""

from ledgerwell.utils.date_parser import parse_date, parse_timestamp, format_timestamp
from ledgerwell.utils.amount_parser import parse_amount, format_number

__all__ = ["parse_date", "parse_timestamp", "format_timestamp", "parse_amount", "format_number"]
