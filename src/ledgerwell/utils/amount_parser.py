"""Amount parsing and formatting utilities."""

from decimal import Decimal
import math
import re

# Eastern Arabic and Persian digits, as typed with localized keyboards
_LOCALIZED_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")


def parse_amount(amount_str: str) -> float:
    """Parse an amount string into a float.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "١٢٣٫٤٥" (localized digits and decimal separator)

    Args:
        amount_str: Amount string

    Returns:
        Float amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip().translate(_LOCALIZED_DIGITS)

    # Arabic decimal and thousands separators
    amount_str = amount_str.replace("٫", ".").replace("٬", ",")

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥₹₩₽₺₪₦₫฿₱]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = float(amount_str)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not math.isfinite(amount):
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return amount


def format_number(value) -> str:
    """Format a number as plain decimal text.

    No exponent, no grouping, and integral values without a trailing ".0"
    (e.g. 50.0 -> "50", 1e-7 -> "0.0000001"). Non-finite values are written
    as "NaN", "Infinity" or "-Infinity".
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text
