"""
utils/phone_utils.py

Purpose: Phone number normalization

- Strips channel prefixes (whatsapp:) and formatting
- Builds the lookup variants a stored phone may have been saved as
- Brazilian mobile numbers with and without the 9th digit
"""

import re
from typing import List

BRAZIL_COUNTRY_CODE = "55"


def normalize_phone(raw: str) -> str:
    """
    Normalizes a phone to E.164-like form: "+" followed by digits.

    Examples:
        "whatsapp:+55 (38) 99727-9959" -> "+5538997279959"
        "5538997279959" -> "+5538997279959"
    """
    if not raw:
        return ""

    raw = raw.strip()
    if raw.lower().startswith("whatsapp:"):
        raw = raw[len("whatsapp:"):]

    digits = re.sub(r"\D", "", raw)
    return f"+{digits}" if digits else ""


def phone_variants(raw: str) -> List[str]:
    """
    Returns every format a stored phone might match, most specific first.

    Covers the raw value, "+digits", bare digits, the last 11 digits (DDD +
    number) and, for Brazilian numbers, the forms with the mobile 9th digit
    added or removed.
    """
    normalized = normalize_phone(raw)
    if not normalized:
        return []

    digits = normalized[1:]
    candidates = [raw.strip(), normalized, digits]

    local = digits[-11:]
    candidates.extend([local, f"+{BRAZIL_COUNTRY_CODE}{local}"])

    if digits.startswith(BRAZIL_COUNTRY_CODE):
        ddd = digits[2:4]
        rest = digits[4:]
        # Mobile numbers carry 9 digits after the area code
        if len(rest) == 8:
            candidates.append(f"+{BRAZIL_COUNTRY_CODE}{ddd}9{rest}")
        if len(rest) == 9 and rest.startswith("9"):
            candidates.append(f"+{BRAZIL_COUNTRY_CODE}{ddd}{rest[1:]}")

    variants = []
    for candidate in candidates:
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants


def to_whatsapp_address(phone: str) -> str:
    """Adds the whatsapp: prefix Twilio expects."""
    if phone.startswith("whatsapp:"):
        return phone
    return f"whatsapp:{normalize_phone(phone)}"
