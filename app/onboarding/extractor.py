"""
app/onboarding/extractor.py

Purpose: Token recovery from free text

- Finds a token (or a truncated tail of one) in a WhatsApp message
- Builds the return message the web page asks the user to send
- Structural matching only; trust decisions belong to the validator
"""

import re

from app.core.exceptions import TokenNotFoundError

# Characters kept from the end of a token in the return message
RETURN_SUFFIX_LENGTH = 8

RETURN_MARKER = "back from signup"

# "token:" label, then up to three dot-delimited base64url segments.
# Trailing segments are optional so truncated tokens still match.
TOKEN_PATTERN = re.compile(
    r"token:\s*([A-Za-z0-9_-]+\.?[A-Za-z0-9_-]*\.?[A-Za-z0-9_-]*)",
    re.IGNORECASE
)

FULL_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def extract_token(text: str) -> str:
    """
    Returns the first token-shaped fragment found in `text`.

    Raises:
        TokenNotFoundError: If the text has no matching fragment
    """
    if not text:
        raise TokenNotFoundError()

    match = TOKEN_PATTERN.search(text)
    if not match:
        raise TokenNotFoundError()

    return match.group(1).rstrip(".")


def is_full_token(fragment: str) -> bool:
    """True if the fragment has the three non-empty segments of a complete token."""
    return bool(fragment and FULL_TOKEN_PATTERN.match(fragment))


def build_return_message(token: str) -> str:
    """
    Message the user sends back on WhatsApp after finishing the web steps.
    """
    return f"Back from signup ✅ (token: {token[-RETURN_SUFFIX_LENGTH:]})"


def is_return_message(text: str) -> bool:
    return bool(text) and RETURN_MARKER in text.lower()
