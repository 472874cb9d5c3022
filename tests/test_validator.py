import jwt
import pytest

from app.core.exceptions import (
    InvalidSessionError,
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
)
from app.onboarding import token_codec
from app.onboarding.steps import OnboardingStep
from app.onboarding.token_codec import TOKEN_LIFETIME_MS
from app.onboarding.validator import is_valid_session, validate_session
from conftest import CHANNEL, T0, TEST_SECRET


@pytest.fixture
def token():
    return token_codec.issue(CHANNEL, now=T0)


def test_fresh_token_validates(token):
    session = validate_session(token, now=T0 + 1)

    assert session.channel_identity == CHANNEL
    assert session.step == OnboardingStep.STARTED
    assert is_valid_session(token, now=T0)


def test_accepts_surrounding_whitespace(token):
    assert validate_session(f"  {token}\n", now=T0).channel_identity == CHANNEL


def test_valid_up_to_deadline(token):
    deadline = T0 + TOKEN_LIFETIME_MS

    assert validate_session(token, now=deadline - 1).expires_at == deadline
    assert validate_session(token, now=deadline).expires_at == deadline


def test_rejected_one_millisecond_after_deadline(token):
    deadline = T0 + TOKEN_LIFETIME_MS

    with pytest.raises(InvalidSessionError) as exc_info:
        validate_session(token, now=deadline + 1)

    assert isinstance(exc_info.value.__cause__, TokenExpiredError)


def test_every_signature_character_is_checked(token):
    header, payload, signature = token.split(".")

    for position, char in enumerate(signature):
        replacement = "A" if char != "A" else "B"
        forged_signature = signature[:position] + replacement + signature[position + 1:]
        forged = f"{header}.{payload}.{forged_signature}"

        with pytest.raises(InvalidSessionError) as exc_info:
            validate_session(forged, now=T0)
        assert isinstance(exc_info.value.__cause__, SignatureInvalidError), position


def test_embedded_deadline_checked_even_if_envelope_is_longer():
    # Hand-signed token whose envelope outlives expires_at
    claims = {
        "wa_user_id": CHANNEL,
        "step": "started",
        "created_at": T0,
        "expires_at": T0 + 1_000,
        "iat": T0 // 1000,
        "exp": (T0 + TOKEN_LIFETIME_MS) // 1000,
    }
    token = jwt.encode(claims, TEST_SECRET, algorithm="HS256")

    assert is_valid_session(token, now=T0 + 500)
    with pytest.raises(InvalidSessionError) as exc_info:
        validate_session(token, now=T0 + 5_000)
    assert isinstance(exc_info.value.__cause__, TokenExpiredError)


@pytest.mark.parametrize("garbage", [None, "", "   ", "hello", "a.b.c", "x" * 500])
def test_garbage_collapses_to_invalid_session(garbage):
    with pytest.raises(InvalidSessionError) as exc_info:
        validate_session(garbage, now=T0)

    assert isinstance(exc_info.value.__cause__, (MalformedTokenError, SignatureInvalidError))
    assert not is_valid_session(garbage, now=T0)


def test_invalid_session_error_is_uniform():
    error = InvalidSessionError()

    assert error.status_code == 400
    assert error.code == "INVALID_SESSION"
    assert error.message == "Invalid or expired onboarding session"
