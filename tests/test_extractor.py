import pytest

from app.core.exceptions import TokenNotFoundError
from app.onboarding import token_codec
from app.onboarding.extractor import (
    build_return_message,
    extract_token,
    is_full_token,
    is_return_message,
)
from conftest import CHANNEL, T0


def test_extracts_full_token():
    token = token_codec.issue(CHANNEL, now=T0)

    assert extract_token(f"Back from signup ✅ (token: {token})") == token
    assert is_full_token(extract_token(f"token: {token}"))


def test_label_is_case_insensitive():
    assert extract_token("TOKEN:   abc.def.ghi please") == "abc.def.ghi"


def test_extracts_truncated_fragment():
    assert extract_token("Back from signup ✅ (token: Xy9_-abc)") == "Xy9_-abc"
    assert extract_token("token: aaa.bbb") == "aaa.bbb"
    assert not is_full_token("Xy9_-abc")
    assert not is_full_token("aaa.bbb")


def test_stops_at_sentence_punctuation():
    assert extract_token("my token: abc.def.ghi. thanks") == "abc.def.ghi"
    assert extract_token("token: abc.") == "abc"


def test_returns_first_match():
    assert extract_token("token: first then token: second") == "first"


@pytest.mark.parametrize("text", ["", None, "hello there", "token:", "token: !!!", "tokens abc.def.ghi"])
def test_no_token(text):
    with pytest.raises(TokenNotFoundError):
        extract_token(text)


def test_return_message_carries_suffix_only():
    token = token_codec.issue(CHANNEL, now=T0)

    message = build_return_message(token)

    assert message == f"Back from signup ✅ (token: {token[-8:]})"
    assert token not in message
    assert is_return_message(message)
    assert extract_token(message) == token[-8:]


def test_is_return_message():
    assert is_return_message("back from SIGNUP")
    assert not is_return_message("onboarding")
    assert not is_return_message("")
