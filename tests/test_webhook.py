import re

import pytest

from app.flow import dispatcher
from app.onboarding import token_codec
from app.onboarding.extractor import build_return_message
from app.onboarding.handlers.account import handle_create_account
from app.onboarding.handlers.category import handle_create_category
from app.onboarding.handlers.completion import handle_complete_onboarding
from app.onboarding.handlers.group import handle_create_group
from app.onboarding.validator import validate_session
from app.schemas.webhook import parse_twilio_message
from utils.constants import (
    GENERIC_ERROR_MESSAGE,
    HELP_MESSAGE,
    PROMOTIONAL_MESSAGE,
    SESSION_INVALID_MESSAGE,
    SIGNUP_NOT_FOUND_MESSAGE,
    TOKEN_NOT_FOUND_MESSAGE,
)
from conftest import CHANNEL

URL = "/api/v1/webhook"
SENDER = f"whatsapp:{CHANNEL}"


def send(client, body, sender=SENDER):
    return client.post(URL, data={
        "From": sender,
        "Body": body,
        "ProfileName": "Ana",
        "MessageSid": "SM123",
    })


def _message(text, phone=CHANNEL):
    return parse_twilio_message(f"whatsapp:{phone}", text, "Ana", "SM1")


async def walk_onboarding(phone=CHANNEL):
    token = token_codec.issue(phone)
    account = await handle_create_account(name="Ana", email="ana@example.com", onboarding_token=token)
    group = await handle_create_group(account["updated_token"], name="Trip")
    category = await handle_create_category(group["updated_token"], name="Fuel", color="#123456")
    return await handle_complete_onboarding(category["updated_token"])


def test_always_answers_twiml(client, outbox):
    response = send(client, "hello")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<Response></Response>" in response.text


def test_get_webhook(client):
    assert client.get(URL).json()["status"] == "ok"


def test_unknown_sender_gets_promotional_message(client, outbox):
    send(client, "hi")

    assert outbox.sent == [{"to": CHANNEL, "message": PROMOTIONAL_MESSAGE, "media_url": None}]


def test_onboarding_keyword_sends_link_bound_to_sender(client, outbox):
    send(client, "I want to start Onboarding")

    message = outbox.sent[0]["message"]
    token = re.search(r"token=([^&\s]+)", message).group(1)
    session = validate_session(token)
    assert session.channel_identity == CHANNEL
    assert session.step.value == "started"
    assert "&phone=%2B5500000000000" in message


@pytest.mark.asyncio
async def test_existing_user_gets_help_and_restart_link(fake_db, outbox):
    await handle_create_account(name="Ana", email="ana@example.com", phone=CHANNEL)
    user = fake_db["users"].where()[0]

    help_reply = await dispatcher.route_message(_message("what now?"), user)
    assert help_reply["message"] == HELP_MESSAGE

    restart = await dispatcher.route_message(_message("onboarding"), user)
    assert "Hi Ana!" in restart["message"]
    assert "&existing=true" in restart["message"]


@pytest.mark.asyncio
async def test_return_with_suffix_reports_completed_signup(fake_db, outbox):
    done = await walk_onboarding()

    result = await dispatcher.dispatch_message(_message(done["return_message"]))

    assert result == {"status": "success", "route": "onboarding_return"}
    reply = outbox.sent[-1]["message"]
    assert '"Trip"' in reply
    assert '"Fuel"' in reply


@pytest.mark.asyncio
async def test_return_with_full_token_reports_pending_step(fake_db, outbox):
    token = token_codec.issue(CHANNEL)
    account = await handle_create_account(name="Ana", email="ana@example.com", onboarding_token=token)

    text = f"Back from signup (token: {account['updated_token']})"
    await dispatcher.dispatch_message(_message(text))

    assert "create your first group" in outbox.sent[-1]["message"]


@pytest.mark.asyncio
async def test_return_with_full_token_from_other_phone(fake_db, outbox):
    token = token_codec.issue("+5511988887777")

    await dispatcher.dispatch_message(_message(f"back from signup token: {token}"))

    assert outbox.sent[-1]["message"] == SESSION_INVALID_MESSAGE


@pytest.mark.asyncio
async def test_return_without_recent_signup(fake_db, outbox):
    await dispatcher.dispatch_message(_message(build_return_message("abcdefghijkl")))

    assert outbox.sent[-1]["message"] == SIGNUP_NOT_FOUND_MESSAGE


@pytest.mark.asyncio
async def test_return_without_token(fake_db, outbox):
    await dispatcher.dispatch_message(_message("back from signup!"))

    assert outbox.sent[-1]["message"] == TOKEN_NOT_FOUND_MESSAGE


def test_handler_failure_sends_generic_error(client, outbox, monkeypatch):
    async def explode(message, user):
        raise RuntimeError("boom")

    monkeypatch.setattr(dispatcher, "route_message", explode)

    response = send(client, "anything")

    assert response.status_code == 200
    assert outbox.sent[-1]["message"] == GENERIC_ERROR_MESSAGE
