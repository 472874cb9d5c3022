import jwt
import pytest

from app.core.exceptions import (
    ConflictError,
    InvalidSessionError,
    PreconditionFailedError,
    ResourceNotFoundError,
    ValidationError,
)
from app.onboarding import token_codec
from app.onboarding.extractor import extract_token
from app.onboarding.handlers.account import handle_create_account
from app.onboarding.handlers.category import handle_create_category
from app.onboarding.handlers.completion import handle_complete_onboarding
from app.onboarding.handlers.group import handle_create_group
from app.onboarding.steps import OnboardingStep
from app.onboarding.token_codec import TOKEN_LIFETIME_MS
from app.onboarding.transitions import advance_session
from app.onboarding.validator import validate_session
from conftest import CHANNEL, T0, TEST_SECRET

MINUTE = 60_000


@pytest.fixture
def started_token():
    return token_codec.issue(CHANNEL, now=T0)


async def create_account(token, now=T0 + MINUTE, email="ana@example.com"):
    return await handle_create_account(
        name="Ana",
        email=email,
        onboarding_token=token,
        now=now,
    )


@pytest.mark.asyncio
async def test_full_onboarding_walkthrough(fake_db, started_token):
    account = await create_account(started_token)
    session = validate_session(account["updated_token"], now=T0 + MINUTE)
    assert session.step == OnboardingStep.ACCOUNT_CREATED
    assert session.application_identity == account["user_id"]
    assert session.channel_identity == CHANNEL

    group = await handle_create_group(account["updated_token"], name="Home", now=T0 + 2 * MINUTE)
    assert validate_session(group["updated_token"], now=T0 + 2 * MINUTE).step == OnboardingStep.GROUP_CREATED

    category = await handle_create_category(
        group["updated_token"], name="Food", color="#FF6B6B", now=T0 + 3 * MINUTE
    )
    assert category["group_id"] == group["group_id"]
    assert validate_session(category["updated_token"], now=T0 + 3 * MINUTE).step == OnboardingStep.CATEGORY_CREATED

    done = await handle_complete_onboarding(category["updated_token"], now=T0 + 4 * MINUTE)
    final = validate_session(done["updated_token"], now=T0 + 4 * MINUTE)
    assert final.step == OnboardingStep.COMPLETED
    assert final.application_identity == account["user_id"]
    assert final.issued_at == T0
    assert final.expires_at == T0 + TOKEN_LIFETIME_MS

    assert extract_token(done["return_message"]) == done["updated_token"][-8:]
    assert done["whatsapp_links"]["web"].startswith("https://wa.me/")

    user = fake_db["users"].where(id=account["user_id"])[0]
    assert user["phone"] == CHANNEL
    assert user["email"] == "ana@example.com"
    assert fake_db["groups"].where(tenant_id=user["tenant_id"])[0]["name"] == "Home"
    assert fake_db["group_members"].where(group_id=group["group_id"])[0]["role"] == "OWNER"
    assert len(fake_db["categories"].where(group_id=group["group_id"])) == 1
    assert len(fake_db["audit_logs"].where(user_id=account["user_id"])) == 4


@pytest.mark.asyncio
async def test_session_expires_mid_flow(fake_db, started_token):
    account = await create_account(started_token)

    with pytest.raises(InvalidSessionError):
        await handle_create_group(account["updated_token"], name="Home", now=T0 + 16 * MINUTE)

    assert fake_db["groups"].where() == []


@pytest.mark.asyncio
async def test_reused_token_creates_duplicate_group(fake_db, started_token):
    account = await create_account(started_token)
    token = account["updated_token"]

    first = await handle_create_group(token, name="Home", now=T0 + 2 * MINUTE)
    second = await handle_create_group(token, name="Home", now=T0 + 3 * MINUTE)

    assert first["group_id"] != second["group_id"]
    assert len(fake_db["groups"].where(name="Home")) == 2


@pytest.mark.asyncio
async def test_create_account_without_token_is_plain_signup(fake_db):
    result = await handle_create_account(name="Bia", email="BIA@example.com", phone=None)

    assert result["updated_token"] is None
    user = fake_db["users"].where(id=result["user_id"])[0]
    assert user["email"] == "bia@example.com"
    assert "phone" not in user


@pytest.mark.asyncio
async def test_create_account_prefers_form_phone(fake_db, started_token):
    result = await handle_create_account(
        name="Ana",
        email="ana@example.com",
        phone="+55 11 98888-7777",
        onboarding_token=started_token,
        now=T0,
    )

    assert fake_db["users"].where(id=result["user_id"])[0]["phone"] == "+5511988887777"


@pytest.mark.asyncio
async def test_create_account_rejects_advanced_token(fake_db, started_token):
    account = await create_account(started_token)

    with pytest.raises(PreconditionFailedError) as exc_info:
        await create_account(account["updated_token"], email="other@example.com")

    assert exc_info.value.details == {"required_step": "started", "current_step": "account_created"}


@pytest.mark.asyncio
async def test_create_account_rejects_invalid_token(fake_db, started_token):
    with pytest.raises(InvalidSessionError):
        await create_account(started_token, now=T0 + TOKEN_LIFETIME_MS + 1)

    assert fake_db["users"].where() == []


@pytest.mark.asyncio
async def test_create_account_duplicate_email(fake_db):
    await handle_create_account(name="Ana", email="ana@example.com")

    with pytest.raises(ConflictError):
        await handle_create_account(name="Ana 2", email="Ana@Example.com")


@pytest.mark.asyncio
async def test_create_account_duplicate_phone(fake_db, started_token):
    await handle_create_account(name="Ana", email="ana@example.com", phone="5500000000000")

    with pytest.raises(ConflictError):
        await create_account(started_token, email="new@example.com")


@pytest.mark.asyncio
async def test_create_account_requires_name(fake_db, started_token):
    with pytest.raises(ValidationError):
        await handle_create_account(name="  ", email="ana@example.com", onboarding_token=started_token, now=T0)


@pytest.mark.asyncio
async def test_create_group_requires_account_step(fake_db, started_token):
    with pytest.raises(PreconditionFailedError) as exc_info:
        await handle_create_group(started_token, name="Home", now=T0)

    assert exc_info.value.required_step == "account_created"
    assert exc_info.value.current_step == "started"


@pytest.mark.asyncio
async def test_create_group_rejects_unknown_type(fake_db, started_token):
    account = await create_account(started_token)

    with pytest.raises(ValidationError):
        await handle_create_group(account["updated_token"], name="Home", group_type="club", now=T0 + MINUTE)


@pytest.mark.asyncio
async def test_create_group_needs_existing_user(fake_db):
    # Bound identity with no matching account record
    claims = {
        "wa_user_id": CHANNEL,
        "user_id": "missing",
        "step": "account_created",
        "created_at": T0,
        "expires_at": T0 + TOKEN_LIFETIME_MS,
        "iat": T0 // 1000,
        "exp": (T0 + TOKEN_LIFETIME_MS) // 1000 + 1,
    }
    token = jwt.encode(claims, TEST_SECRET, algorithm="HS256")

    with pytest.raises(ResourceNotFoundError):
        await handle_create_group(token, name="Home", now=T0)


@pytest.mark.asyncio
async def test_create_category_skipping_group_step(fake_db, started_token):
    account = await create_account(started_token)

    with pytest.raises(PreconditionFailedError) as exc_info:
        await handle_create_category(account["updated_token"], name="Food", color="#FF6B6B", now=T0 + MINUTE)

    assert exc_info.value.required_step == "group_created"


@pytest.mark.asyncio
async def test_create_category_validates_color(fake_db, started_token):
    account = await create_account(started_token)
    group = await handle_create_group(account["updated_token"], name="Home", now=T0 + MINUTE)

    with pytest.raises(ValidationError):
        await handle_create_category(group["updated_token"], name="Food", color="red", now=T0 + MINUTE)


@pytest.mark.asyncio
async def test_create_category_rejects_foreign_group(fake_db, started_token):
    account = await create_account(started_token)
    group = await handle_create_group(account["updated_token"], name="Home", now=T0 + MINUTE)

    with pytest.raises(ResourceNotFoundError):
        await handle_create_category(
            group["updated_token"], name="Food", color="#00FF00", group_id="not-mine", now=T0 + MINUTE
        )


@pytest.mark.asyncio
async def test_complete_requires_category_step(fake_db, started_token):
    account = await create_account(started_token)
    group = await handle_create_group(account["updated_token"], name="Home", now=T0 + MINUTE)

    with pytest.raises(PreconditionFailedError) as exc_info:
        await handle_complete_onboarding(group["updated_token"], now=T0 + MINUTE)

    assert exc_info.value.details["required_step"] == "category_created"


@pytest.mark.asyncio
async def test_create_account_rejects_bound_started_token(fake_db, started_token):
    bound = advance_session(started_token, application_identity="u1", now=T0)

    with pytest.raises(PreconditionFailedError):
        await create_account(bound)

    assert fake_db["users"].where() == []
