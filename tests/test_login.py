import hashlib
import orjson
import pytest
from bookbridge.auth.models import SignIn, SignupIn
from bookbridge.common.custom_exceptions import InvalidCredentials
from bookbridge.storage.constants import ACCOUNTS_KEY


@pytest.mark.asyncio
async def test_login_issues_fresh_tokens(app):
    registered = await app.identity.register(SignupIn(name="Asha", email="asha@x.com", username="asha",
                                                      password="s3cret-pass"))

    result = await app.identity.login(SignIn(username="asha", password="s3cret-pass"))

    assert result.user.id == registered.user.id
    assert result.token != registered.token
    assert await app.identity.is_session_valid(result.token)


@pytest.mark.asyncio
async def test_unknown_user_and_wrong_password_look_the_same(app):
    await app.identity.register(SignupIn(name="Asha", email="asha@x.com", username="asha",
                                         password="s3cret-pass"))

    with pytest.raises(InvalidCredentials) as unknown:
        await app.identity.login(SignIn(username="nobody", password="s3cret-pass"))
    with pytest.raises(InvalidCredentials) as wrong:
        await app.identity.login(SignIn(username="asha", password="wrong"))

    assert unknown.value.message == wrong.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_legacy_digest_is_upgraded_on_login(app, store):
    store.data[ACCOUNTS_KEY] = orjson.dumps([{
        "id": "acc1", "name": "Old", "email": "old@x.com", "username": "old",
        "password": hashlib.sha256(b"legacy-pass").hexdigest(),
        "createdAt": "2024-01-01T00:00:00Z", "updatedAt": "2024-01-01T00:00:00Z",
    }]).decode()

    with pytest.raises(InvalidCredentials):
        await app.identity.login(SignIn(username="old", password="nope"))

    result = await app.identity.login(SignIn(username="old", password="legacy-pass"))
    assert result.user.id == "acc1"

    row = orjson.loads(store.data[ACCOUNTS_KEY])[0]
    assert row["passwordHash"].startswith("$pbkdf2-sha256$")

    # still works against the upgraded hash
    await app.identity.login(SignIn(username="old", password="legacy-pass"))
