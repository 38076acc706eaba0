"""Tests for SchwabTokenRefresher"""

import pytest

from schwabweb.shared.exceptions import SchwabTokenRefreshError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refresh_updates_token_and_header(client, api):
    await client.update_token("api")

    assert client.bearer_token == "Bearer fresh-token"
    assert client.headers["Authorization"] == "Bearer fresh-token"

    (request,) = api.requests_to("authorize/scope/api")
    assert request.method == "GET"
    assert str(request.url) == "https://client.schwab.com/api/auth/authorize/scope/api"
    # Sent with the token it is replacing
    assert request.headers["Authorization"] == "Bearer captured-token"
    assert request.headers["Cookie"] == "SESSION=abc; TOKEN=def"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refresh_non_200_raises_with_status(client, api):
    api.routes.clear()
    api.add("authorize/scope", status_code=401, text="expired")

    with pytest.raises(SchwabTokenRefreshError) as exc_info:
        await client.update_token("update")

    assert exc_info.value.status_code == 401
    assert client.bearer_token == "Bearer captured-token"
    assert client.headers["Authorization"] == "Bearer captured-token"


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{"nope": "x"}, {"token": ""}, {"token": 123}, ["token"]],
)
async def test_refresh_without_token_raises(client, api, body):
    api.routes.clear()
    api.add("authorize/scope", json=body)

    with pytest.raises(SchwabTokenRefreshError):
        await client.update_token("api")

    assert client.bearer_token == "Bearer captured-token"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refresh_with_non_json_body_raises(client, api):
    api.routes.clear()
    api.add("authorize/scope", text="<html>login</html>")

    with pytest.raises(SchwabTokenRefreshError):
        await client.update_token("api")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_try_refresh_swallows_failure(client, api):
    api.routes.clear()
    api.add("authorize/scope", status_code=500, text="boom")

    refreshed = await client.token_refresher.try_refresh("api")

    assert refreshed is False
    assert client.bearer_token == "Bearer captured-token"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_try_refresh_success(client):
    assert await client.token_refresher.try_refresh("update") is True
    assert client.bearer_token == "Bearer fresh-token"
