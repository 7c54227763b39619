import pytest

from skforms.core.config import settings


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
