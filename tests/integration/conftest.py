import pytest
from httpx import ASGITransport, AsyncClient

from chainconn.api.deps import get_context
from chainconn.api.main import app


@pytest.fixture()
async def client(context):
    app.dependency_overrides[get_context] = lambda: context
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
