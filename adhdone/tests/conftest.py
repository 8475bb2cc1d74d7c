import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adhdone.main import app
from adhdone.mcp.server import MCPServer
from adhdone.mcp.sessions import SessionManager


@pytest.fixture
def mcp_server():
    """Create MCP server instance."""
    return MCPServer(strict=True)


@pytest.fixture
def sessions():
    """Give the app a fresh session manager for the duration of a test."""
    original = app.state.session_manager
    manager = SessionManager(keepalive_seconds=30)
    app.state.session_manager = manager
    yield manager
    manager.close_all()
    app.state.session_manager = original


@pytest_asyncio.fixture
async def async_client(sessions):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
