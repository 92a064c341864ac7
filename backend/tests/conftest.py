import os
import tempfile
from pathlib import Path

# Settings are read at import time, so the environment is fixed before any
# proposal_studio module is imported.
_DB_DIR = Path(tempfile.mkdtemp(prefix="proposal-studio-tests-"))
os.environ["MODE"] = "testing"
os.environ["ASYNC_DATABASE_URI"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["OPENAI_API_KEY"] = "fake-key"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from proposal_studio.api.deps import get_text_generator  # noqa: E402
from proposal_studio.db.database import engine  # noqa: E402
from proposal_studio.main import app  # noqa: E402
from proposal_studio.models import *  # noqa: E402, F401, F403
from proposal_studio.schemas.generation import DocumentForm  # noqa: E402
from proposal_studio.schemas.template import DocumentType  # noqa: E402

ACME_FORM = {
    "companyName": "Acme",
    "industry": "technology",
    "projectDescription": "Widget SaaS",
    "targetMarket": "SMBs",
    "budget": "$50k",
    "goals": "Grow 2x",
    "timeline": "6 months",
}


class FakeGenerator:
    """Stands in for the hosted model; records every call it receives."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def __call__(self, prompt: str, max_tokens: int) -> str:
        self.calls.append((prompt, max_tokens))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def acme_form() -> dict:
    return dict(ACME_FORM)


@pytest.fixture
def acme_request():
    return DocumentForm.model_validate(ACME_FORM).to_generation_request()


@pytest.fixture
def acme_deck_request():
    form = DocumentForm.model_validate(ACME_FORM).with_document_type(DocumentType.pitch_deck)
    return form.to_generation_request()


@pytest.fixture
def fake_generator():
    generator = FakeGenerator()
    app.dependency_overrides[get_text_generator] = lambda: generator
    yield generator
    app.dependency_overrides.pop(get_text_generator, None)


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_client(client):
    """A client backed by freshly created tables."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield client
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    # aiosqlite connections are bound to the test's event loop
    await engine.dispose()
