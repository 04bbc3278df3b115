"""
Shared fixtures: an in-memory store with one seeded project.

Project "Demo App" (prefix ``app``, default locale ``en``) with locales
en and fr:

    key                 en          fr
    app.home.subtitle   Welcome     (missing)
    app.home.title      Home        Accueil
"""

import asyncio
from dataclasses import dataclass

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from i18nmate.api.app import app
from i18nmate.auth import create_access_token, get_storage
from i18nmate.core.models import Project, UpdateSource, UpdateTranslationRequest
from i18nmate.core.utils import generate_id
from i18nmate.storage import InMemoryTranslationStorage


@dataclass
class Seeded:
    storage: InMemoryTranslationStorage
    user_id: str
    project: Project
    title_key_id: str
    subtitle_key_id: str


async def seed_project(storage: InMemoryTranslationStorage, user_id: str) -> Seeded:
    project = await storage.create_project(user_id, name="Demo App", prefix="app", default_locale="en")
    await storage.add_locale(project.id, user_id, "fr", label="French")
    title = await storage.create_key(project.id, user_id, "app.home.title", "Home")
    subtitle = await storage.create_key(project.id, user_id, "app.home.subtitle", "Welcome")
    await storage.update_translation(
        UpdateTranslationRequest(
            project_id=project.id,
            key_id=title.id,
            locale="fr",
            value="Accueil",
            updated_source=UpdateSource.USER,
            updated_by_user_id=user_id,
        ),
        user_id,
    )
    return Seeded(storage, user_id, project, title.id, subtitle.id)


@pytest.fixture
def storage():
    return InMemoryTranslationStorage()


@pytest.fixture
def user_id():
    return generate_id()


@pytest.fixture
def seeded(storage, user_id):
    """The demo project, for synchronous (API client) tests."""
    return asyncio.run(seed_project(storage, user_id))


@pytest_asyncio.fixture
async def seeded_async(storage, user_id):
    """The demo project, for async tests."""
    return await seed_project(storage, user_id)


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def client(storage):
    """API client bound to the fixture storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
