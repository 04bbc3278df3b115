"""
i18nmate - Main entry point.

Run ``python -m i18nmate.main serve`` to start the API, or without
arguments for a quick demonstration against in-memory storage.
"""

from __future__ import annotations

import asyncio
import io
import logging
import sys
import zipfile

import uvicorn

from i18nmate.auth.jwt import create_access_token
from i18nmate.config import get_settings
from i18nmate.core.utils import generate_id
from i18nmate.export import TranslationExporter
from i18nmate.keys.views import KeysPerLanguageState
from i18nmate.storage import create_local_storage


async def demo():
    """
    Run a demonstration of i18nmate.

    Creates a project with two locales, fills in a translation through
    the inline editor and exports everything as a ZIP.
    """
    print("=" * 60)
    print("I18NMATE DEMO")
    print("=" * 60)
    print()

    storage = create_local_storage()
    user_id = generate_id()

    project = await storage.create_project(user_id, name="Demo App", prefix="app", default_locale="en")
    await storage.add_locale(project.id, user_id, "fr", label="French")
    await storage.create_key(project.id, user_id, "app.home.title", "Home")
    await storage.create_key(project.id, user_id, "app.home.subtitle", "Welcome back")
    print(f"Created project {project.name} with locales en, fr")

    # Translate one value the way the keys page does
    state = KeysPerLanguageState(storage, user_id, project.id, "fr", autosave_delay=0.05)
    page = await state.refresh()
    missing = [row.full_key for row in page.data if row.value is None]
    print(f"Missing in fr: {', '.join(missing)}")

    title = next(row for row in page.data if row.full_key == "app.home.title")
    state.editor.start_editing(title.key_id, title.value)
    state.editor.change_value("Accueil")
    await state.editor.wait_idle()
    await state.editor.blur()
    print("Saved fr value for app.home.title")
    print()

    token = create_access_token(user_id)
    result = await TranslationExporter(storage).export("GET", project.id, f"Bearer {token}")
    print(f"Export: {result.filename} ({len(result.content)} bytes)")
    with zipfile.ZipFile(io.BytesIO(result.content)) as archive:
        for name in archive.namelist():
            print(f"--- {name}")
            print(archive.read(name).decode("utf-8"))

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def serve():
    """Start the API server."""
    settings = get_settings()
    uvicorn.run(
        "i18nmate.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
    )


def main():
    """Main entry point."""
    logging.basicConfig(
        level=logging.DEBUG if get_settings().debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if len(sys.argv) > 1 and sys.argv[1] == "serve":
        serve()
    else:
        asyncio.run(demo())


if __name__ == "__main__":
    main()
