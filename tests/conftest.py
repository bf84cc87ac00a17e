"""
Shared fixtures: every test runs against a throwaway database and content
root, with the cache emptied between tests.
"""
import os
import shutil
import tempfile

_TMP_ROOT = tempfile.mkdtemp(prefix="patternhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_ROOT, 'patternhub.db')}"
os.environ["CONTENT_ROOT"] = os.path.join(_TMP_ROOT, "content")
os.environ["LOG_FILE_PATH"] = os.path.join(_TMP_ROOT, "logs", "test.log")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from patternhub.core.logging_config import configure_logging  # noqa: E402
from patternhub.core.config import settings  # noqa: E402
from patternhub.db.database import get_connection, init_db  # noqa: E402
from patternhub.db.seeder import ADMIN_PASSWORD, ADMIN_USERNAME, seed_admin  # noqa: E402
from patternhub.repositories.category_repository import CategoryRepository  # noqa: E402
from patternhub.repositories.content_repository import ContentRepository  # noqa: E402
from patternhub.repositories.pattern_repository import PatternRepository  # noqa: E402

configure_logging()


@pytest.fixture(autouse=True)
def clean_state():
    init_db()
    conn = get_connection()
    try:
        for table in ("cache_tags", "cache_entries", "design_patterns", "pattern_categories", "users"):
            conn.execute(f"DELETE FROM {table}")
        conn.commit()
    finally:
        conn.close()
    shutil.rmtree(settings.CONTENT_ROOT, ignore_errors=True)
    yield


@pytest.fixture
def conn():
    connection = get_connection()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def content_repo():
    return ContentRepository()


@pytest.fixture
def make_category():
    """Insert a committed category row."""

    def _make(slug="creational-patterns", name=None, sort_order=0, description=None):
        connection = get_connection()
        try:
            category = CategoryRepository(connection).create(
                slug=slug,
                name=name or {"zh": "创建型模式", "en": "Creational Patterns"},
                description=description,
                sort_order=sort_order,
            )
            connection.commit()
            return category
        finally:
            connection.close()

    return _make


@pytest.fixture
def make_pattern(content_repo):
    """Insert a committed pattern row, optionally with Markdown bodies."""

    def _make(category, slug="singleton", name=None, is_published=True, sort_order=0, content=None):
        connection = get_connection()
        try:
            repo = PatternRepository(connection)
            pattern = repo.create(
                category_id=category.id,
                slug=slug,
                name=name or {"zh": "单例模式", "en": "Singleton"},
                is_published=is_published,
                sort_order=sort_order,
            )
            if content:
                paths = {
                    locale: content_repo.save_content(pattern, body, locale)
                    for locale, body in content.items()
                }
                pattern = repo.update(pattern.id, content_paths=paths)
            connection.commit()
            return pattern
        finally:
            connection.close()

    return _make


@pytest.fixture
def client():
    from patternhub.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    seed_admin()
    response = client.post(
        "/admin/auth/login",
        data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
