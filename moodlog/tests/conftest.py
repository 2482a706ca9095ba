import os
import sys
import tempfile
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Config classes read the environment at import time, so point the testing
# database at a throwaway file before importing the app.
_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="moodlog-tests-"))
os.environ.setdefault("TEST_DATABASE_URL", f"sqlite:///{_TEST_DB_DIR / 'test.db'}")

from moodlog import create_app  # noqa: E402
from moodlog.core.auth.auth_service import issue_token  # noqa: E402
from moodlog.core.users.services import get_or_create_user  # noqa: E402
from moodlog.domains.journal.schemas.journal_schemas import AnnotationResult  # noqa: E402
from moodlog.extensions import db  # noqa: E402


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


def _alembic_config() -> AlembicConfig:
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(ROOT / "moodlog" / "migrations"))
    cfg.set_main_option("moodlog_env", "testing")
    cfg.set_main_option("sqlalchemy.url", os.environ["TEST_DATABASE_URL"])
    return cfg


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    """Apply migrations once per session to mirror production schema."""
    cfg = _alembic_config()
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


# ==================== Fake annotation model ====================


def build_annotation(**overrides) -> AnnotationResult:
    data = {
        "mood": "happy",
        "subject": "beach",
        "summary": "A relaxing day at the beach.",
        "color": "#22c55e",
        "negative": False,
        "sentiment_score": 7,
    }
    data.update(overrides)
    return AnnotationResult(**data)


class FakeAnnotationClient:
    """Stands in for the Gemini client; records calls and returns canned output."""

    def __init__(self):
        self.result = build_annotation()
        self.error = None
        self.answer = "You mostly wrote about the beach."
        self.calls = []
        self.questions = []

    def annotate(self, content):
        self.calls.append(content)
        if self.error is not None:
            raise self.error
        return self.result

    def answer_question(self, question, contents):
        self.questions.append((question, list(contents)))
        if self.error is not None:
            raise self.error
        return self.answer


# ==================== App / DB fixtures ====================


@pytest.fixture()
def app(migrated_db):
    """Per-test app; every table is emptied afterwards."""
    app = create_app("testing")
    app.extensions["annotation_client"] = FakeAnnotationClient()
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.remove()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_annotation():
    """Factory for validated annotations with per-test overrides."""
    return build_annotation


@pytest.fixture()
def annotator(app) -> FakeAnnotationClient:
    return app.extensions["annotation_client"]


@pytest.fixture()
def user(app):
    return get_or_create_user("idp|journal-tester", "tester@example.com")


@pytest.fixture()
def other_user(app):
    return get_or_create_user("idp|someone-else", "other@example.com")


@pytest.fixture()
def auth_headers(app, user):
    token = issue_token(user.external_id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_headers(app, other_user):
    token = issue_token(other_user.external_id, other_user.email)
    return {"Authorization": f"Bearer {token}"}
