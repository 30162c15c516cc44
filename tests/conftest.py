"""
Pytest configuration and fixtures for PDF Catalogue Backend tests.
"""

import os
import tempfile
import pytest
from fastapi.testclient import TestClient

ADMIN_TOKEN = "test-admin-secret-12345"
INDEX_HTML = "<!DOCTYPE html><html><body><div id=\"catalogue\"></div></body></html>"

# Set test environment variables before importing the app
os.environ["ADMIN_SECRET_TOKEN"] = ADMIN_TOKEN
os.environ["DATABASE_PATH"] = os.path.join(tempfile.mkdtemp(prefix="catalogue_test_db_"), "catalogue.db")
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="catalogue_test_static_")

from pdf_catalogue_backend.configuration import load_settings  # noqa: E402
from pdf_catalogue_backend.database import PdfDatabase  # noqa: E402
from pdf_catalogue_backend.image_generator import InlineImage  # noqa: E402
from pdf_catalogue_backend.main import create_app  # noqa: E402
from pdf_catalogue_backend.media_host import MediaHostError  # noqa: E402


class FakeMediaHost:
    """Records uploads instead of talking to a bucket."""

    cover_folder = "pdf_covers"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.pdf_uploads = []
        self.data_url_uploads = []

    def upload_pdf(self, fileobj, filename):
        if self.fail:
            raise MediaHostError("bucket unavailable")
        self.pdf_uploads.append((filename, fileobj.read()))
        return f"https://media.test/pdfs/{filename}"

    def upload_data_url(self, data_url, folder):
        if self.fail:
            raise MediaHostError("bucket unavailable")
        self.data_url_uploads.append((data_url, folder))
        return f"https://media.test/{folder}/cover.png"


class FakeImageGenerator:
    def __init__(self, image: InlineImage = None):
        self.image = image or InlineImage(mime_type="image/png", data="aGVsbG8=")
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        return self.image


@pytest.fixture
def static_dir(tmp_path):
    """Front-end directory with an index page and one asset."""
    root = tmp_path / "public"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "assets" / "app.js").write_text("console.log('catalogue');", encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path, static_dir):
    return load_settings({
        "auth": {"admin_token": ADMIN_TOKEN},
        "database": {"path": str(tmp_path / "catalogue.db")},
        "media": {"bucket": "test-bucket", "region": "eu-west-3"},
        "generator": {"api_key": "test-gemini-key"},
        "static": {"directory": str(static_dir)},
    })


@pytest.fixture
def database(settings):
    return PdfDatabase(settings.database.path)


@pytest.fixture
def media_host():
    return FakeMediaHost()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def app(settings, database, media_host, image_generator):
    return create_app(settings, database=database, media_host=media_host, image_generator=image_generator)


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Headers carrying the admin credential."""
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def sample_entry():
    return {"title": "T", "category": "C", "image_url": "http://x/y.png"}


@pytest.fixture
def sample_pdf() -> bytes:
    """Minimal PDF payload for upload tests."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
trailer
<< /Root 1 0 R >>
%%EOF"""
