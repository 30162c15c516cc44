"""
Tests for the SQLite catalogue store.
"""

import sqlite3

import pytest

from pdf_catalogue_backend.database import PdfDatabase


@pytest.fixture
def db(tmp_path):
    return PdfDatabase(tmp_path / "nested" / "catalogue.db")


def _entry(title, **links):
    return {"title": title, "category": "Guides", "image_url": f"https://img.test/{title}.png", **links}


def test_creates_parent_directory_and_schema(tmp_path):
    path = tmp_path / "a" / "b" / "catalogue.db"
    PdfDatabase(path)
    assert path.exists()

    with sqlite3.connect(path) as conn:
        columns = [row[1] for row in conn.execute("PRAGMA table_info(pdfs)")]
    assert columns == [
        "id", "title", "category", "drive_link", "maketou_link", "youtube_link",
        "tiktok_link", "facebook_link", "image_url", "published_at",
    ]


def test_reopening_keeps_entries(tmp_path):
    path = tmp_path / "catalogue.db"
    PdfDatabase(path).create_entry(_entry("first"))
    assert [e["title"] for e in PdfDatabase(path).list_entries()] == ["first"]


def test_create_assigns_id_and_timestamp(db):
    first = db.create_entry(_entry("one"))
    second = db.create_entry(_entry("two"))

    assert isinstance(first["id"], int)
    assert second["id"] > first["id"]
    assert second["published_at"] >= first["published_at"]
    assert first["published_at"].tzinfo is not None


def test_create_ignores_caller_identity_fields(db):
    entry = db.create_entry({**_entry("one"), "id": 77, "published_at": "1999-01-01T00:00:00+00:00"})
    assert entry["id"] != 77
    assert entry["published_at"].year != 1999


def test_missing_and_blank_links_are_null(db):
    entry = db.create_entry(_entry("one", drive_link="", facebook_link="https://fb.test/p"))
    assert entry["drive_link"] is None
    assert entry["maketou_link"] is None
    assert entry["facebook_link"] == "https://fb.test/p"


def test_list_is_newest_first(db):
    for title in ("A", "B", "C"):
        db.create_entry(_entry(title))
    assert [e["title"] for e in db.list_entries()] == ["C", "B", "A"]


def test_same_timestamp_falls_back_to_id_order(db):
    for title in ("A", "B", "C"):
        db.create_entry(_entry(title))
    with sqlite3.connect(db.db_path) as conn:
        conn.execute("UPDATE pdfs SET published_at = '2026-01-01T00:00:00.000000+00:00'")

    assert [e["title"] for e in db.list_entries()] == ["C", "B", "A"]


def test_missing_required_column_raises_store_error(db):
    with pytest.raises(sqlite3.IntegrityError, match="NOT NULL constraint failed: pdfs.title"):
        db.create_entry({"category": "C", "image_url": "https://img.test/x.png"})
    assert db.list_entries() == []


def test_delete(db):
    entry = db.create_entry(_entry("gone"))
    assert db.delete_entry(entry["id"]) is True
    assert db.list_entries() == []


def test_delete_absent_id(db):
    assert db.delete_entry(12345) is False
