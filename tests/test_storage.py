"""
Tests for utils/storage.py
"""
import io
import os

import pytest
from fastapi import UploadFile

from models.enums import ContentType
from utils import config
from utils.storage import classify_file, delete_media, save_upload


@pytest.mark.parametrize("filename,expected", [
    ("manual.PDF", ContentType.DOCUMENT),
    ("notes.md", ContentType.DOCUMENT),
    ("photo.JPeg", ContentType.IMAGE),
    ("clip.webm", ContentType.VIDEO),
    ("archive.zip", None),
    ("no_extension", None),
])
def test_classify_file(filename, expected):
    assert classify_file(filename) == expected


def test_save_and_delete(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    upload = UploadFile(file=io.BytesIO(b"hello"), filename="site map.png")

    url = save_upload(upload, "maps")
    assert url.startswith("/media/maps/")
    assert url.endswith("_site_map.png")
    stored = tmp_path / "maps" / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"hello"

    assert delete_media(url) is True
    assert not stored.exists()
    assert delete_media(url) is False


def test_delete_ignores_external_and_escaping_urls(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    outside = tmp_path / "secret.txt"
    outside.write_text("keep me")

    assert delete_media("https://example.com/guide.pdf") is False
    assert delete_media("/media/../secret.txt") is False
    assert os.path.exists(outside)
