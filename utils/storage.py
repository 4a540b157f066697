"""
Object storage for uploaded files.

Files are written under ``UPLOAD_DIR/<folder>/`` and served back by the
application under ``MEDIA_URL_PREFIX``.
"""
import os
import shutil
import uuid
import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from models.enums import ContentType
from utils import config

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Allowed file extensions per content type
EXTENSIONS = {
    ContentType.DOCUMENT: {'.pdf', '.txt', '.md', '.docx', '.doc', '.pptx', '.xlsx'},
    ContentType.IMAGE: {'.png', '.jpg', '.jpeg', '.gif', '.webp'},
    ContentType.VIDEO: {'.mp4', '.mov', '.webm', '.avi', '.mkv'},
}


def classify_file(filename: str) -> Optional[ContentType]:
    """Return the content type for a filename's extension, or None."""
    extension = os.path.splitext(filename)[1].lower()
    for content_type, extensions in EXTENSIONS.items():
        if extension in extensions:
            return content_type
    return None


def save_upload(file: UploadFile, folder: str) -> str:
    """
    Store an uploaded file and return the URL it is served from.

    Raises:
        HTTPException: If the file has no name
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    target_dir = os.path.join(config.UPLOAD_DIR, folder)
    os.makedirs(target_dir, exist_ok=True)

    # Generate safe filename with unique identifier
    original_name = os.path.basename(file.filename).replace(' ', '_')
    safe_filename = f"{uuid.uuid4().hex}_{original_name}"
    file_path = os.path.join(target_dir, safe_filename)

    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    logger.info(f"Stored upload {original_name} as {folder}/{safe_filename}")
    return f"{config.MEDIA_URL_PREFIX}/{folder}/{safe_filename}"


def delete_media(url: str) -> bool:
    """
    Remove a stored file given its media URL.

    External URLs are left alone. Returns True if a file was removed.
    """
    prefix = config.MEDIA_URL_PREFIX.rstrip("/") + "/"
    if not url or not url.startswith(prefix):
        return False

    relative = url[len(prefix):]
    upload_root = os.path.abspath(config.UPLOAD_DIR)
    file_path = os.path.abspath(os.path.join(upload_root, relative))
    # Never follow a URL outside the upload directory
    if os.path.commonpath([upload_root, file_path]) != upload_root:
        logger.warning(f"Refusing to delete media outside upload dir: {url}")
        return False

    try:
        os.remove(file_path)
    except FileNotFoundError:
        logger.warning(f"Media file already missing: {url}")
        return False
    logger.info(f"Deleted media {url}")
    return True
