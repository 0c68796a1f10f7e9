"""
Image upload storage for django-blog-platform.

Uploads are written to Django's default storage under
UPLOAD_PATH/<folder>/ with a random file name.
"""
import logging
import os
import uuid
from urllib.parse import urlparse

from django.core.files.storage import default_storage

from .conf import blog_settings
from .exceptions import InvalidField, InvalidFileType, NoFileProvided

logger = logging.getLogger(__name__)


def get_upload_path(folder, filename):
    """Generate the storage path for an uploaded file."""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{blog_settings.UPLOAD_PATH}{folder}/{uuid.uuid4().hex}{ext}"


def validate_folder(folder):
    folder = folder or blog_settings.DEFAULT_UPLOAD_FOLDER
    if not any(allowed in folder for allowed in blog_settings.UPLOAD_FOLDERS):
        raise InvalidField()
    return folder


def verify_image(file_obj):
    """Raise InvalidFileType unless Pillow can identify the bytes as an image."""
    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(file_obj) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidFileType() from e
    finally:
        file_obj.seek(0)


def save_file(file_obj, folder=None):
    """
    Validate and store an uploaded image.

    Args:
        file_obj: Django UploadedFile (or any File with content_type)
        folder: target folder category, e.g. "posts" or "tags"

    Returns:
        Public URL of the stored file
    """
    if not file_obj:
        raise NoFileProvided()

    folder = validate_folder(folder)

    content_type = getattr(file_obj, "content_type", "") or ""
    if not content_type.startswith("image/"):
        raise InvalidFileType()

    if blog_settings.VERIFY_IMAGE_CONTENT:
        verify_image(file_obj)

    path = default_storage.save(get_upload_path(folder, file_obj.name), file_obj)
    logger.info("Saved upload %s (%s, %s bytes)", path, content_type, file_obj.size)
    return default_storage.url(path)


def _storage_path(url):
    """Map a public upload URL back to its storage path."""
    path = urlparse(url).path
    media_url = urlparse(getattr(default_storage, "base_url", None) or "/").path
    if media_url and path.startswith(media_url):
        path = path[len(media_url):]
    path = path.lstrip("/")
    if not path.startswith(blog_settings.UPLOAD_PATH) or ".." in path.split("/"):
        raise InvalidField()
    return path


def delete_file(url):
    """
    Remove a previously uploaded file.

    Used to clean up uploads whose post was never saved. Returns True when
    a file was deleted.
    """
    if not url:
        raise NoFileProvided()

    path = _storage_path(url)
    if not default_storage.exists(path):
        return False

    default_storage.delete(path)
    logger.info("Deleted orphaned upload %s", path)
    return True
