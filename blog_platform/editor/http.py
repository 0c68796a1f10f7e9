"""
HTTP clients for the platform's JSON API, built on requests.
"""
import logging

import requests

from ..conf import blog_settings
from ..exceptions import (
    BlogPlatformError,
    InvalidField,
    InvalidFileType,
    NetworkError,
    NoFileProvided,
    NotFound,
    Unauthorized,
    ValidationError,
)
from .ports import ImageUploader, PostStore, TagDirectory

logger = logging.getLogger(__name__)

UPLOAD_ERRORS = {
    NoFileProvided.default_message: NoFileProvided,
    InvalidField.default_message: InvalidField,
    InvalidFileType.default_message: InvalidFileType,
}

STATUS_ERRORS = {
    400: ValidationError,
    401: Unauthorized,
    403: Unauthorized,
    404: NotFound,
}


def error_for_response(response):
    """Map a non-2xx API response to the matching platform error."""
    try:
        message = response.json().get("error")
    except (ValueError, AttributeError):
        message = None

    if message in UPLOAD_ERRORS:
        return UPLOAD_ERRORS[message](message)

    error_class = STATUS_ERRORS.get(response.status_code)
    if error_class is not None:
        return error_class(message)
    if response.status_code >= 500:
        return NetworkError(message or f"Server error ({response.status_code})")
    return BlogPlatformError(message or f"Unexpected response ({response.status_code})")


class ApiClient:
    """
    Thin JSON client for the /api routes.

    Transport failures raise NetworkError; error responses raise the
    error class matching their status and message.
    """

    def __init__(self, base_url=None, session=None, timeout=10):
        self.base_url = (base_url or blog_settings.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, method, path, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = kwargs.pop("headers", {})
        csrf_token = self.session.cookies.get("csrftoken")
        if csrf_token:
            headers["X-CSRFToken"] = csrf_token

        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError(str(e), original_error=e) from e

        if not response.ok:
            raise error_for_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError("Invalid JSON response", original_error=e) from e


class HttpTagDirectory(TagDirectory):
    def __init__(self, client):
        self.client = client

    def list_tags(self):
        return self.client.request("GET", "tags")


class HttpImageUploader(ImageUploader):
    def __init__(self, client):
        self.client = client

    def upload(self, image, folder="posts"):
        if hasattr(image.file, "seek"):
            image.file.seek(0)
        data = self.client.request(
            "POST",
            "upload",
            files={"file": (image.name, image.file, image.content_type)},
            data={"field": folder},
        )
        image = data.get("image") if isinstance(data, dict) else None
        if not image or not isinstance(image, str):
            raise NetworkError("Invalid upload response")
        return image

    def discard(self, url):
        self.client.request("DELETE", "upload", json={"image": url})


class HttpPostStore(PostStore):
    def __init__(self, client):
        self.client = client

    def create(self, payload):
        return self.client.request("POST", "posts", json=payload)

    def update(self, slug, payload):
        return self.client.request("PATCH", f"posts/{slug}", json=payload)


def http_collaborators(base_url=None, session=None, timeout=10):
    """
    Build the editor's collaborators against a running platform.

    base_url defaults to the API_URL setting.
    """
    client = ApiClient(base_url, session=session, timeout=timeout)
    return {
        "tag_directory": HttpTagDirectory(client),
        "uploader": HttpImageUploader(client),
        "store": HttpPostStore(client),
    }
