"""
Error taxonomy for django-blog-platform.

Every error carries the message shown to API clients and the HTTP status
the API layer answers with.
"""


class BlogPlatformError(Exception):
    """Base class for all blog platform errors."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogPlatformError):
    """Malformed input."""

    default_message = "Invalid data"

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class TagLimitError(ValidationError):
    default_message = "A post can have at most 4 tags"


class NotFound(BlogPlatformError):
    status_code = 404
    default_message = "Not found"


class Unauthorized(BlogPlatformError):
    status_code = 401
    default_message = "Unauthorized"


class UploadError(BlogPlatformError):
    """Base for rejected uploads."""

    default_message = "Upload failed"


class NoFileProvided(UploadError):
    default_message = "No file provided"


class InvalidField(UploadError):
    default_message = "Invalid field"


class InvalidFileType(UploadError):
    default_message = "Invalid file type"


class NetworkError(BlogPlatformError):
    """Transport failure while talking to a collaborator."""

    status_code = 502
    default_message = "Network error"

    def __init__(self, message=None, original_error=None):
        super().__init__(message)
        self.original_error = original_error
