"""
Draft state held by the post editor.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PostStatus(str, Enum):
    DRAFTED = "DRAFTED"
    PUBLISHED = "PUBLISHED"


@dataclass(frozen=True)
class ImageChange:
    """
    What a submission does to the post's image.

    On the wire: "" keeps the current image, null clears it, a URL sets it.
    """

    kind: str
    url: Optional[str] = None

    UNCHANGED = "unchanged"
    CLEARED = "cleared"
    SET = "set"

    @classmethod
    def unchanged(cls):
        return cls(cls.UNCHANGED)

    @classmethod
    def cleared(cls):
        return cls(cls.CLEARED)

    @classmethod
    def set_to(cls, url):
        return cls(cls.SET, url)

    def to_wire(self):
        if self.kind == self.SET:
            return self.url
        if self.kind == self.CLEARED:
            return None
        return ""


@dataclass
class StagedImage:
    """A locally selected image that has not been uploaded yet."""

    file: Any
    name: str
    content_type: str

    @property
    def size(self):
        return getattr(self.file, "size", None)

    def close(self):
        close = getattr(self.file, "close", None)
        if close is not None:
            close()


class LocalPreview:
    """
    Session-local reference to a staged image, used for the preview pane.

    Must be released when the staged image is replaced or the session ends.
    """

    def __init__(self, image):
        self.url = f"local:{uuid.uuid4().hex}"
        self.image = image
        self.released = False

    def release(self):
        if self.released:
            return
        self.released = True
        self.image = None


@dataclass
class Draft:
    title: str = ""
    description: Optional[str] = None
    content: str = ""
    image: Optional[StagedImage] = None
    tags: list = field(default_factory=list)

    @property
    def is_empty(self):
        return self.title == "" and self.content == ""


@dataclass(frozen=True)
class SubmitResult:
    post: dict
    redirect_url: str
