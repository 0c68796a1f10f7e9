"""
Shared fixtures for django-blog-platform tests.
"""
import io

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from blog_platform.models import Post, Tag

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="other", password="pass")


@pytest.fixture
def tags(db):
    """Five tags, one more than a post may carry."""
    return [
        Tag.objects.create(name=name)
        for name in ["python", "django", "testing", "web", "databases"]
    ]


@pytest.fixture
def post(db, user, tags):
    """Create a published post with two tags."""
    post = Post.objects.create(
        title="Test Post",
        content="This is a test post body.",
        user=user,
        status=Post.Status.PUBLISHED,
        image="/media/blog/uploads/posts/cover.png",
    )
    post.set_tags(tags[:2])
    return post


def make_image_bytes(fmt="PNG", size=(100, 42)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_file():
    return SimpleUploadedFile("cover.png", make_image_bytes(), content_type="image/png")
