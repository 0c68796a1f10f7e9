"""
Configuration settings for django-blog-platform.

Override these in your Django settings.py:

    BLOG_PLATFORM = {
        'MAX_POST_TAGS': 4,
        'UPLOAD_FOLDERS': ['posts', 'tags'],
        'TAG_CACHE_TIMEOUT': 300,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Posts
    "MAX_POST_TAGS": 4,
    "POSTS_PER_PAGE": 10,
    "SLUG_MAX_LENGTH": 100,

    # Uploads
    "UPLOAD_FOLDERS": ["posts", "tags"],
    "DEFAULT_UPLOAD_FOLDER": "posts",
    "UPLOAD_PATH": "blog/uploads/",
    "VERIFY_IMAGE_CONTENT": True,

    # Advisory only, shown to authors next to the cover image input
    "IMAGE_MAX_SIZE_MB": 5,
    "IMAGE_ASPECT_RATIO": (1000, 420),

    # Caching (seconds)
    "TAG_CACHE_TIMEOUT": 300,
    "PAGE_CACHE_TIMEOUT": 300,

    # Editor
    "REDIRECT_DELAY": 1.0,
    "API_URL": "/api",

    # Profiles
    "DEFAULT_BRAND_COLOR": "#000000",
}


class BlogPlatformSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_platform.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_platform setting: {name}")

        user_settings = getattr(settings, "BLOG_PLATFORM", {})
        return user_settings.get(name, DEFAULTS[name])


blog_settings = BlogPlatformSettings()
