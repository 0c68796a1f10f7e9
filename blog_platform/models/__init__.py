"""
Models for django-blog-platform.

All models are importable from blog_platform.models:

    from blog_platform.models import Post, Tag, PostTag, Profile
"""
from .posts import Tag, Post, PostTag
from .profiles import Profile

__all__ = [
    # Posts
    "Tag",
    "Post",
    "PostTag",
    # Profiles
    "Profile",
]
