"""
Post editor workflow for django-blog-platform.

    from blog_platform.editor import PostEditor, PostStatus
    from blog_platform.editor.http import http_collaborators

    editor = PostEditor(user_id="42", **http_collaborators("https://blog.example.com/api"))
    editor.load()
    editor.set_field("title", "Hello")
    editor.submit(PostStatus.PUBLISHED)

In-process collaborators for use inside Django live in
blog_platform.editor.local.
"""
from .draft import Draft, ImageChange, PostStatus, StagedImage, SubmitResult
from .editor import LoggingNotifier, PostEditor
from .ports import ImageUploader, Notifier, PostStore, TagDirectory

__all__ = [
    "Draft",
    "ImageChange",
    "PostStatus",
    "StagedImage",
    "SubmitResult",
    "LoggingNotifier",
    "PostEditor",
    "ImageUploader",
    "Notifier",
    "PostStore",
    "TagDirectory",
]
