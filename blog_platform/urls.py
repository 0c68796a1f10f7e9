"""
URL configuration for django-blog-platform.

Include at the root of your project urls.py:

    path('', include('blog_platform.urls')),

Author and post pages live at /<username> and /<username>/<slug>, so this
should be the last include.
"""
from django.urls import path
from django.views.decorators.cache import cache_page

from . import api, views
from .conf import blog_settings

app_name = "blog_platform"

urlpatterns = [
    # JSON API
    path("api/tags", api.TagListApiView.as_view(), name="api_tags"),
    path("api/tags/<slug:slug>", api.TagDetailApiView.as_view(), name="api_tag_detail"),
    path("api/posts", api.PostListApiView.as_view(), name="api_posts"),
    path("api/posts/<slug:slug>", api.PostDetailApiView.as_view(), name="api_post_detail"),
    path("api/upload", api.UploadApiView.as_view(), name="api_upload"),
    path("api/users/<str:external_id>", api.UserApiView.as_view(), name="api_user_detail"),

    # Pages
    path(
        "",
        cache_page(blog_settings.PAGE_CACHE_TIMEOUT)(views.PostListView.as_view()),
        name="post_list",
    ),
    path("new", views.PostEditorView.as_view(), name="post_create"),
    path("settings", views.SettingsView.as_view(), name="settings"),
    path("tags/<slug:slug>", views.TagPostListView.as_view(), name="tag_detail"),
    path("<str:username>", views.UserDetailView.as_view(), name="user_detail"),
    path("<str:username>/<slug:slug>", views.PostDetailView.as_view(), name="post_detail"),
    path(
        "<str:username>/<slug:slug>/edit",
        views.PostEditorView.as_view(),
        name="post_update",
    ),
]
