"""
User profile model for django-blog-platform.
"""
from django.conf import settings
from django.db import models
from django.urls import reverse

from ..conf import blog_settings


def default_brand_color():
    return blog_settings.DEFAULT_BRAND_COLOR


class Profile(models.Model):
    """
    Public profile attached to an authenticated user.

    Sign-in is handled by the identity provider (django.contrib.auth);
    external_id is the provider's identifier for the user.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_profile",
    )
    external_id = models.CharField(max_length=255, unique=True)
    bio = models.TextField(blank=True)
    brand_color = models.CharField(max_length=7, default=default_brand_color)
    image = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["user__username"]

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        if not self.external_id:
            self.external_id = str(self.user_id)
        super().save(*args, **kwargs)

    @property
    def username(self):
        return self.user.get_username()

    def get_absolute_url(self):
        return reverse("blog_platform:user_detail", kwargs={"username": self.username})
