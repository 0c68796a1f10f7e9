"""
Signal handlers for django-blog-platform.
"""
from django.conf import settings
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Profile, Tag
from .services import invalidate_tag_cache


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile(sender, instance, created, **kwargs):
    """Give every new user a public profile."""
    if created:
        Profile.objects.get_or_create(user=instance)


@receiver(post_save, sender=Tag)
@receiver(post_delete, sender=Tag)
def tag_changed(sender, instance, **kwargs):
    invalidate_tag_cache()
