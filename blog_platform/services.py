"""
Post persistence, tag directory and profile services.

These functions back both the JSON API and the in-process editor clients.
They raise errors from blog_platform.exceptions, never HTTP responses.
"""
import logging

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import transaction

from .conf import blog_settings
from .exceptions import NotFound, Unauthorized, ValidationError
from .forms import PostPayloadForm, ProfileForm
from .models import Post, Profile, Tag

logger = logging.getLogger(__name__)

TAG_CACHE_KEY = "blog_platform:tags"


# Serialization

def serialize_tag(tag):
    return {
        "id": tag.pk,
        "slug": tag.slug,
        "name": tag.name,
        "description": tag.description,
        "image": tag.image,
    }


def serialize_user(user):
    profile = get_profile(user)
    return {
        "id": profile.external_id,
        "username": user.get_username(),
        "bio": profile.bio,
        "brandColor": profile.brand_color,
        "image": profile.image,
        "createdAt": profile.created_at.isoformat(),
    }


def serialize_post(post, include_content=True):
    data = {
        "id": post.pk,
        "slug": post.slug,
        "title": post.title,
        "description": post.description,
        "image": post.image,
        "status": post.status,
        "postedOn": post.posted_on.isoformat() if post.posted_on else None,
        "createdAt": post.created_at.isoformat(),
        "updatedAt": post.updated_at.isoformat(),
        "tags": [serialize_tag(tag) for tag in post.tag_list],
        "user": serialize_user(post.user),
    }
    if include_content:
        data["content"] = post.content
    return data


# Profiles

def get_profile(user):
    profile, _ = Profile.objects.get_or_create(user=user)
    return profile


def get_user_by_username(username):
    User = get_user_model()
    try:
        return User.objects.get(**{User.USERNAME_FIELD: username})
    except User.DoesNotExist:
        raise NotFound("User not found")


def get_user_profile(external_id):
    try:
        return Profile.objects.select_related("user").get(external_id=external_id)
    except Profile.DoesNotExist:
        raise NotFound("User not found")


def update_profile(user, external_id, data):
    """
    Update bio and brand color of the caller's own profile.

    Empty values keep the current ones.
    """
    if not user or not user.is_authenticated:
        raise Unauthorized()

    profile = get_user_profile(external_id)
    if profile.user_id != user.pk:
        raise Unauthorized()

    form = ProfileForm(data)
    if not form.is_valid():
        raise ValidationError("Invalid profile data", errors=form.errors.get_json_data())

    profile.bio = form.cleaned_data["bio"] or profile.bio
    profile.brand_color = form.cleaned_data["brand_color"] or profile.brand_color
    profile.save(update_fields=["bio", "brand_color"])
    return profile


# Tags

def invalidate_tag_cache():
    cache.delete(TAG_CACHE_KEY)


def list_tags():
    """
    Return the tag directory as serialized records.

    Cached for TAG_CACHE_TIMEOUT seconds and invalidated whenever a tag
    is saved or deleted.
    """
    tags = cache.get(TAG_CACHE_KEY)
    if tags is None:
        tags = [serialize_tag(tag) for tag in Tag.objects.all()]
        cache.set(TAG_CACHE_KEY, tags, blog_settings.TAG_CACHE_TIMEOUT)
    return tags


def get_tag(slug):
    try:
        return Tag.objects.get(slug=slug)
    except Tag.DoesNotExist:
        raise NotFound("Tag not found")


def resolve_tags(slugs):
    """
    Map tag slugs to Tag objects, keeping order.

    Repeats are dropped and the list is truncated to MAX_POST_TAGS.
    """
    if not isinstance(slugs, (list, tuple)) or not all(isinstance(s, str) for s in slugs):
        raise ValidationError("Tags must be a list of slugs")

    unique = list(dict.fromkeys(slugs))[:blog_settings.MAX_POST_TAGS]
    found = Tag.objects.in_bulk(unique, field_name="slug")
    missing = [slug for slug in unique if slug not in found]
    if missing:
        raise NotFound(f"Tag not found: {', '.join(missing)}")
    return [found[slug] for slug in unique]


# Posts

def list_posts(status=Post.Status.PUBLISHED, user=None, tag=None):
    qs = Post.objects.select_related("user").prefetch_related("post_tags__tag")
    if status:
        qs = qs.filter(status=status)
    if user is not None:
        qs = qs.filter(user=user)
    if tag is not None:
        qs = qs.filter(tags=tag)
    return qs


def get_post(slug, viewer=None):
    """Return the post, hiding drafts from everyone but their author."""
    try:
        post = Post.objects.select_related("user").get(slug=slug)
    except Post.DoesNotExist:
        raise NotFound("Post not found")

    if not post.can_view(viewer):
        raise NotFound("Post not found")
    return post


def _check_caller(user, payload):
    if not user or not user.is_authenticated:
        raise Unauthorized()

    user_id = payload.get("userId")
    if user_id not in (None, "") and str(user_id) != get_profile(user).external_id:
        raise Unauthorized()


def _clean_payload(payload):
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be an object")

    form = PostPayloadForm(payload)
    if not form.is_valid():
        raise ValidationError("Invalid post data", errors=form.errors.get_json_data())

    data = dict(form.cleaned_data)
    if not data["title"] and not data["content"]:
        raise ValidationError("Title or content is required")

    image = payload.get("image", "")
    if image is not None and not isinstance(image, str):
        raise ValidationError("Image must be a URL, an empty string or null")
    data["image"] = image
    return data


def _apply_image(post, image):
    # "" keeps the current image, None clears it, anything else replaces it
    if image == "":
        return
    post.image = image or ""


def create_post(user, payload):
    """
    Create a post owned by the caller from an editor payload.

    Payload keys: title, content, tags (slugs), image, status,
    description, userId.
    """
    _check_caller(user, payload)
    data = _clean_payload(payload)
    tags = resolve_tags(payload.get("tags") or [])

    with transaction.atomic():
        post = Post(
            user=user,
            title=data["title"],
            content=data["content"],
            description=data["description"] or None,
            status=data["status"],
        )
        _apply_image(post, data["image"])
        post.save()
        post.set_tags(tags)

    logger.info("Post %s created by %s (%s)", post.slug, user.get_username(), post.status)
    return post


def update_post(user, slug, payload):
    """
    Update an existing post owned by the caller.

    The slug never changes. Tags are replaced only when the payload
    carries a tags key.
    """
    _check_caller(user, payload)

    try:
        post = Post.objects.select_related("user").get(slug=slug)
    except Post.DoesNotExist:
        raise NotFound("Post not found")
    if post.user_id != user.pk:
        raise Unauthorized()

    data = _clean_payload(payload)
    tags = resolve_tags(payload["tags"]) if "tags" in payload else None

    with transaction.atomic():
        post.title = data["title"]
        post.content = data["content"]
        post.description = data["description"] or None
        post.status = data["status"]
        _apply_image(post, data["image"])
        post.save()
        if tags is not None:
            post.set_tags(tags)

    logger.info("Post %s updated by %s (%s)", post.slug, user.get_username(), post.status)
    return post
