"""
Post and Tag models for django-blog-platform.
"""
from django.conf import settings
from django.db import models
from django.urls import reverse
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.utils.text import slugify

from ..conf import blog_settings
from ..exceptions import TagLimitError


class Tag(models.Model):
    """
    Flat tag for posts.

    A post carries at most MAX_POST_TAGS tags, the first one being its
    primary tag.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    image = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:blog_settings.SLUG_MAX_LENGTH]
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("blog_platform:tag_detail", kwargs={"slug": self.slug})

    @property
    def post_count(self):
        """Return count of published posts with this tag."""
        return self.posts.filter(status=Post.Status.PUBLISHED).count()


class Post(models.Model):
    """
    Blog post.

    The slug is generated once from the title and never changes afterwards,
    so the canonical URL /<username>/<slug>/ stays stable across edits.
    """

    class Status(models.TextChoices):
        DRAFTED = "DRAFTED", "Drafted"
        PUBLISHED = "PUBLISHED", "Published"

    slug = models.SlugField(max_length=255, unique=True)
    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True, null=True)
    content = models.TextField(blank=True, help_text="Markdown source")
    image = models.URLField(max_length=500, blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_posts",
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.DRAFTED,
        db_index=True,
    )
    posted_on = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When post was first published",
    )

    tags = models.ManyToManyField(
        Tag,
        through="PostTag",
        related_name="posts",
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-posted_on", "-created_at"]
        indexes = [
            models.Index(fields=["status", "-posted_on"]),
            models.Index(fields=["user", "-created_at"]),
        ]

    def __str__(self):
        if self.title:
            return self.title
        return f"{self.content[:50]}..." if len(self.content) > 50 else self.content

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._generate_slug()

        # Stamp the first publication only
        if self.status == self.Status.PUBLISHED and not self.posted_on:
            self.posted_on = timezone.now()

        super().save(*args, **kwargs)

    def _generate_slug(self):
        base_slug = slugify(self.title)[:blog_settings.SLUG_MAX_LENGTH]
        if not base_slug:
            base_slug = get_random_string(8).lower()
        slug = base_slug
        counter = 1
        while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def get_absolute_url(self):
        return reverse(
            "blog_platform:post_detail",
            kwargs={"username": self.user.get_username(), "slug": self.slug},
        )

    @property
    def is_published(self):
        return self.status == self.Status.PUBLISHED

    @property
    def tag_list(self):
        """Return attached tags in attachment order."""
        return [
            post_tag.tag
            for post_tag in self.post_tags.select_related("tag").order_by("order")
        ]

    @property
    def primary_tag(self):
        tags = self.tag_list
        return tags[0] if tags else None

    @property
    def preview(self):
        """Return description or truncated content for cards."""
        if self.description:
            return self.description
        if len(self.content) > 280:
            return self.content[:280] + "..."
        return self.content

    def set_tags(self, tags):
        """
        Replace the attached tags, keeping the given order.

        Raises TagLimitError when more than MAX_POST_TAGS distinct tags are given.
        """
        unique = []
        seen = set()
        for tag in tags:
            if tag.pk not in seen:
                seen.add(tag.pk)
                unique.append(tag)

        if len(unique) > blog_settings.MAX_POST_TAGS:
            raise TagLimitError(
                f"A post can have at most {blog_settings.MAX_POST_TAGS} tags"
            )

        self.post_tags.all().delete()
        PostTag.objects.bulk_create(
            PostTag(post=self, tag=tag, order=order)
            for order, tag in enumerate(unique)
        )

    def can_view(self, user):
        """Drafts are only visible to their author."""
        if self.is_published:
            return True
        return bool(user and user.is_authenticated and user.pk == self.user_id)

    def publish(self):
        """Publish the post immediately."""
        self.status = self.Status.PUBLISHED
        if not self.posted_on:
            self.posted_on = timezone.now()
        self.save(update_fields=["status", "posted_on", "updated_at"])

    def unpublish(self):
        """Move the post back to drafts."""
        self.status = self.Status.DRAFTED
        self.save(update_fields=["status", "updated_at"])


class PostTag(models.Model):
    """
    Junction table linking posts to tags.

    The order field keeps the author's tag order; order 0 is the primary tag.
    """

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="post_tags",
    )
    tag = models.ForeignKey(
        Tag,
        on_delete=models.CASCADE,
        related_name="tag_posts",
    )
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["order"]
        unique_together = ["post", "tag"]

    def __str__(self):
        return f"{self.post} - {self.tag} #{self.order}"
