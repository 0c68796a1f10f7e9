"""
Django admin configuration for blog_platform.
"""
from django.contrib import admin
from django.utils.html import format_html

from .models import Post, PostTag, Profile, Tag


class PostTagInline(admin.TabularInline):
    """Inline for managing the ordered tags of a post."""

    model = PostTag
    extra = 1
    max_num = 4
    raw_id_fields = ["tag"]
    fields = ["tag", "order"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "post_count", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "user",
        "status",
        "primary_tag",
        "posted_on",
        "created_at",
    ]
    list_filter = ["status", "posted_on", "created_at"]
    search_fields = ["title", "content", "user__username"]
    raw_id_fields = ["user"]
    date_hierarchy = "created_at"
    inlines = [PostTagInline]
    readonly_fields = ["posted_on", "created_at", "updated_at"]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "description", "content", "user")
        }),
        ("Cover image", {
            "fields": ("image",)
        }),
        ("Status", {
            "fields": ("status", "posted_on")
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "unpublish_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        if obj.title:
            return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title
        return obj.content[:40] + "..." if len(obj.content) > 40 else obj.content

    title_preview.short_description = "Title"

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        for post in queryset:
            post.publish()
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Move selected posts to drafts")
    def unpublish_posts(self, request, queryset):
        for post in queryset:
            post.unpublish()
        self.message_user(request, f"{queryset.count()} posts moved to drafts.")


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["avatar_preview", "username", "external_id", "color_swatch", "created_at"]
    search_fields = ["user__username", "external_id", "bio"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at"]

    def avatar_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" style="max-width: 32px; max-height: 32px;" />',
                obj.image,
            )
        return "-"

    avatar_preview.short_description = "Avatar"

    def color_swatch(self, obj):
        return format_html(
            '<span style="display:inline-block;width:16px;height:16px;background:{};"></span> {}',
            obj.brand_color,
            obj.brand_color,
        )

    color_swatch.short_description = "Brand color"
