"""
Forms for django-blog-platform.
"""
from django import forms

from .conf import blog_settings
from .models import Post


class PostPayloadForm(forms.Form):
    """Scalar fields of a create/update post payload."""

    title = forms.CharField(max_length=255, required=False)
    content = forms.CharField(required=False, strip=False)
    description = forms.CharField(required=False)
    status = forms.ChoiceField(choices=Post.Status.choices, required=False)

    def clean_status(self):
        return self.cleaned_data.get("status") or Post.Status.DRAFTED


class ProfileForm(forms.Form):
    """User settings: bio and brand color."""

    bio = forms.CharField(required=False, widget=forms.Textarea)
    brand_color = forms.RegexField(
        regex=r"^#[0-9a-fA-F]{6}$",
        required=False,
        error_messages={"invalid": "Use a hex color such as #1a2b3c."},
    )


class PostEditorForm(forms.Form):
    """
    Server-rendered post editor.

    Tag slots are plain slug choices; tag_0 is the primary tag.
    """

    title = forms.CharField(
        max_length=255,
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "New post title here..."}),
    )
    description = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"placeholder": "Post description here...", "rows": 2}),
    )
    content = forms.CharField(
        required=False,
        strip=False,
        widget=forms.Textarea(attrs={"placeholder": "Write your post content here..."}),
    )
    cover_image = forms.FileField(required=False)
    remove_image = forms.BooleanField(required=False)

    def __init__(self, *args, tag_choices=(), **kwargs):
        super().__init__(*args, **kwargs)
        choices = [("", "Add a tag")] + list(tag_choices)
        for i in range(blog_settings.MAX_POST_TAGS):
            self.fields[f"tag_{i}"] = forms.ChoiceField(choices=choices, required=False)

    def selected_tag_slugs(self):
        """Return chosen slugs in slot order, without blanks or repeats."""
        slugs = []
        for i in range(blog_settings.MAX_POST_TAGS):
            slug = self.cleaned_data.get(f"tag_{i}")
            if slug and slug not in slugs:
                slugs.append(slug)
        return slugs
