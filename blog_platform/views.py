"""
Page views for django-blog-platform.
"""
import logging

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views import View
from django.views.generic import DetailView, FormView, ListView

from . import services
from .conf import blog_settings
from .editor import ImageChange, PostEditor, PostStatus
from .editor.local import MessagesNotifier, local_collaborators
from .exceptions import BlogPlatformError, TagLimitError
from .forms import PostEditorForm, ProfileForm
from .models import Post, Tag

logger = logging.getLogger(__name__)


class PostListView(ListView):
    """Published posts, newest first."""

    model = Post
    template_name = "blog_platform/post_list.html"
    context_object_name = "posts"
    paginate_by = blog_settings.POSTS_PER_PAGE

    def get_queryset(self):
        return services.list_posts(status=Post.Status.PUBLISHED)


class TagPostListView(PostListView):
    """Published posts with a specific tag."""

    template_name = "blog_platform/tag_detail.html"

    def get_queryset(self):
        self.tag = get_object_or_404(Tag, slug=self.kwargs["slug"])
        return services.list_posts(status=Post.Status.PUBLISHED, tag=self.tag)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tag"] = self.tag
        return context


class UserDetailView(View):
    """
    Author profile page.

    The owner also sees their drafts.
    """

    template_name = "blog_platform/user_detail.html"

    def get(self, request, username):
        try:
            author = services.get_user_by_username(username)
        except BlogPlatformError:
            raise Http404("User not found")

        is_owner = request.user.is_authenticated and request.user.pk == author.pk
        published = services.list_posts(status=Post.Status.PUBLISHED, user=author)
        drafted = (
            services.list_posts(status=Post.Status.DRAFTED, user=author)
            if is_owner
            else Post.objects.none()
        )
        return render(request, self.template_name, {
            "author": author,
            "profile": services.get_profile(author),
            "is_owner": is_owner,
            "published_posts": published,
            "drafted_posts": drafted,
        })


class PostDetailView(DetailView):
    """A single post at /<username>/<slug>."""

    model = Post
    template_name = "blog_platform/post_detail.html"
    context_object_name = "post"

    def get_object(self, queryset=None):
        post = get_object_or_404(
            Post.objects.select_related("user"),
            slug=self.kwargs["slug"],
            user__username=self.kwargs["username"],
        )
        if not post.can_view(self.request.user):
            raise Http404("Post not found")
        return post


class PostEditorView(LoginRequiredMixin, View):
    """
    New post and edit post pages.

    Each submit rebuilds a PostEditor session from the form and runs the
    editor workflow in-process.
    """

    template_name = "blog_platform/post_editor.html"

    def get_post(self):
        if "slug" not in self.kwargs:
            return None
        return get_object_or_404(
            Post,
            slug=self.kwargs["slug"],
            user=self.request.user,
            user__username=self.kwargs["username"],
        )

    def get_editor(self, post):
        return PostEditor(
            user_id=services.get_profile(self.request.user).external_id,
            post=services.serialize_post(post) if post else None,
            notifier=MessagesNotifier(self.request),
            redirect_delay=0,
            max_tags=blog_settings.MAX_POST_TAGS,
            **local_collaborators(self.request.user),
        )

    def get_form(self, editor, data=None, files=None):
        tags = editor.candidates + editor.draft.tags
        initial = {
            "title": editor.draft.title,
            "description": editor.draft.description,
            "content": editor.draft.content,
            "remove_image": editor.pending_image_change().kind == ImageChange.CLEARED,
        }
        for i, tag in enumerate(editor.tag_slots()):
            initial[f"tag_{i}"] = tag["slug"] if tag else ""
        return PostEditorForm(
            data,
            files,
            initial=initial,
            tag_choices=[(tag["slug"], tag["name"]) for tag in tags],
        )

    def render_editor(self, editor, form, preview=False):
        slot_count = len(editor.tag_slots())
        return render(self.request, self.template_name, {
            "editor": editor,
            "form": form,
            "tag_fields": [form[f"tag_{i}"] for i in range(slot_count)],
            "preview": preview,
        })

    def get(self, request, **kwargs):
        with self.get_editor(self.get_post()) as editor:
            editor.load()
            return self.render_editor(editor, self.get_form(editor))

    def post(self, request, **kwargs):
        with self.get_editor(self.get_post()) as editor:
            editor.load()
            form = self.get_form(editor, request.POST, request.FILES)
            if not form.is_valid():
                return self.render_editor(editor, form)

            self.apply_form(editor, form)
            if form.errors:
                return self.render_editor(editor, form)

            action = request.POST.get("action", "draft")
            if action == "preview":
                return self.render_editor(editor, self.get_form(editor), preview=True)

            if not editor.can_submit:
                form.add_error(None, "Add a title or some content first.")
                return self.render_editor(editor, form)

            status = PostStatus.PUBLISHED if action == "publish" else PostStatus.DRAFTED
            result = editor.submit(status)
            if result is None:
                return self.render_editor(editor, form)
            return redirect(result.redirect_url)

    def apply_form(self, editor, form):
        for name in ("title", "description", "content"):
            editor.set_field(name, form.cleaned_data[name])

        if form.cleaned_data["remove_image"]:
            editor.remove_image()
        cover_image = form.cleaned_data["cover_image"]
        if cover_image:
            editor.select_image(cover_image, getattr(cover_image, "content_type", None))

        by_slug = {tag["slug"]: tag for tag in editor.candidates + editor.draft.tags}
        for tag in list(editor.draft.tags):
            editor.deselect_tag(tag)
        for slug in form.selected_tag_slugs():
            try:
                editor.select_tag(by_slug[slug])
            except TagLimitError:
                form.add_error(None, f"A post can have at most {editor.max_tags} tags.")
                break


class SettingsView(LoginRequiredMixin, FormView):
    """Profile settings: bio and brand color."""

    template_name = "blog_platform/settings.html"
    form_class = ProfileForm

    def get_initial(self):
        profile = services.get_profile(self.request.user)
        return {"bio": profile.bio, "brand_color": profile.brand_color}

    def form_valid(self, form):
        profile = services.get_profile(self.request.user)
        services.update_profile(self.request.user, profile.external_id, form.cleaned_data)
        messages.success(self.request, "Profile updated.")
        return redirect("blog_platform:user_detail", username=profile.username)
