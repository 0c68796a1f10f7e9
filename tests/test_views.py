"""
Tests for the server-rendered pages.
"""
import pytest

from blog_platform.models import Post

from .conftest import make_image_bytes


@pytest.fixture
def author_client(client, user):
    client.force_login(user)
    return client


class TestPublicPages:
    def test_home_lists_published(self, client, user, post):
        Post.objects.create(title="Hidden draft", content="x", user=user)
        response = client.get("/")
        assert response.status_code == 200
        assert list(response.context["posts"]) == [post]
        assert b"Hidden draft" not in response.content

    def test_tag_page(self, client, post, tags):
        response = client.get(f"/tags/{tags[0].slug}")
        assert response.status_code == 200
        assert list(response.context["posts"]) == [post]

    def test_tag_page_missing(self, client, db):
        assert client.get("/tags/missing").status_code == 404

    def test_post_page_renders_markdown(self, client, user):
        Post.objects.create(
            title="Rendered",
            content="# Heading\n\n<script>alert(1)</script>",
            user=user,
            status=Post.Status.PUBLISHED,
        )
        response = client.get("/testuser/rendered")
        assert response.status_code == 200
        assert b"<h1>Heading</h1>" in response.content
        assert b"<script>" not in response.content

    def test_draft_page_only_for_author(self, client, user, other_user):
        Post.objects.create(title="Draft", content="x", user=user)
        assert client.get("/testuser/draft").status_code == 404
        client.force_login(other_user)
        assert client.get("/testuser/draft").status_code == 404
        client.force_login(user)
        assert client.get("/testuser/draft").status_code == 200

    def test_post_under_wrong_author(self, client, post, other_user):
        assert client.get("/other/test-post").status_code == 404


class TestUserPage:
    def test_visitor_sees_published_only(self, client, user, post):
        Post.objects.create(title="Draft", content="x", user=user)
        response = client.get("/testuser")
        assert response.status_code == 200
        assert not response.context["is_owner"]
        assert list(response.context["published_posts"]) == [post]
        assert list(response.context["drafted_posts"]) == []

    def test_owner_sees_drafts(self, author_client, user, post):
        draft = Post.objects.create(title="Draft", content="x", user=user)
        response = author_client.get("/testuser")
        assert response.context["is_owner"]
        assert list(response.context["drafted_posts"]) == [draft]

    def test_unknown_user(self, client, db):
        assert client.get("/nobody").status_code == 404


class TestEditorPage:
    def test_login_required(self, client, db):
        response = client.get("/new")
        assert response.status_code == 302
        assert response["Location"].startswith("/sign-in?next=/new")

    def test_new_post_form(self, author_client, tags):
        response = author_client.get("/new")
        assert response.status_code == 200
        assert len(response.context["tag_fields"]) == 1
        assert not response.context["editor"].is_edit

    def test_publish(self, author_client, user, tags):
        response = author_client.post("/new", {
            "title": "Hello",
            "content": "World",
            "tag_0": "python",
            "tag_1": "web",
            "cover_image": _image_upload(),
            "action": "publish",
        })
        post = Post.objects.get(slug="hello")
        assert response.status_code == 302
        assert response["Location"] == "/testuser/hello"
        assert post.is_published
        assert [tag.slug for tag in post.tag_list] == ["python", "web"]
        assert post.image.startswith("/media/blog/uploads/posts/")

    def test_save_draft(self, author_client, tags):
        author_client.post("/new", {"title": "Later", "action": "draft"})
        assert Post.objects.get(slug="later").status == Post.Status.DRAFTED

    def test_empty_draft_rejected(self, author_client, db):
        response = author_client.post("/new", {"title": "", "content": "", "action": "publish"})
        assert response.status_code == 200
        assert not Post.objects.exists()
        assert "Add a title or some content first." in response.context["form"].non_field_errors()

    def test_preview(self, author_client, tags):
        response = author_client.post("/new", {
            "title": "Peek",
            "content": "**bold**",
            "tag_0": "python",
            "action": "preview",
        })
        assert response.status_code == 200
        assert b"<strong>bold</strong>" in response.content
        assert len(response.context["tag_fields"]) == 2
        assert not Post.objects.exists()

    def test_preview_keeps_image_removal(self, author_client, post):
        response = author_client.post("/testuser/test-post/edit", {
            "title": post.title,
            "content": post.content,
            "remove_image": "on",
            "action": "preview",
        })
        assert response.status_code == 200
        assert response.context["form"]["remove_image"].value() is True
        assert b'<input type="hidden" name="remove_image" value="on">' in response.content
        post.refresh_from_db()
        assert post.image == "/media/blog/uploads/posts/cover.png"

    def test_preview_shows_cover(self, author_client, post):
        response = author_client.post("/testuser/test-post/edit", {
            "title": post.title,
            "content": post.content,
            "action": "preview",
        })
        assert response.context["form"]["remove_image"].value() is False
        assert b'<img src="/media/blog/uploads/posts/cover.png" alt="Post image">' in response.content

    def test_preview_asks_to_choose_file_again(self, author_client, db):
        response = author_client.post("/new", {
            "title": "Peek",
            "cover_image": _image_upload(),
            "action": "preview",
        })
        assert b"Choose cover.png again before saving" in response.content
        assert b"Cover image: cover.png" in response.content

    def test_failed_upload_keeps_values(self, author_client, db):
        from django.core.files.uploadedfile import SimpleUploadedFile

        response = author_client.post("/new", {
            "title": "Keep me",
            "cover_image": SimpleUploadedFile("bad.png", b"nope", content_type="image/png"),
            "action": "publish",
        })
        assert response.status_code == 200
        assert response.context["form"]["title"].value() == "Keep me"
        messages = [str(m) for m in response.context["messages"]]
        assert messages == ["Failed to create post"]
        assert not Post.objects.exists()

    def test_edit_form(self, author_client, post):
        response = author_client.get("/testuser/test-post/edit")
        assert response.status_code == 200
        editor = response.context["editor"]
        assert editor.is_edit
        assert response.context["form"]["tag_0"].value() == "python"
        assert len(response.context["tag_fields"]) == 3

    def test_edit_keeps_image_and_slug(self, author_client, post):
        response = author_client.post("/testuser/test-post/edit", {
            "title": "Renamed",
            "content": post.content,
            "tag_0": "django",
            "action": "publish",
        })
        post.refresh_from_db()
        assert response["Location"] == "/testuser/test-post"
        assert post.title == "Renamed"
        assert post.image == "/media/blog/uploads/posts/cover.png"
        assert [tag.slug for tag in post.tag_list] == ["django"]

    def test_edit_remove_image(self, author_client, post):
        author_client.post("/testuser/test-post/edit", {
            "title": post.title,
            "content": post.content,
            "remove_image": "on",
            "action": "draft",
        })
        post.refresh_from_db()
        assert post.image == ""
        assert post.status == Post.Status.DRAFTED

    def test_cannot_edit_others_post(self, client, other_user, post):
        client.force_login(other_user)
        assert client.get("/testuser/test-post/edit").status_code == 404


class TestSettingsPage:
    def test_login_required(self, client, db):
        assert client.get("/settings").status_code == 302

    def test_update(self, author_client, user):
        response = author_client.post("/settings", {"bio": "Writer", "brand_color": "#ff0000"})
        assert response.status_code == 302
        assert response["Location"] == "/testuser"
        user.blog_profile.refresh_from_db()
        assert user.blog_profile.bio == "Writer"
        assert user.blog_profile.brand_color == "#ff0000"

    def test_invalid_color(self, author_client):
        response = author_client.post("/settings", {"brand_color": "red"})
        assert response.status_code == 200
        assert response.context["form"].errors["brand_color"]


def _image_upload():
    from django.core.files.uploadedfile import SimpleUploadedFile

    return SimpleUploadedFile("cover.png", make_image_bytes(), content_type="image/png")
