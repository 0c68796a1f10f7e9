"""
JSON API views for django-blog-platform.

Include under /api/ in your project urls.py (see blog_platform.urls).
"""
import json
import logging

from django.http import JsonResponse
from django.views import View

from . import services, storage
from .exceptions import BlogPlatformError, Unauthorized, ValidationError
from .models import Post

logger = logging.getLogger(__name__)


def error_response(error):
    body = {"error": error.message}
    errors = getattr(error, "errors", None)
    if errors:
        body["errors"] = errors
    return JsonResponse(body, status=error.status_code)


def parse_json(request):
    try:
        data = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_user(request):
    if not request.user.is_authenticated:
        raise Unauthorized()
    return request.user


class ApiView(View):
    """
    Base view turning platform errors into JSON error responses.

    Unexpected errors are logged and reported without details.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except BlogPlatformError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return JsonResponse({"error": "Internal server error"}, status=500)

    def http_method_not_allowed(self, request, *args, **kwargs):
        return JsonResponse({"error": "Method not allowed"}, status=405)


class TagListApiView(ApiView):
    """The tag directory."""

    def get(self, request):
        return JsonResponse(services.list_tags(), safe=False)


class TagDetailApiView(ApiView):
    def get(self, request, slug):
        tag = services.get_tag(slug)
        data = services.serialize_tag(tag)
        data["posts"] = [
            services.serialize_post(post, include_content=False)
            for post in services.list_posts(tag=tag)
        ]
        return JsonResponse(data)


class PostListApiView(ApiView):
    """List published posts, or create a post."""

    def get(self, request):
        status = request.GET.get("status") or Post.Status.PUBLISHED
        if status not in Post.Status.values:
            raise ValidationError("Invalid status")

        author = None
        username = request.GET.get("user")
        if username:
            author = services.get_user_by_username(username)

        # Drafts are only listed for their own author
        if status != Post.Status.PUBLISHED and (
            author is None or author.pk != request.user.pk
        ):
            raise Unauthorized()

        posts = services.list_posts(status=status, user=author)
        return JsonResponse(
            [services.serialize_post(post, include_content=False) for post in posts],
            safe=False,
        )

    def post(self, request):
        user = require_user(request)
        post = services.create_post(user, parse_json(request))
        return JsonResponse(services.serialize_post(post), status=201)


class PostDetailApiView(ApiView):
    """Fetch or update a single post by slug."""

    def get(self, request, slug):
        post = services.get_post(slug, viewer=request.user)
        return JsonResponse(services.serialize_post(post))

    def patch(self, request, slug):
        user = require_user(request)
        post = services.update_post(user, slug, parse_json(request))
        return JsonResponse(services.serialize_post(post))


class UploadApiView(ApiView):
    """Store cover images, and remove uploads that were never used."""

    def post(self, request):
        require_user(request)
        url = storage.save_file(
            request.FILES.get("file"),
            request.POST.get("field") or None,
        )
        return JsonResponse({"image": url})

    def delete(self, request):
        require_user(request)
        deleted = storage.delete_file(parse_json(request).get("image"))
        return JsonResponse({"deleted": deleted})


class UserApiView(ApiView):
    """Public profile, and the owner's settings update."""

    def get(self, request, external_id):
        profile = services.get_user_profile(external_id)
        return JsonResponse(services.serialize_user(profile.user))

    def patch(self, request, external_id):
        data = parse_json(request)
        profile = services.update_profile(request.user, external_id, {
            "bio": data.get("bio"),
            "brand_color": data.get("brandColor"),
        })
        return JsonResponse(services.serialize_user(profile.user))
