"""
In-process collaborators, used by the server-rendered editor page.
"""
from django.contrib import messages

from .. import services, storage
from .ports import ImageUploader, Notifier, PostStore, TagDirectory


class LocalTagDirectory(TagDirectory):
    def list_tags(self):
        return services.list_tags()


class LocalImageUploader(ImageUploader):
    def upload(self, image, folder="posts"):
        return storage.save_file(image.file, folder)

    def discard(self, url):
        storage.delete_file(url)


class LocalPostStore(PostStore):
    """Persists posts on behalf of an authenticated user."""

    def __init__(self, user):
        self.user = user

    def create(self, payload):
        return services.serialize_post(services.create_post(self.user, payload))

    def update(self, slug, payload):
        return services.serialize_post(services.update_post(self.user, slug, payload))


class MessagesNotifier(Notifier):
    """Reports submission outcomes through django.contrib.messages."""

    def __init__(self, request):
        self.request = request

    def success(self, message):
        messages.success(self.request, message)

    def failure(self, message):
        messages.error(self.request, message)


def local_collaborators(user):
    return {
        "tag_directory": LocalTagDirectory(),
        "uploader": LocalImageUploader(),
        "store": LocalPostStore(user),
    }
