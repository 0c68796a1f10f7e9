"""
Collaborators the post editor talks to.

Records are plain dicts shaped like the JSON API responses: tags carry
id, slug and name; posts carry slug and user.username.
"""


class TagDirectory:
    def list_tags(self):
        """Return every tag record, in directory order."""
        raise NotImplementedError


class ImageUploader:
    def upload(self, image, folder="posts"):
        """Store a StagedImage and return its public URL."""
        raise NotImplementedError

    def discard(self, url):
        """Remove an upload that no post ended up using."""
        raise NotImplementedError


class PostStore:
    def create(self, payload):
        """Create a post and return its record."""
        raise NotImplementedError

    def update(self, slug, payload):
        """Update the post with this slug and return its record."""
        raise NotImplementedError


class Notifier:
    """Pending / success / failure lifecycle of one submission."""

    def pending(self, message):
        pass

    def success(self, message):
        pass

    def failure(self, message):
        pass
