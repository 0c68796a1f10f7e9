"""
Post editor workflow.

PostEditor owns the in-progress state of one editing session: the draft
fields, the staged cover image, the tag selection, and the submission that
uploads the image, saves the post and navigates to it.
"""
import logging
import threading

from ..conf import blog_settings
from ..exceptions import TagLimitError, ValidationError
from .draft import (
    Draft,
    ImageChange,
    LocalPreview,
    PostStatus,
    StagedImage,
    SubmitResult,
)
from .ports import Notifier

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "posts"
EDITABLE_FIELDS = ("title", "description", "content")


class LoggingNotifier(Notifier):
    def pending(self, message):
        logger.info(message)

    def success(self, message):
        logger.info(message)

    def failure(self, message):
        logger.warning(message)


class PostEditor:
    """
    Editing session for a new post, or for an existing one when `post`
    (a post record with title, description, content, image, tags and slug)
    is given.

    Collaborators follow blog_platform.editor.ports. `navigate` is called
    with the post URL after a successful submission, `redirect_delay`
    seconds later.
    """

    def __init__(
        self,
        tag_directory,
        uploader,
        store,
        user_id=None,
        post=None,
        notifier=None,
        navigate=None,
        redirect_delay=None,
        max_tags=None,
    ):
        self.tag_directory = tag_directory
        self.uploader = uploader
        self.store = store
        self.user_id = user_id
        self.notifier = notifier or LoggingNotifier()
        self.navigate = navigate
        if redirect_delay is None:
            redirect_delay = blog_settings.REDIRECT_DELAY
        self.redirect_delay = redirect_delay
        self.max_tags = max_tags or blog_settings.MAX_POST_TAGS

        post = post or {}
        self.is_edit = bool(post)
        self.slug = post.get("slug")
        self.initial_image = post.get("image") or None
        self.draft = Draft(
            title=post.get("title") or "",
            description=post.get("description"),
            content=post.get("content") or "",
            tags=list(post.get("tags") or []),
        )
        self.candidates = []

        self._remote_preview = self.initial_image
        self._preview = None
        self._closed = False
        self._submit_lock = threading.Lock()
        self._timers = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def closed(self):
        return self._closed

    def load(self):
        """Fetch the tag directory, leaving out tags already attached."""
        tags = self.tag_directory.list_tags()
        if self._closed:
            return
        attached = {tag["id"] for tag in self.draft.tags}
        self.candidates = [tag for tag in tags if tag["id"] not in attached]

    def close(self):
        """
        End the session.

        Releases the preview, cancels a pending navigation and makes any
        in-flight submission discard its result.
        """
        self._closed = True
        self._release_preview()
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    # Fields

    def set_field(self, name, value):
        if name not in EDITABLE_FIELDS:
            raise AttributeError(f"Unknown draft field: {name}")
        setattr(self.draft, name, value)

    # Image

    @property
    def preview_url(self):
        if self._preview is not None:
            return self._preview.url
        return self._remote_preview

    @property
    def image_hint(self):
        width, height = blog_settings.IMAGE_ASPECT_RATIO
        return (
            "Only images are allowed.",
            f"Maximum file size is {blog_settings.IMAGE_MAX_SIZE_MB}MB.",
            f"Use a ratio of {width}:{height} for best results.",
        )

    def select_image(self, file, content_type=None, name=None):
        """
        Stage a cover image. Files that are not images are ignored.

        Returns True when the image was staged.
        """
        content_type = content_type or getattr(file, "content_type", "") or ""
        if not content_type.startswith("image/"):
            logger.debug("Ignoring non-image file of type %r", content_type)
            return False

        self._release_preview()
        image = StagedImage(
            file=file,
            name=name or getattr(file, "name", None) or "image",
            content_type=content_type,
        )
        self.draft.image = image
        self._preview = LocalPreview(image)
        return True

    def remove_image(self):
        self._release_preview()
        self.draft.image = None
        self._remote_preview = None

    def _release_preview(self):
        if self._preview is not None:
            self._preview.release()
            self._preview = None
        if self.draft.image is not None:
            self.draft.image.close()

    def _needs_upload(self):
        return self.draft.image is not None and self.preview_url != self.initial_image

    def pending_image_change(self):
        """Image change a submission would send, not counting a pending upload."""
        if self.initial_image and self.preview_url is None:
            return ImageChange.cleared()
        return ImageChange.unchanged()

    # Tags

    def select_tag(self, tag):
        if any(t["id"] == tag["id"] for t in self.draft.tags):
            return
        if len(self.draft.tags) >= self.max_tags:
            raise TagLimitError(f"A post can have at most {self.max_tags} tags")

        self.draft.tags.append(tag)
        self.candidates = [t for t in self.candidates if t["id"] != tag["id"]]

    def deselect_tag(self, tag):
        if not any(t["id"] == tag["id"] for t in self.draft.tags):
            return

        self.draft.tags = [t for t in self.draft.tags if t["id"] != tag["id"]]
        if not any(t["id"] == tag["id"] for t in self.candidates):
            self.candidates.append(tag)

    def tag_slots(self):
        """
        Selected tag per rendered slot, None for an empty slot.

        The primary slot is always there; one more slot opens per attached
        tag, up to max_tags slots.
        """
        tags = self.draft.tags
        count = 1 + min(len(tags), self.max_tags - 1)
        return [tags[i] if i < len(tags) else None for i in range(count)]

    # Submission

    @property
    def can_submit(self):
        return not self.draft.is_empty

    def build_payload(self, status, image_change):
        return {
            "title": self.draft.title,
            "content": self.draft.content,
            "tags": [tag["slug"] for tag in self.draft.tags][:self.max_tags],
            "image": image_change.to_wire(),
            "status": PostStatus(status).value,
            "description": self.draft.description,
            "userId": self.user_id,
        }

    def submit(self, status=PostStatus.DRAFTED):
        """
        Upload the staged image if needed, then create or update the post.

        Returns a SubmitResult, or None when the submission failed, was
        discarded because the session closed, or another one was in flight.
        Failures are reported through the notifier and leave the draft
        untouched.
        """
        if not self.can_submit:
            raise ValidationError("Title or content is required")

        if not self._submit_lock.acquire(blocking=False):
            logger.warning("Submission already in progress, ignoring")
            return None
        try:
            return self._submit(PostStatus(status))
        finally:
            self._submit_lock.release()

    def _submit(self, status):
        action = "update" if self.is_edit else "create"
        self.notifier.pending(f"{'Updating' if self.is_edit else 'Creating'} post...")

        uploaded = None
        post = None
        try:
            image_change = self.pending_image_change()
            if self._needs_upload():
                uploaded = self.uploader.upload(self.draft.image, folder=UPLOAD_FOLDER)
                if self._closed:
                    self._discard_upload(uploaded)
                    return None
                image_change = ImageChange.set_to(uploaded)

            payload = self.build_payload(status, image_change)
            if self.is_edit:
                post = self.store.update(self.slug, payload)
            else:
                post = self.store.create(payload)

            if self._closed:
                logger.info("Editor closed, discarding result of %s", action)
                return None

            redirect_url = f"/{post['user']['username']}/{post['slug']}"
        except Exception:
            logger.warning("Failed to %s post", action, exc_info=True)
            # An upload is orphaned only when the post was never saved
            if uploaded and post is None:
                self._discard_upload(uploaded)
            if not self._closed:
                self.notifier.failure(f"Failed to {action} post")
            return None

        logger.info("Post %s %sd as %s", post["slug"], action, status.value)
        self.notifier.success(
            f"Post {action}d successfully! Wait while we redirect you"
        )
        self._schedule_navigation(redirect_url)
        return SubmitResult(post=post, redirect_url=redirect_url)

    def _discard_upload(self, url):
        try:
            self.uploader.discard(url)
        except Exception:
            logger.warning("Could not discard orphaned upload %s", url, exc_info=True)

    def _schedule_navigation(self, url):
        if self.navigate is None:
            return
        if not self.redirect_delay:
            self.navigate(url)
            return

        timer = threading.Timer(self.redirect_delay, self.navigate, args=(url,))
        timer.daemon = True
        self._timers.append(timer)
        timer.start()
