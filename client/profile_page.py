"""
client/profile_page.py
----------------------
Profile settings page: profile form submission and the profile picture
upload/delete flow.

Picture upload state machine::

    IDLE -> SELECTING -> UPLOADING -> SUCCESS
                 |            |
                 +-> ERROR <--+

A local preview is shown while the upload is in flight. It is released on
every way out of UPLOADING (success, error, leave()), after which the page
falls back to the authoritative image URL.
"""

import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from .api import ApiRequestError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB, mirrors the server cap
IMAGE_TYPE_RE = re.compile(r"^image/(jpeg|jpg|png|gif)$")

DELETE_CONFIRMATION = "Are you sure you want to delete your profile picture?"


class UploadState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SelectedFile:
    name: str
    content: bytes
    mimetype: str

    @property
    def size(self):
        return len(self.content)


@dataclass
class Preview:
    file: SelectedFile
    url: str = field(default_factory=lambda: f"blob:{uuid.uuid4()}")
    released: bool = False

    def release(self):
        self.released = True


def validate_selected_file(file):
    """Return an error message, or None if the file may be uploaded."""
    if file.size > MAX_FILE_SIZE:
        return "File size must be less than 5MB"
    if not IMAGE_TYPE_RE.match((file.mimetype or "").lower()):
        return "Only image files are allowed (JPEG, PNG, GIF)"
    return None


class ProfilePage:

    def __init__(self, store, api, notify, confirm, clock=time.time):
        self.store = store
        self.api = api
        self.notify = notify
        self.confirm = confirm
        self.clock = clock

        # Query cache, seeded from the session store
        self.profile = store.user
        self.image_timestamp = self._now()
        self.upload_state = UploadState.IDLE
        self.preview = None
        self.last_error = None

    def _now(self):
        return int(self.clock() * 1000)

    def _bump_image_timestamp(self):
        # Must change even when the clock has not moved, to bust the image cache
        self.image_timestamp = max(self._now(), self.image_timestamp + 1)

    # -----------------------------
    # PROFILE DATA
    # -----------------------------
    def load(self):
        self.profile = self.api.get_profile()
        return self.profile

    refetch = load

    def submit(self, form):
        if not (form.get("name") or "").strip():
            self.notify("error", "Name is required")
            return False

        try:
            data = self.api.update_profile(form)
        except ApiRequestError as e:
            logger.error(f"Profile update failed: {e.message}")
            self.notify("error", "Failed to update profile")
            return False

        self.notify("success", "Profile updated successfully")
        self.store.update_user(data.get("user") or {})
        self.refetch()
        return True

    # -----------------------------
    # PICTURE
    # -----------------------------
    @property
    def is_uploading(self):
        return self.upload_state is UploadState.UPLOADING

    @property
    def picture_url(self):
        if self.preview is not None:
            return self.preview.url
        path = (self.profile or {}).get("profilePicture")
        if not path:
            return None
        return f"{self.api.asset_url(path)}?t={self.image_timestamp}"

    @property
    def avatar_initial(self):
        name = (self.profile or {}).get("name") or ""
        return name[:1].upper() or "U"

    def _release_preview(self):
        if self.preview is not None:
            self.preview.release()
            self.preview = None

    def _settle(self, state, error=None):
        self._release_preview()
        self.upload_state = state
        self.last_error = error

    def _refresh_after_picture_change(self):
        updated = self.store.refresh_user()
        self.refetch()
        self._bump_image_timestamp()
        return updated

    def select_file(self, file):
        if file is None:
            return self.upload_state

        self.upload_state = UploadState.SELECTING
        error = validate_selected_file(file)
        if error:
            self.notify("error", error)
            self._settle(UploadState.ERROR, error)
            return self.upload_state

        self.preview = Preview(file)
        self.upload_state = UploadState.UPLOADING
        try:
            self.api.upload_profile_picture(file.name, file.content, file.mimetype)
            updated = self._refresh_after_picture_change()
            self.store.update_user(updated)
        except ApiRequestError as e:
            logger.error(f"Upload failed: {e.message}")
            message = e.message or "Failed to upload profile picture"
            self.notify("error", message)
            self._settle(UploadState.ERROR, message)
        except Exception as e:
            logger.exception(f"Upload failed: {e}")
            message = "Failed to upload profile picture"
            self.notify("error", message)
            self._settle(UploadState.ERROR, message)
        else:
            self.notify("success", "Profile picture updated successfully!")
            self._settle(UploadState.SUCCESS)
        finally:
            if self.is_uploading:
                self._settle(UploadState.ERROR, "Upload interrupted")
        return self.upload_state

    def delete_picture(self):
        if not self.confirm(DELETE_CONFIRMATION):
            return False

        try:
            self.api.delete_profile_picture()
            self._refresh_after_picture_change()
        except ApiRequestError as e:
            logger.error(f"Delete failed: {e.message}")
            self.notify("error", "Failed to delete profile picture")
            return False
        except Exception as e:
            logger.exception(f"Delete failed: {e}")
            self.notify("error", "Failed to delete profile picture")
            return False

        self.notify("success", "Profile picture deleted successfully!")
        return True

    def leave(self):
        """Navigation away. In-flight requests are not cancelled."""
        self._settle(UploadState.IDLE)
