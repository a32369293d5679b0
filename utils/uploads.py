"""
utils/uploads.py
---------------------------------
Profile picture storage.

Validates an incoming werkzeug FileStorage (extension + declared MIME type
against the image allow-list, size cap) and writes it under UPLOAD_FOLDER
with a generated name. The client-supplied filename only contributes its
extension.
"""

import os
import random
import time
from dataclasses import dataclass

from flask import current_app
from werkzeug.utils import secure_filename

from utils.errors import ValidationError

ALLOWED_TYPES = {"jpeg", "jpg", "png", "gif"}
DEFAULT_MAX_SIZE = 5 * 1024 * 1024  # 5MB

TYPE_ERROR = "Only image files are allowed (jpeg, jpg, png, gif)"


@dataclass
class UploadedFile:
    original_name: str
    filename: str
    size: int
    mimetype: str
    path: str


def ensure_upload_dir(path):
    os.makedirs(path, exist_ok=True)
    return path


def upload_dir():
    return current_app.config["UPLOAD_FOLDER"]


def max_size():
    return current_app.config.get("MAX_PROFILE_PICTURE_SIZE", DEFAULT_MAX_SIZE)


def file_extension(filename):
    return os.path.splitext(filename or "")[1].lower()


def is_allowed_image(filename, mimetype):
    """Both the extension and the declared MIME type must be on the allow-list."""
    ext = file_extension(filename).lstrip(".")
    mimetype = (mimetype or "").lower()
    if not mimetype.startswith("image/"):
        return False
    subtype = mimetype.split("/", 1)[1]
    return ext in ALLOWED_TYPES and subtype in ALLOWED_TYPES


def stream_size(file):
    stream = file.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def validate_image(file):
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    if not is_allowed_image(file.filename, file.mimetype):
        raise ValidationError(TYPE_ERROR)

    size = stream_size(file)
    limit = max_size()
    if size > limit:
        raise ValidationError(f"File too large. Maximum size is {limit // (1024 * 1024)}MB")
    return size


def generate_filename(original_name):
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
    return f"profile-{unique_suffix}{file_extension(original_name)}"


def profile_picture_url(filename):
    prefix = current_app.config.get("PROFILE_PICTURE_URL_PREFIX", "/uploads/profiles")
    return f"{prefix.rstrip('/')}/{filename}"


def picture_file_path(url):
    # Only the basename is trusted; stored URLs never escape the upload directory
    name = secure_filename(os.path.basename(url or ""))
    if not name:
        return None
    return os.path.join(upload_dir(), name)


def save_profile_picture(file):
    """Validate and write the upload. Nothing touches disk on rejection."""
    size = validate_image(file)

    folder = ensure_upload_dir(upload_dir())
    filename = generate_filename(file.filename)
    path = os.path.join(folder, filename)
    file.save(path)

    current_app.logger.info(f"Stored profile picture {filename} ({size} bytes)")
    return UploadedFile(
        original_name=file.filename,
        filename=filename,
        size=size,
        mimetype=file.mimetype,
        path=path,
    )


def remove_profile_picture(url):
    """Delete the file behind a stored picture URL. Failures are logged, not raised."""
    path = picture_file_path(url)
    if not path or not os.path.exists(path):
        return False
    try:
        os.remove(path)
    except OSError as e:
        current_app.logger.warning(f"Could not delete profile picture {path}: {e}")
        return False
    current_app.logger.info(f"Deleted profile picture {path}")
    return True


def discard_upload(uploaded):
    try:
        os.remove(uploaded.path)
    except OSError as e:
        current_app.logger.warning(f"Could not discard upload {uploaded.path}: {e}")
