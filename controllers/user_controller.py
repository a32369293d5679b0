from flask import Blueprint, current_app, g, jsonify, request, send_from_directory
from werkzeug.security import generate_password_hash

from models.users import ROLES, User
from utils.auth import login_required, roles_required
from utils.errors import NotFoundError, ValidationError
from utils.uploads import (
    discard_upload,
    profile_picture_url,
    remove_profile_picture,
    save_profile_picture,
    upload_dir,
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")
uploads_bp = Blueprint("uploads", __name__)

PICTURE_FIELD = "profilePicture"

# Fields a user may change on their own profile (API name -> Mongo field)
PROFILE_FIELDS = {
    "name": "name",
    "phone": "phone",
    "location": "location",
    "bio": "bio",
    "emailNotifications": "email_notifications",
    "pushNotifications": "push_notifications",
}

# Admin updates may also touch these
ADMIN_FIELDS = dict(PROFILE_FIELDS, **{
    "email": "email",
    "department": "department",
    "role": "role",
    "status": "status",
})

BOOLEAN_FIELDS = {"email_notifications", "push_notifications"}


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _pick_fields(data, allowed):
    """Copy the allowed keys that are present in the payload, mapped to Mongo names."""
    fields = {}
    for api_name, field in allowed.items():
        if api_name not in data:
            continue
        value = data[api_name]
        if field in BOOLEAN_FIELDS:
            value = _as_bool(value)
        elif isinstance(value, str):
            value = value.strip()
        fields[field] = value
    return fields


def _require_text(value, message):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def _validate_fields(fields, user_id=None):
    for field in ("phone", "location", "bio", "department", "status"):
        if fields.get(field) is not None and not isinstance(fields[field], str):
            raise ValidationError(f"{field.capitalize()} must be text")

    if "name" in fields:
        fields["name"] = _require_text(fields["name"], "Name is required")

    if "role" in fields and fields["role"] not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    if "email" in fields:
        fields["email"] = _require_text(fields["email"], "Email is required").lower()
        existing = User.find_by_email(fields["email"])
        if existing and str(existing["_id"]) != str(user_id):
            raise ValidationError("User with this email already exists")


def _get_user_or_404(user_id):
    user = User.find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


# -----------------------------
# VIEW USERS
# -----------------------------
@users_bp.route("", methods=["GET"])
@roles_required("admin", "manager")
def get_users():
    users = [User.to_json(u) for u in User.find_all()]
    return jsonify({"status": "success", "count": len(users), "users": users})


# -----------------------------
# OWN PROFILE
# -----------------------------
@users_bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    return jsonify({"status": "success", "user": User.to_json(g.current_user)})


@users_bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}

    # Email (and anything else outside the whitelist) is silently ignored
    fields = _pick_fields(data, PROFILE_FIELDS)
    _validate_fields(fields)

    user = User.update_fields(g.current_user["_id"], fields)
    if not user:
        raise NotFoundError("User not found")
    return jsonify({"status": "success", "user": User.to_json(user)})


# -----------------------------
# PROFILE PICTURE
# -----------------------------
@users_bp.route("/profile/picture", methods=["POST"])
@login_required
def upload_profile_picture():
    file = request.files.get(PICTURE_FIELD)
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    user = g.current_user
    uploaded = save_profile_picture(file)
    new_path = profile_picture_url(uploaded.filename)

    # Recording the new path is the confirming step; the old file stays until it succeeds
    old_path = user.get("profile_picture")
    try:
        updated = User.set_profile_picture(user["_id"], new_path)
    except Exception:
        discard_upload(uploaded)
        raise
    if not updated:
        discard_upload(uploaded)
        raise NotFoundError("User not found")

    # A failure here is logged and does not fail the upload
    if old_path and old_path != new_path:
        remove_profile_picture(old_path)

    current_app.logger.info(f"Profile picture updated for {user['email']}: {new_path}")
    return jsonify({
        "status": "success",
        "message": "Profile picture uploaded successfully",
        "profilePicture": new_path,
    })


@users_bp.route("/profile/picture", methods=["DELETE"])
@login_required
def delete_profile_picture():
    user = g.current_user

    if user.get("profile_picture"):
        User.set_profile_picture(user["_id"], None)
        remove_profile_picture(user["profile_picture"])

    return jsonify({"status": "success", "message": "Profile picture deleted successfully"})


# -----------------------------
# ADMIN: SINGLE USER
# -----------------------------
@users_bp.route("/<user_id>", methods=["GET"])
@roles_required("admin", "manager")
def get_user_by_id(user_id):
    user = _get_user_or_404(user_id)
    return jsonify({"status": "success", "user": User.to_json(user)})


@users_bp.route("", methods=["POST"])
@roles_required("admin")
def create_user():
    data = request.get_json(silent=True) or {}

    message = "Name, email, and password are required."
    name = _require_text(data.get("name"), message)
    email = _require_text(data.get("email"), message)
    password = data.get("password")
    if not isinstance(password, str) or not password:
        raise ValidationError(message)

    # Prevent duplicate users
    if User.find_by_email(email):
        raise ValidationError("User with this email already exists")

    role = data.get("role") or "user"
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    user = User(
        name=name,
        email=email,
        password=password,
        phone=data.get("phone"),
        location=data.get("location"),
        bio=data.get("bio"),
        department=data.get("department"),
        role=role,
        status=data.get("status") or "Active",
        email_notifications=_as_bool(data.get("emailNotifications", True)),
        push_notifications=_as_bool(data.get("pushNotifications", False)),
    ).save()

    current_app.logger.info(f"User created: {user['email']}")
    return jsonify({"status": "success", "user": User.to_json(user)}), 201


@users_bp.route("/<user_id>", methods=["PUT"])
@roles_required("admin")
def update_user(user_id):
    _get_user_or_404(user_id)
    data = request.get_json(silent=True) or {}

    fields = _pick_fields(data, ADMIN_FIELDS)
    _validate_fields(fields, user_id=user_id)

    # Update password only if provided
    password = data.get("password")
    if password:
        if not isinstance(password, str):
            raise ValidationError("Password must be text")
        fields["password"] = generate_password_hash(password)

    user = User.update_fields(user_id, fields)
    if not user:
        raise NotFoundError("User not found")
    return jsonify({"status": "success", "user": User.to_json(user)})


@users_bp.route("/<user_id>", methods=["DELETE"])
@roles_required("admin")
def delete_user(user_id):
    user = User.delete(user_id)
    if not user:
        raise NotFoundError("User not found")

    if user.get("profile_picture"):
        remove_profile_picture(user["profile_picture"])

    current_app.logger.info(f"User deleted: {user['email']}")
    return jsonify({"status": "success", "message": "User deleted successfully"})


# -----------------------------
# STORED PICTURES
# -----------------------------
@uploads_bp.route("/uploads/profiles/<path:filename>")
def serve_profile_picture(filename):
    return send_from_directory(upload_dir(), filename)
