from flask import Blueprint, current_app, g, jsonify, request
from models.users import User
from utils.auth import generate_token, login_required
from utils.errors import AuthenticationError, ValidationError

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# Login
@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ValidationError("Email and password are required")

    user = User.verify_password(email, password)
    if not user:
        raise AuthenticationError("Invalid email or password")
    if user.get("status") == "Inactive":
        raise AuthenticationError("Account is inactive")

    current_app.logger.info(f"User {user['email']} logged in")
    return jsonify({
        "status": "success",
        "token": generate_token(user["_id"]),
        "user": User.to_json(user),
    })


# Current user, used by the client store to refresh its snapshot
@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"status": "success", "user": User.to_json(g.current_user)})


# Logout. Tokens are stateless; the client discards its copy
@auth_bp.route("/logout", methods=["POST"])
def logout():
    return jsonify({"status": "success", "message": "Logged out successfully"})
