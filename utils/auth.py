from functools import wraps
from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from models.users import User
from utils.errors import AuthenticationError, PermissionDenied

TOKEN_SALT = "helpdesk-auth-token"


def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def generate_token(user_id):
    return _serializer().dumps({"user_id": str(user_id)})


def load_token(token):
    """Return the user id inside a token, or None if it is invalid or expired."""
    max_age = current_app.config.get("TOKEN_MAX_AGE")
    try:
        data = _serializer().loads(token, max_age=max_age)
    except (SignatureExpired, BadSignature):
        return None
    return data.get("user_id")


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return None


def current_user_id():
    # Bearer tokens only, cookies are never consulted
    token = _bearer_token()
    if token:
        return load_token(token)
    return None


# This decorator makes sure that only logged-in users reach the view
def login_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        user_id = current_user_id()
        if not user_id:
            raise AuthenticationError("Not authorized, please log in")

        user = User.find_by_id(user_id)
        if not user or user.get("status") == "Inactive":
            raise AuthenticationError("Not authorized, user no longer exists")

        g.current_user = user
        return view_function(*args, **kwargs)
    return decorated_function


def roles_required(*roles):
    def decorator(view_function):
        @wraps(view_function)
        @login_required
        def decorated_function(*args, **kwargs):
            if g.current_user.get("role") not in roles:
                raise PermissionDenied(
                    f"Role '{g.current_user.get('role')}' is not allowed to access this resource"
                )
            return view_function(*args, **kwargs)
        return decorated_function
    return decorator
