# client/__init__.py

from .storage import LocalStorage
from .api import ApiClient, ApiRequestError
from .auth_store import AuthStore
from .profile_page import ProfilePage, SelectedFile, UploadState

__all__ = [
    "LocalStorage",
    "ApiClient",
    "ApiRequestError",
    "AuthStore",
    "ProfilePage",
    "SelectedFile",
    "UploadState",
]
