# models/__init__.py

from .users import User

__all__ = [
    "User"
]
