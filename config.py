import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/helpdesk")

    # Profile pictures
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads", "profiles"))
    PROFILE_PICTURE_URL_PREFIX = "/uploads/profiles"
    MAX_PROFILE_PICTURE_SIZE = 5 * 1024 * 1024  # 5MB
    # Whole request body, leaves room for multipart framing
    MAX_CONTENT_LENGTH = MAX_PROFILE_PICTURE_SIZE + 64 * 1024

    # API tokens handed to the client store
    TOKEN_MAX_AGE = int(os.getenv("TOKEN_MAX_AGE", 7 * 24 * 3600))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    MONGO_URI = "mongodb://localhost:27017/helpdesk_test"
