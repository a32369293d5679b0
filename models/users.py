from utils.db import mongo
from datetime import datetime
from pymongo import ReturnDocument
from werkzeug.security import generate_password_hash, check_password_hash
from bson import ObjectId
from bson.errors import InvalidId

ROLES = ("admin", "manager", "agent", "user")

# Mongo field -> API field
API_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "location": "location",
    "bio": "bio",
    "department": "department",
    "role": "role",
    "status": "status",
    "email_notifications": "emailNotifications",
    "push_notifications": "pushNotifications",
    "profile_picture": "profilePicture",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def to_object_id(user_id):
    """Return an ObjectId, or None when the id is malformed."""
    if isinstance(user_id, ObjectId):
        return user_id
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class User:

    @staticmethod
    def collection():
        return mongo.db.users

    def __init__(self, name, email, password, phone=None, location=None, bio=None,
                 department=None, role="user", status="Active", email_notifications=True,
                 push_notifications=False, profile_picture=None, created_at=None, updated_at=None):
        self.name = name
        self.email = email.strip().lower()
        self.password = generate_password_hash(password)
        self.phone = phone
        self.location = location
        self.bio = bio
        self.department = department
        self.role = role
        self.status = status

        # Notification preferences
        self.email_notifications = email_notifications
        self.push_notifications = push_notifications

        # Server-relative URL under /uploads/profiles, or None
        self.profile_picture = profile_picture

        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "phone": self.phone,
            "location": self.location,
            "bio": self.bio,
            "department": self.department,
            "role": self.role,
            "status": self.status,
            "email_notifications": self.email_notifications,
            "push_notifications": self.push_notifications,
            "profile_picture": self.profile_picture,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    # Save new user, returns the stored document
    def save(self):
        doc = self.to_dict()
        result = self.collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    # Serialize a stored document for the API (password never included)
    @staticmethod
    def to_json(doc):
        data = {"id": str(doc["_id"])}
        for field, api_name in API_FIELDS.items():
            value = doc.get(field)
            if isinstance(value, datetime):
                value = value.isoformat()
            data[api_name] = value
        return data

    # All users without password hashes
    @staticmethod
    def find_all():
        return list(User.collection().find({}, {"password": 0}).sort("created_at", 1))

    # Find user by ID
    @staticmethod
    def find_by_id(user_id):
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return User.collection().find_one({"_id": oid})

    # Find user by email
    @staticmethod
    def find_by_email(email):
        if not email:
            return None
        return User.collection().find_one({"email": email.strip().lower()})

    # Verify password
    @staticmethod
    def verify_password(email, password):
        user = User.find_by_email(email)
        if user and password and check_password_hash(user["password"], password):
            return user
        return None

    @staticmethod
    def update_fields(user_id, fields):
        """Apply a $set and return the updated document, or None if missing."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        fields = dict(fields)
        fields["updated_at"] = datetime.utcnow()
        return User.collection().find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

    @staticmethod
    def delete(user_id):
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return User.collection().find_one_and_delete({"_id": oid})

    # Point the user at a new picture URL, or clear it with None
    @staticmethod
    def set_profile_picture(user_id, path):
        return User.update_fields(user_id, {"profile_picture": path})
