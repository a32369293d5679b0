"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
for the entire Flask application.
"""

from flask_pymongo import PyMongo

# Create a global MongoDB instance
mongo = PyMongo()

def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Settings (like MONGO_URI) must already be loaded on app.config.
    """
    mongo.init_app(app)

    app.logger.info("MongoDB connection initialized.")
    return mongo
