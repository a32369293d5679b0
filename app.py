from flask import Flask
from config import Config
from utils.db import init_db_connection
from utils.errors import register_error_handlers
from utils.uploads import ensure_upload_dir

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.user_controller import users_bp, uploads_bp


def create_app(config_object=Config):
    app = Flask(__name__)                   # Initialize Flask app
    app.config.from_object(config_object)   # Load configuration from Config class
    init_db_connection(app)                 # Initialize MongoDB connection

    # Profile pictures are written here; created once, idempotently
    ensure_upload_dir(app.config["UPLOAD_FOLDER"])

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(uploads_bp)

    register_error_handlers(app)
    return app


# Run the app
if __name__ == "__main__":
    create_app().run(debug=True, port=5001)
