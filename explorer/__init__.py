import logging
import os

from flask import Flask

from .blueprints.explorer_routes import ApiDescriptor, mount_explorer
from .config import HostSettings, get_log_level
from .host import HostApplication, ModelRegistry, create_model, registry
from .models import db


def get_version():
    """Read version from VERSION file.

    Returns:
        str: Application version string, or '0.1.0' fallback if file not found
    """
    try:
        version_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "VERSION")
        with open(version_file, "r") as f:
            return f.read().strip()
    except (FileNotFoundError, IOError):
        return "0.1.0"  # Fallback version


def create_app(settings=None, registry=None, database_uri="sqlite:///:memory:"):
    """Create a Flask host application ready to expose documented models.

    This factory function creates the Flask app, configures the database,
    applies the configured log level and attaches a HostApplication as
    ``app.host``. Models are attached and the explorer mounted by the caller.

    Args:
        settings: HostSettings, defaults to values from config/settings.ini and the environment
        registry: Global ModelRegistry to use instead of the process-wide one
        database_uri: SQLAlchemy URI of the data source models are bound to

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    logging.getLogger("explorer").setLevel(get_log_level())

    # Configure SQLAlchemy
    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Initialize extensions
    db.init_app(app)

    # Set version as app attribute
    app.version = get_version()

    app.host = HostApplication(app, settings=settings or HostSettings(), registry=registry, version=app.version)

    return app


__all__ = [
    "ApiDescriptor",
    "HostApplication",
    "HostSettings",
    "ModelRegistry",
    "create_app",
    "create_model",
    "db",
    "get_version",
    "mount_explorer",
    "registry",
]
