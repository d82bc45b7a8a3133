"""
Shared test fixtures for the API explorer.

This module provides a host application with a ``product`` model backed by
Flask-SQLAlchemy, mirroring how a real REST application attaches its models,
plus factories to mount the explorer with different settings.
"""

import pytest
from sqlalchemy import Column, Integer, String

from explorer import create_app, db, mount_explorer
from explorer.config import CorsSettings, HostSettings
from explorer.host import ModelRegistry


class Product(db.Model):
    __tablename__ = "product"

    id = Column(Integer, primary_key=True, autoincrement=True)
    foo = Column(String(255), nullable=False)
    bar = Column(String(255))
    aNum = Column(Integer, nullable=False, default=5, info={"min": 1, "max": 10})


@pytest.fixture
def product_model():
    """The SQLAlchemy declarative class behind the ``product`` model."""
    return Product


@pytest.fixture
def model_registry():
    """Fresh global model registry so definitions don't leak between tests."""
    return ModelRegistry()


@pytest.fixture
def make_app(model_registry):
    """Factory creating a host app with ``product`` attached to the ``db`` data source."""

    def _make_app(rest_api_root="/api", explorer_root="/explorer", cors=None):
        settings = HostSettings(
            rest_api_root=rest_api_root,
            explorer_root=explorer_root,
            cors=cors if cors is not None else CorsSettings(origin=True, credentials=False, max_age=None),
        )
        app = create_app(settings=settings, registry=model_registry)
        app.config["TESTING"] = True
        app.host.model(Product, name="product", data_source="db")
        return app

    return _make_app


@pytest.fixture
def app(make_app):
    """Host app with the explorer mounted using default options."""
    app = make_app()
    mount_explorer(app.host)
    return app


@pytest.fixture
def client(app):
    """Test client for the default host app."""
    with app.app_context():
        yield app.test_client()
