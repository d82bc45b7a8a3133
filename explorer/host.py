"""
Host application collaborators.

The explorer only reads from these: a process-wide ModelRegistry that every
defined model lands in, and a HostApplication that wraps a Flask app with its
own registry of attached models, its settings and its version.
"""

import logging
from typing import Dict, Iterator, List, Optional

from flask import Flask

from explorer.config import HostSettings
from explorer.models import ModelDescriptor, OperationDescriptor
from explorer.utils.introspection import model_from_sqlalchemy

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Name-indexed collection of model descriptors."""

    def __init__(self):
        self._models: Dict[str, ModelDescriptor] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __getitem__(self, name: str) -> ModelDescriptor:
        return self._models[name]

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(list(self._models.values()))

    def __len__(self) -> int:
        return len(self._models)

    def get(self, name: str) -> Optional[ModelDescriptor]:
        return self._models.get(name)

    def add(self, model: ModelDescriptor) -> ModelDescriptor:
        existing = self._models.get(model.name)
        if existing is not None and existing is not model:
            logger.debug(f"Replacing model '{model.name}' in registry")
        self._models[model.name] = model
        return model

    def create_model(self, name: str, properties=None, **settings) -> ModelDescriptor:
        """Define a model and register it without attaching it to any app."""
        return self.add(ModelDescriptor(name=name, properties=properties or {}, **settings))


# Global registry instance
registry = ModelRegistry()


def get_registry() -> ModelRegistry:
    return registry


def create_model(name: str, properties=None, **settings) -> ModelDescriptor:
    """Define a model in the global registry."""
    return registry.create_model(name, properties, **settings)


class HostApplication:
    """A Flask application exposing models over REST.

    Attached models live in ``models``; every model, attached or not, is also
    known to the global ``registry``. Visibility is tracked per host in
    ``private_models``.
    """

    def __init__(
        self,
        app: Flask,
        settings: Optional[HostSettings] = None,
        registry: Optional[ModelRegistry] = None,
        version: Optional[str] = None,
    ):
        self.app = app
        self.settings = settings or HostSettings()
        self.registry = registry if registry is not None else get_registry()
        self.models = ModelRegistry()
        self.private_models = set()
        self.version = version or getattr(app, "version", None) or "0.0.0"

    def __repr__(self):
        return f"<HostApplication {self.app.name}>"

    def model(self, model, data_source: Optional[str] = None, public: bool = True, **settings) -> ModelDescriptor:
        """Attach a model to the application.

        Args:
            model: A ModelDescriptor, or a SQLAlchemy declarative class
            data_source: Label of the data source the model is bound to
            public: Whether the model is listed in the documentation
            **settings: Extra ModelDescriptor fields when introspecting a class

        Returns:
            ModelDescriptor: The attached descriptor
        """
        if not isinstance(model, ModelDescriptor):
            model = model_from_sqlalchemy(model, **settings)
        if data_source is not None:
            model.data_source = data_source
        self.registry.add(model)
        self.models.add(model)
        if public:
            self.private_models.discard(model.name)
        else:
            self.private_models.add(model.name)
        logger.debug(f"Attached model '{model.name}' (public={public}, data_source={model.data_source})")
        return model

    def remote_method(self, model_name: str, name: str, **metadata) -> OperationDescriptor:
        """Expose an operation on an attached model."""
        model = self.models.get(model_name) or self.registry.get(model_name)
        if model is None:
            raise ValueError(f"Unknown model '{model_name}'")
        return model.remote_method(name, **metadata)

    def public_models(self) -> List[ModelDescriptor]:
        return [model for model in self.models if model.name not in self.private_models]

    def find_resource(self, model_path: str) -> Optional[ModelDescriptor]:
        """Find the public model served at ``/<model_path>`` (plural or name)."""
        model_path = model_path.strip("/")
        for model in self.public_models():
            if model_path in (model.plural, model.name):
                return model
        return None
