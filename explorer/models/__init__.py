from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Argument sources that only exist inside the host and are never documented
HIDDEN_SOURCES = ("req", "res", "context")

_NO_DEFAULT = object()


def pluralize(name: str) -> str:
    """Return the English plural of a model name ("product" -> "products")."""
    if not name:
        return name
    lower = name.lower()
    if lower.endswith("y") and len(name) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


@dataclass
class PropertyDescriptor:
    """Model for a single named property of a data model"""

    name: str
    type: Union[str, List[str]] = "any"
    required: bool = False
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    default_value: Any = _NO_DEFAULT
    description: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default_value is not _NO_DEFAULT

    @classmethod
    def from_definition(cls, name: str, definition: Any) -> "PropertyDescriptor":
        """Build a property from shorthand ("string") or a definition dict.

        Dict keys follow the model-definition language of the host:
        ``type``, ``required``, ``min``, ``max``, ``default`` and
        ``description``.
        """
        if isinstance(definition, PropertyDescriptor):
            return definition
        if not isinstance(definition, dict):
            return cls(name=name, type=definition)
        return cls(
            name=name,
            type=definition.get("type", "any"),
            required=bool(definition.get("required", False)),
            minimum=definition.get("min"),
            maximum=definition.get("max"),
            default_value=definition.get("default", _NO_DEFAULT),
            description=definition.get("description"),
        )


@dataclass
class ParameterDescriptor:
    """Model for an operation argument or return value"""

    name: str
    type: Union[str, List[str]] = "any"
    required: bool = False
    description: Optional[str] = None
    source: Optional[str] = None
    root: bool = False

    @property
    def hidden(self) -> bool:
        return self.source in HIDDEN_SOURCES

    @classmethod
    def from_definition(cls, definition: Any) -> "ParameterDescriptor":
        """Accept a ParameterDescriptor or a ``{name, type, ...}`` dict.

        ``http: {source: ...}`` is understood as well as a flat ``source``.
        """
        if isinstance(definition, ParameterDescriptor):
            return definition
        http = definition.get("http") or {}
        return cls(
            name=definition.get("arg") or definition.get("name", ""),
            type=definition.get("type", "any"),
            required=bool(definition.get("required", False)),
            description=definition.get("description"),
            source=definition.get("source") or http.get("source"),
            root=bool(definition.get("root", False)),
        )


def _as_parameters(definitions) -> List[ParameterDescriptor]:
    if definitions is None:
        return []
    if isinstance(definitions, (dict, ParameterDescriptor)):
        definitions = [definitions]
    return [ParameterDescriptor.from_definition(item) for item in definitions]


@dataclass
class OperationDescriptor:
    """Model for a remotely invokable method exposed on a data model"""

    name: str
    accepts: List[ParameterDescriptor] = field(default_factory=list)
    returns: List[ParameterDescriptor] = field(default_factory=list)
    verb: str = "get"
    path: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    is_static: bool = True

    def __post_init__(self):
        self.accepts = _as_parameters(self.accepts)
        self.returns = _as_parameters(self.returns)
        self.verb = self.verb.lower()
        if self.path is None:
            self.path = f"/{self.name}"

    def referenced_types(self) -> List[str]:
        """Type names used by every argument and return value, array items unwrapped."""
        names = []
        for param in self.accepts + self.returns:
            param_type = param.type
            if isinstance(param_type, (list, tuple)):
                param_type = param_type[0] if param_type else None
            if isinstance(param_type, str) and param_type:
                names.append(param_type)
        return names


@dataclass
class ModelDescriptor:
    """Model for a named data type and the operations exposed on it"""

    name: str
    properties: Dict[str, PropertyDescriptor] = field(default_factory=dict)
    plural: Optional[str] = None
    public: bool = True
    data_source: Optional[str] = None
    description: Optional[str] = None
    operations: List[OperationDescriptor] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.properties, dict):
            self.properties = {prop.name: prop for prop in self.properties}
        self.properties = {
            name: PropertyDescriptor.from_definition(name, definition) for name, definition in self.properties.items()
        }
        if not self.plural:
            self.plural = pluralize(self.name)

    def __repr__(self):
        return f"<ModelDescriptor {self.name}>"

    @property
    def http_path(self) -> str:
        return f"/{self.plural}"

    @property
    def required_properties(self) -> List[str]:
        return [name for name, prop in self.properties.items() if prop.required]

    def get_operation(self, name: str) -> Optional[OperationDescriptor]:
        for operation in self.operations:
            if operation.name == name:
                return operation
        return None

    def remote_method(self, name: str, accepts=None, returns=None, http=None, **kwargs) -> OperationDescriptor:
        """Expose ``name`` as a remote operation of this model.

        ``http`` may carry ``verb`` and ``path`` like the host's remoting
        metadata; remaining keyword arguments go to OperationDescriptor.

        Raises:
            ValueError: If an operation with the same name is already exposed
        """
        if self.get_operation(name) is not None:
            raise ValueError(f"Operation '{name}' is already exposed on model '{self.name}'")
        http = http or {}
        operation = OperationDescriptor(
            name=name,
            accepts=accepts,
            returns=returns,
            verb=http.get("verb", kwargs.pop("verb", "get")),
            path=http.get("path", kwargs.pop("path", None)),
            **kwargs,
        )
        self.operations.append(operation)
        return operation
