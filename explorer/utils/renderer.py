"""
Swagger 1.2 document rendering.

Builds the resource listing and the per-resource API declarations from
model and operation descriptors. Numeric bounds are emitted as strings while
default values keep their JSON type; clients of the 1.2 format rely on both.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from explorer.models import ModelDescriptor, OperationDescriptor, ParameterDescriptor, PropertyDescriptor
from explorer.utils import convert_path_fragments, path_parameter_names, url_join
from explorer.utils.media_types import consumes, produces
from explorer.utils.model_graph import ModelLookup, collect_models

logger = logging.getLogger(__name__)

SWAGGER_VERSION = "1.2"

# Host type names mapped to the Swagger 1.2 primitive vocabulary
PRIMITIVE_TYPES = {
    "string": "string",
    "str": "string",
    "text": "string",
    "number": "number",
    "integer": "number",
    "int": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "boolean": "boolean",
    "bool": "boolean",
    "date": "date",
    "datetime": "date",
    "any": "object",
    "object": "object",
    "array": "array",
    "void": "void",
}

# Verbs whose undeclared arguments travel in the query string
QUERY_VERBS = ("get", "head", "delete")


def swagger_type(type_name: Any) -> str:
    """Map a host type name to its Swagger name; unknown names pass through as model references."""
    if not isinstance(type_name, str) or not type_name:
        return "object"
    return PRIMITIVE_TYPES.get(type_name.lower(), type_name)


def type_spec(type_name: Any) -> Dict[str, Any]:
    """Render ``type`` (and ``items`` for ``[T]`` array types)."""
    if isinstance(type_name, (list, tuple)):
        item_type = type_name[0] if type_name else "any"
        return {"type": "array", "items": {"type": swagger_type(item_type)}}
    return {"type": swagger_type(type_name)}


def format_bound(value) -> str:
    """Stringify a numeric bound the way a JavaScript client would (``1``, not ``1.0``)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def render_property(prop: PropertyDescriptor) -> Dict[str, Any]:
    rendered = type_spec(prop.type)
    rendered["required"] = bool(prop.required)
    if prop.description:
        rendered["description"] = prop.description
    if prop.minimum is not None:
        rendered["minimum"] = format_bound(prop.minimum)
    if prop.maximum is not None:
        rendered["maximum"] = format_bound(prop.maximum)
    if prop.has_default:
        rendered["defaultValue"] = prop.default_value
    return rendered


def render_model(model: ModelDescriptor) -> Dict[str, Any]:
    """Render a model schema: ``{id, properties, required}``."""
    schema = {
        "id": model.name,
        "properties": {name: render_property(prop) for name, prop in model.properties.items()},
        "required": model.required_properties,
    }
    if model.description:
        schema["description"] = model.description
    return schema


def parameter_type(param: ParameterDescriptor, verb: str, path_params: List[str]) -> str:
    if param.name in path_params:
        return "path"
    if param.source in ("path", "query", "body", "form", "header"):
        return param.source
    return "query" if verb in QUERY_VERBS else "form"


def render_parameter(param: ParameterDescriptor, verb: str, path_params: List[str]) -> Dict[str, Any]:
    rendered = {
        "paramType": parameter_type(param, verb, path_params),
        "name": param.name,
        "description": param.description or "",
        "required": bool(param.required) or param.name in path_params,
        "allowMultiple": False,
    }
    rendered.update(type_spec(param.type))
    return rendered


def operation_type(operation: OperationDescriptor) -> Dict[str, Any]:
    """Response type: the root return value, an object for named returns, or void."""
    if not operation.returns:
        return {"type": "void"}
    for returned in operation.returns:
        if returned.root:
            return type_spec(returned.type)
    return {"type": "object"}


def operation_route(model: ModelDescriptor, operation: OperationDescriptor) -> str:
    return url_join(model.http_path, operation.path or f"/{operation.name}")


def render_operation(model: ModelDescriptor, operation: OperationDescriptor, route: str) -> Dict[str, Any]:
    path_params = path_parameter_names(route)
    nickname = operation.name if operation.is_static else f"prototype_{operation.name}"
    rendered = {
        "method": operation.verb.upper(),
        "nickname": f"{model.plural}_{nickname}",
        "summary": operation.description or "",
        "notes": operation.notes or "",
        "parameters": [
            render_parameter(param, operation.verb, path_params) for param in operation.accepts if not param.hidden
        ],
        "responseMessages": [],
    }
    rendered.update(operation_type(operation))
    return rendered


def render_apis(model: ModelDescriptor) -> List[Dict[str, Any]]:
    """Group the model's operations by route path, in declaration order."""
    routes = OrderedDict()
    for operation in model.operations:
        route = operation_route(model, operation)
        routes.setdefault(route, []).append(render_operation(model, operation, route))
    return [{"path": convert_path_fragments(route), "operations": operations} for route, operations in routes.items()]


def render_listing(host, api_info: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Render the resource listing for a host application.

    The listing deliberately carries no ``basePath``; each declaration does.
    """
    listing = {
        "swaggerVersion": SWAGGER_VERSION,
        "apiVersion": host.version,
        "apis": [{"path": model.http_path, "description": model.description or ""} for model in host.public_models()],
    }
    if api_info:
        listing["info"] = dict(api_info)
    return listing


def render_declaration(
    model: ModelDescriptor, base_url: str, lookup: ModelLookup, api_version: Optional[str] = None
) -> Dict[str, Any]:
    """Render the API declaration of one resource.

    Args:
        model: Model the resource is built on
        base_url: Resolved absolute basePath of the REST API
        lookup: Where referenced model names are resolved
        api_version: Version string of the documented API

    Returns:
        Dict[str, Any]: Swagger 1.2 API declaration
    """
    models = collect_models(model, lookup)
    return {
        "swaggerVersion": SWAGGER_VERSION,
        "apiVersion": api_version,
        "basePath": base_url,
        "resourcePath": model.http_path,
        "apis": render_apis(model),
        "models": {name: render_model(collected) for name, collected in models.items()},
        "consumes": consumes(),
        "produces": produces(),
    }
