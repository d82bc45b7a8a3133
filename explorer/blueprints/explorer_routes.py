import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flask import Blueprint, request
from flask_cors import CORS
from flask_restx import Api, Namespace, Resource

from explorer.config import CorsSettings, get_base_path, get_protocol
from explorer.host import HostApplication
from explorer.utils import url_join
from explorer.utils.model_graph import ModelLookup
from explorer.utils.renderer import render_declaration, render_listing
from explorer.utils.url_resolver import resolve_base_url

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_PATH = "resources"


@dataclass(frozen=True)
class ApiDescriptor:
    """Everything a mounted explorer needs to answer documentation requests."""

    host: HostApplication
    rest_api_root: str
    explorer_root: str
    base_path: Optional[str] = None
    protocol: Optional[str] = None
    resource_path: str = DEFAULT_RESOURCE_PATH
    api_info: Optional[Dict[str, Any]] = None
    cors: Optional[CorsSettings] = None
    blueprint_name: str = field(default="explorer", compare=False)

    @property
    def listing_url(self) -> str:
        return url_join(self.explorer_root, self.resource_path)

    def base_url(self, req) -> str:
        return resolve_base_url(req, self.rest_api_root, base_path=self.base_path, protocol=self.protocol)

    def listing(self) -> Dict[str, Any]:
        return render_listing(self.host, self.api_info)

    def declaration(self, model_path: str, req) -> Optional[Dict[str, Any]]:
        model = self.host.find_resource(model_path)
        if model is None:
            return None
        lookup = ModelLookup.for_host(self.host)
        return render_declaration(model, self.base_url(req), lookup, api_version=self.host.version)


def _unique_blueprint_name(app) -> str:
    name = "explorer"
    index = 1
    while name in app.blueprints:
        index += 1
        name = f"explorer_{index}"
    return name


def create_explorer_blueprint(descriptor: ApiDescriptor) -> Blueprint:
    """Build the blueprint serving the resource listing and API declarations."""
    explorer_bp = Blueprint(descriptor.blueprint_name, __name__, url_prefix=descriptor.explorer_root.rstrip("/"))

    api = Api(
        explorer_bp,
        version=descriptor.host.version,
        title="API Explorer",
        description="Swagger 1.2 documentation of the REST API",
        doc=False,
        add_specs=False,
    )

    resources_ns = Namespace("resources", description="Swagger 1.2 resource listing and API declarations")
    api.add_namespace(resources_ns, path="/")

    resource_path = descriptor.resource_path.strip("/")

    @resources_ns.route(resource_path)
    class ResourceListing(Resource):
        @resources_ns.doc("get_resource_listing")
        def get(self):
            """Get the resource listing"""
            try:
                return descriptor.listing()
            except Exception as e:
                logger.error(f"Error rendering resource listing: {str(e)}", exc_info=True)
                return {"success": False, "error": str(e)}, 500

    @resources_ns.route(f"{resource_path}/<path:model_path>")
    @resources_ns.param("model_path", "Resource path of the model, e.g. products")
    class ApiDeclaration(Resource):
        @resources_ns.doc("get_api_declaration")
        def get(self, model_path):
            """Get the API declaration of one resource"""
            try:
                declaration = descriptor.declaration(model_path, request)
                if declaration is None:
                    logger.warning(f"API declaration requested for unknown resource '{model_path}'")
                    return {"success": False, "error": f"Resource '{model_path}' not found"}, 404
                return declaration
            except Exception as e:
                logger.error(f"Error rendering API declaration for {model_path}: {str(e)}", exc_info=True)
                return {"success": False, "error": str(e)}, 500

    if descriptor.cors is not None:
        allowed_methods = ", ".join(method.upper() for method in descriptor.cors.methods)

        # Registered before CORS so it runs after it: after_request hooks run in reverse
        @explorer_bp.after_request
        def add_allow_methods(response):
            """Advertise allowed methods on OPTIONS even without Access-Control-Request-Method"""
            if (
                request.method == "OPTIONS"
                and request.headers.get("Origin")
                and response.headers.get("Access-Control-Allow-Origin")
                and "Access-Control-Allow-Methods" not in response.headers
            ):
                response.headers["Access-Control-Allow-Methods"] = allowed_methods
            return response

        CORS(explorer_bp, resources={r"/.*": descriptor.cors.to_flask_cors()})

    return explorer_bp


def mount_explorer(
    host: HostApplication,
    base_path: Optional[str] = None,
    protocol: Optional[str] = None,
    resource_path: Optional[str] = None,
    api_info: Optional[Dict[str, Any]] = None,
) -> ApiDescriptor:
    """Mount the documentation endpoints on the host's Flask app.

    Args:
        host: Application whose models are documented
        base_path: Advertised basePath override, instead of the REST API root
        protocol: Advertised scheme override
        resource_path: Path segment of the listing below the explorer root
        api_info: ``info`` object of the resource listing (title, description, ...)

    Returns:
        ApiDescriptor: The mounted explorer's configuration
    """
    settings = host.settings
    descriptor = ApiDescriptor(
        host=host,
        rest_api_root=settings.rest_api_root,
        explorer_root=settings.explorer_root,
        base_path=base_path or get_base_path(),
        protocol=protocol or get_protocol(),
        resource_path=resource_path or DEFAULT_RESOURCE_PATH,
        api_info=api_info,
        cors=settings.cors_policy,
        blueprint_name=_unique_blueprint_name(host.app),
    )
    host.app.register_blueprint(create_explorer_blueprint(descriptor))
    logger.info(
        f"Explorer mounted at {descriptor.listing_url} for {descriptor.rest_api_root} "
        f"(cors={'on' if descriptor.cors else 'off'})"
    )
    return descriptor
