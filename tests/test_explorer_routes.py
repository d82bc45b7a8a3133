"""
Explorer endpoint testing.

This module exercises the documentation endpoints end to end through the
Flask test client: basePath resolution, model definitions, media types,
referenced models and cross-origin headers.
"""

import re
from urllib.parse import urlparse

from explorer import mount_explorer
from explorer.config import CorsSettings


def get_swagger_resources(client, explorer_root="/explorer", class_path="", headers=None):
    url = f"{explorer_root.rstrip('/')}/resources{class_path}"
    response = client.get(url, headers={"Accept": "application/json", **(headers or {})})
    assert response.status_code == 200
    assert "json" in response.content_type
    return response.get_json()


def get_api_declaration(client, class_name, headers=None):
    return get_swagger_resources(client, class_path=f"/{class_name}", headers=headers)


class TestBasePath:
    """Test the basePath advertised by the documents."""

    def test_no_base_path_on_resource_listing(self, client):
        """Test that the resource listing has no basePath in Swagger 1.2."""
        listing = get_swagger_resources(client)
        assert "basePath" not in listing

    def test_default_base_path(self, client):
        """Test that basePath is http://{host}/api by default."""
        declaration = get_api_declaration(client, "products")
        assert declaration["basePath"] == "http://localhost/api"

    def test_base_path_override(self, make_app):
        """Test that an explicit basePath wins over the REST API root."""
        app = make_app(rest_api_root="/other-root")
        mount_explorer(app.host, base_path="/api-root")

        declaration = get_api_declaration(app.test_client(), "products")
        assert declaration["basePath"] == "http://localhost/api-root"

    def test_base_path_inferred_from_rest_api_root(self, make_app):
        """Test that basePath follows a custom REST API root."""
        app = make_app(rest_api_root="/custom-api-root")
        mount_explorer(app.host)

        declaration = get_api_declaration(app.test_client(), "products")
        assert declaration["basePath"] == "http://localhost/custom-api-root"

    def test_reachable_when_explorer_root_changes(self, make_app):
        """Test that the explorer can be mounted somewhere other than /explorer."""
        app = make_app(explorer_root="/erforscher")
        mount_explorer(app.host)
        client = app.test_client()

        listing = get_swagger_resources(client, "/erforscher")
        assert listing["apis"]

        declaration = get_swagger_resources(client, "/erforscher", "/products")
        assert isinstance(declaration["basePath"], str)
        assert declaration["basePath"] == "http://localhost/api"

        assert client.get("/explorer/resources").status_code == 404

    def test_hardcoded_protocol(self, make_app):
        """Test that a configured protocol is used behind an SSL terminator."""
        app = make_app()
        mount_explorer(app.host, protocol="https")

        declaration = get_api_declaration(app.test_client(), "products")
        assert urlparse(declaration["basePath"]).scheme == "https"

    def test_forwarded_host(self, client):
        """Test that X-Forwarded-Host is honored behind a proxy."""
        declaration = get_api_declaration(client, "products", headers={"X-Forwarded-Host": "example.com"})
        assert urlparse(declaration["basePath"]).hostname == "example.com"

    def test_forwarded_host_with_protocol_override(self, make_app):
        """Test that the protocol override still applies to a forwarded host."""
        app = make_app()
        mount_explorer(app.host, protocol="https")

        declaration = get_api_declaration(
            app.test_client(), "products", headers={"X-Forwarded-Host": "example.com", "X-Forwarded-Proto": "http"}
        )
        assert declaration["basePath"] == "https://example.com/api"


class TestModelDefinition:
    """Test the model definitions in API declarations."""

    def test_basic_attributes(self, client):
        """Test that basic attributes are rendered properly."""
        data = get_api_declaration(client, "products")["models"]["product"]

        assert data["id"] == "product"
        assert sorted(data["required"]) == sorted(["aNum", "foo"])
        assert data["properties"]["foo"]["type"] == "string"
        assert data["properties"]["bar"]["type"] == "string"
        assert data["properties"]["aNum"]["type"] == "number"
        # Bounds are strings in Swagger 1.2
        assert data["properties"]["aNum"]["minimum"] == "1"
        assert data["properties"]["aNum"]["maximum"] == "10"
        # The default stays a number
        assert data["properties"]["aNum"]["defaultValue"] == 5
        assert not isinstance(data["properties"]["aNum"]["defaultValue"], str)

    def test_property_required_flags(self, client):
        """Test that per-property required flags mirror the definition."""
        properties = get_api_declaration(client, "products")["models"]["product"]["properties"]

        assert properties["foo"]["required"] is True
        assert properties["aNum"]["required"] is True
        assert properties["bar"]["required"] is False
        assert properties["id"]["required"] is False

    def test_includes_consumes(self, client):
        """Test that the declaration lists the accepted content types."""
        declaration = get_api_declaration(client, "products")
        assert sorted(declaration["consumes"]) == sorted(
            ["application/json", "application/x-www-form-urlencoded", "application/xml", "text/xml"]
        )

    def test_includes_produces(self, client):
        """Test that the declaration lists the produced content types, JSONP included."""
        declaration = get_api_declaration(client, "products")
        assert sorted(declaration["produces"]) == sorted(
            ["application/json", "application/xml", "text/xml", "application/javascript", "text/javascript"]
        )


class TestReferencedModels:
    """Test that models used by operations are described."""

    def test_includes_models_from_accepts(self, make_app, model_registry):
        """Test that a private app model used as an argument is included."""
        app = make_app()
        app.host.model(model_registry.create_model("Image"), data_source="db", public=False)
        app.host.remote_method("product", "setImage", accepts={"name": "image", "type": "Image"})
        mount_explorer(app.host)

        declaration = get_api_declaration(app.test_client(), "products")
        assert "Image" in declaration["models"]

    def test_includes_models_from_returns(self, make_app, model_registry):
        """Test that a private app model used as a return value is included."""
        app = make_app()
        app.host.model(model_registry.create_model("Image"), data_source="db", public=False)
        app.host.remote_method("product", "getImage", returns={"name": "image", "type": "Image"})
        mount_explorer(app.host)

        declaration = get_api_declaration(app.test_client(), "products")
        assert "Image" in declaration["models"]

    def test_includes_accepts_models_not_attached_to_app(self, make_app, model_registry):
        """Test that a model only defined globally is still included."""
        app = make_app()
        model_registry.create_model("Image")
        app.host.remote_method("product", "setImage", accepts={"name": "image", "type": "Image"})
        mount_explorer(app.host)

        declaration = get_api_declaration(app.test_client(), "products")
        assert "Image" in declaration["models"]

    def test_private_models_not_listed(self, make_app, model_registry):
        """Test that private models are left out of the resource listing."""
        app = make_app()
        app.host.model(model_registry.create_model("Image"), data_source="db", public=False)
        mount_explorer(app.host)
        client = app.test_client()

        listing = get_swagger_resources(client)
        assert [api["path"] for api in listing["apis"]] == ["/products"]
        assert client.get("/explorer/resources/images").status_code == 404


class TestOperations:
    """Test the operations listed in API declarations."""

    def test_operation_routes(self, make_app):
        """Test that operations are rendered under their route paths."""
        app = make_app()
        app.host.remote_method(
            "product",
            "findById",
            accepts=[{"arg": "id", "type": "number", "required": True}],
            returns={"arg": "data", "type": "product", "root": True},
            http={"verb": "get", "path": "/:id"},
            description="Find a product by id",
        )
        mount_explorer(app.host)

        apis = get_api_declaration(app.test_client(), "products")["apis"]
        assert apis[0]["path"] == "/products/{id}"
        operation = apis[0]["operations"][0]
        assert operation["method"] == "GET"
        assert operation["type"] == "product"
        assert operation["summary"] == "Find a product by id"
        assert operation["parameters"][0]["paramType"] == "path"

    def test_unknown_resource_returns_404(self, client):
        """Test that an unknown resource yields a JSON 404."""
        response = client.get("/explorer/resources/unicorns")
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestCrossOriginResourceSharing:
    """Test cross-origin headers on the documentation endpoints."""

    def test_allows_cross_origin_requests_by_default(self, client):
        """Test that a preflight request is allowed by default."""
        response = client.options(
            "/explorer/resources",
            headers={"Origin": "http://example.com/", "Access-Control-Request-Method": "GET"},
        )
        assert response.status_code == 200
        assert re.match(r"^http://example\.com/|\*", response.headers["Access-Control-Allow-Origin"])
        assert re.search(r"\bGET\b", response.headers["Access-Control-Allow-Methods"])

    def test_options_with_origin_only(self, client):
        """Test that an OPTIONS request without a requested method still lists allowed methods."""
        response = client.options("/explorer/resources", headers={"Origin": "http://example.com/"})
        assert response.status_code == 200
        assert re.match(r"^http://example\.com/|\*", response.headers["Access-Control-Allow-Origin"])
        assert re.search(r"\bGET\b", response.headers["Access-Control-Allow-Methods"])

    def test_cross_origin_get(self, client):
        """Test that a simple cross-origin GET carries the allow-origin header."""
        response = client.get("/explorer/resources/products", headers={"Origin": "http://example.com"})
        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] in ("http://example.com", "*")

    def test_can_be_disabled_by_configuration(self, make_app):
        """Test that origin=False removes the allow-origin header."""
        app = make_app(cors=CorsSettings(origin=False))
        mount_explorer(app.host)

        response = app.test_client().options(
            "/explorer/resources",
            headers={"Origin": "http://example.com/", "Access-Control-Request-Method": "GET"},
        )
        assert "Access-Control-Allow-Origin" not in response.headers

    def test_disabled_with_cors_false(self, make_app):
        """Test that cors=False disables cross-origin headers entirely."""
        app = make_app(cors=False)
        mount_explorer(app.host)

        response = app.test_client().get("/explorer/resources", headers={"Origin": "http://example.com"})
        assert response.status_code == 200
        assert "Access-Control-Allow-Origin" not in response.headers
