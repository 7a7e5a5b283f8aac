import logging
from types import SimpleNamespace

import pytest
from flask import Flask, request
from werkzeug.exceptions import Forbidden

from jsonapi_fmt import JSONAPI_MEDIA_TYPE, JsonApiMiddleware, JsonApiResponse, ScalarEntity
from jsonapi_fmt.middleware import uri_to_string


def _links(response) -> dict:
    return response.get_json()["links"]


def test_uri_to_string_adds_leading_slash() -> None:
    assert uri_to_string("articles") == "/articles"
    assert uri_to_string("/articles", "page[offset]=0", "top") == "/articles?page[offset]=0#top"
    assert uri_to_string("/articles", "", "") == "/articles"


def test_collection_document(client) -> None:
    response = client.get("/articles")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE

    document = response.get_json()
    assert document["jsonapi"] == {"version": "1.0"}
    assert document["meta"] == {"author": "Jane Doe", "totalCount": 3}
    assert document["links"] == {"self": "/articles"}
    assert [item["id"] for item in document["data"]] == ["1", "2", "3"]
    assert document["data"][0]["attributes"] == {"title": "JSON:API paints my bikeshed!"}
    assert document["data"][0]["links"] == {"self": "/articles/1"}
    assert "included" not in document


def test_meta_authors_and_copyright(app: Flask) -> None:
    app.config.update(JSONAPI_META_AUTHOR=["Jane Doe", "Dan Gebhardt"], JSONAPI_META_COPYRIGHT="Example Corp.")
    document = app.test_client().get("/articles/2").get_json()
    assert document["meta"] == {"authors": ["Jane Doe", "Dan Gebhardt"], "copyright": "Example Corp."}


def test_constructor_meta_overrides_config(schemas) -> None:
    app = Flask("meta_app")
    app.config.update(JSONAPI_META_AUTHOR="Config Author")
    JsonApiMiddleware(app, schemas=schemas, meta_author="Explicit Author", meta_copyright="2024")

    @app.route("/nothing")
    def nothing():
        return JsonApiResponse(entity=ScalarEntity(None))

    document = app.test_client().get("/nothing").get_json()
    assert document["meta"] == {"author": "Explicit Author", "copyright": "2024"}
    assert document["data"] is None


def test_self_link_keeps_query(client) -> None:
    response = client.get("/articles/2?fields=title")
    assert _links(response)["self"] == "/articles/2?fields=title"


def test_pagination_round_up_quirk(app: Flask) -> None:
    app.config["ARTICLES_TOTAL"] = 95
    response = app.test_client().get("/articles?page[offset]=20&page[limit]=20")

    document = response.get_json()
    assert document["meta"]["totalCount"] == 95
    assert document["links"] == {
        "self": "/articles?page[offset]=20&page[limit]=20",
        "first": "/articles?page[offset]=0&page[limit]=20",
        "prev": "/articles?page[offset]=0&page[limit]=20",
        "next": "/articles?page[offset]=40&page[limit]=20",
        # round(95 / 20) * 20, one page past the data
        "last": "/articles?page[offset]=100&page[limit]=20",
    }


def test_pagination_exact_multiple(app: Flask) -> None:
    app.config["ARTICLES_TOTAL"] = 100
    links = _links(app.test_client().get("/articles?page[offset]=0&page[limit]=20"))

    assert "prev" not in links
    assert links["next"] == "/articles?page[offset]=20&page[limit]=20"
    assert links["last"] == "/articles?page[offset]=80&page[limit]=20"


def test_pagination_last_page_has_no_next(app: Flask) -> None:
    app.config["ARTICLES_TOTAL"] = 100
    links = _links(app.test_client().get("/articles?page[offset]=80&page[limit]=20"))

    assert links["prev"] == "/articles?page[offset]=60&page[limit]=20"
    assert "next" not in links
    assert set(links) == {"self", "first", "prev", "last"}


def test_pagination_replaces_the_query(app: Flask) -> None:
    app.config["ARTICLES_TOTAL"] = 100
    links = _links(app.test_client().get("/articles?sort=title&page[offset]=0&page[limit]=20"))
    assert links["self"] == "/articles?page[offset]=0&page[limit]=20"


def test_pagination_requires_offset_and_limit(app: Flask) -> None:
    app.config["ARTICLES_TOTAL"] = 100
    links = _links(app.test_client().get("/articles?page[limit]=20"))
    assert links == {"self": "/articles?page[limit]=20"}


def test_include_side_loads_related_resources(client) -> None:
    document = client.get("/articles/1?include=author,comments.author").get_json()

    assert document["data"]["relationships"]["author"] == {
        "links": {"self": "/articles/1/relationships/author", "related": "/articles/1/author"},
        "data": {"type": "people", "id": "9"},
    }
    included = [(item["type"], item["id"]) for item in document["included"]]
    assert sorted(included) == [("comments", "12"), ("comments", "5"), ("people", "2"), ("people", "9")]
    assert len(included) == len(set(included))


def test_without_include_there_is_no_included_member(client) -> None:
    document = client.get("/articles/1").get_json()
    assert "included" not in document
    assert document["data"]["relationships"]["comments"]["data"] == [
        {"type": "comments", "id": "5"},
        {"type": "comments", "id": "12"},
    ]


def test_relationship_endpoint_uses_related_self_link(client) -> None:
    document = client.get("/articles/1/relationships/author").get_json()

    assert document["data"] == {"type": "people", "id": "9"}
    assert document["links"] == {
        "self": "/articles/1/relationships/author",
        "related": "/people/9",
    }


def test_relationship_endpoint_resolves_related_route(client) -> None:
    document = client.get("/articles/1/relationships/comments").get_json()

    assert document["data"] == [{"type": "comments", "id": "5"}, {"type": "comments", "id": "12"}]
    assert document["links"]["related"] == "/articles/1/comments"


def test_relationship_endpoint_without_related_route(client) -> None:
    # /articles/1/tags only accepts POST
    document = client.get("/articles/1/relationships/tags").get_json()

    assert document["data"] == [{"type": "tags", "id": "api"}, {"type": "tags", "id": "rest"}]
    assert "related" not in document["links"]


def test_relationship_endpoint_ignores_include(client) -> None:
    document = client.get("/articles/1/relationships/author?include=comments").get_json()
    assert "included" not in document
    assert "attributes" not in document["data"]


def test_single_error(client) -> None:
    response = client.get("/fail/single")

    assert response.status_code == 422
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE
    errors = response.get_json()["errors"]
    assert errors == [
        {
            "status": "422",
            "code": "422",
            "title": "Invalid attribute",
            "detail": "Title can't be empty",
            "source": {"pointer": "/data/attributes/title"},
        }
    ]


def test_domain_not_found(client) -> None:
    response = client.get("/articles/77")
    assert response.status_code == 404
    assert response.get_json()["errors"][0]["detail"] == "Article 77 was not found"


def test_multiple_errors_keep_order(client) -> None:
    response = client.get("/fail/multiple")

    assert response.status_code == 422
    errors = response.get_json()["errors"]
    assert [error["code"] for error in errors] == ["422", "400"]
    assert [error["source"]["pointer"] for error in errors] == ["/data/attributes/title", "/data/attributes/body"]


def test_http_exception(client) -> None:
    response = client.get("/fail/abort")

    assert response.status_code == 403
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE
    (error,) = response.get_json()["errors"]
    assert error["status"] == error["code"] == "403"
    assert error["title"] == "Forbidden"
    assert error["detail"] == Forbidden.description


def test_routing_not_found(client) -> None:
    response = client.get("/does/not/exist")

    assert response.status_code == 404
    (error,) = response.get_json()["errors"]
    assert error["code"] == "404"
    assert error["title"] == "Not Found"


def test_routing_method_not_allowed(client) -> None:
    response = client.delete("/articles")
    assert response.status_code == 405
    assert response.get_json()["errors"][0]["code"] == "405"


def test_unclassified_error(client, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="jsonapi_fmt"):
        response = client.get("/fail/crash")

    assert response.status_code == 500
    (error,) = response.get_json()["errors"]
    assert error == {
        "status": "500",
        "code": "42",
        "title": "Server error",
        "detail": "There was a server error, please try again later",
    }
    assert "database is on fire" not in response.get_data(as_text=True)
    records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(records) == 1
    assert "database is on fire" in records[0].getMessage()
    assert "42" in records[0].getMessage()


def test_unclassified_error_without_code(client) -> None:
    response = client.get("/fail/uncoded")

    assert response.status_code == 500
    assert response.get_json()["errors"][0]["code"] == "0"


def test_unclassified_error_uses_given_logger(schemas, app: Flask) -> None:
    messages = []
    logger = SimpleNamespace(error=messages.append, debug=messages.append)
    middleware = JsonApiMiddleware(schemas=schemas, logger=logger)

    def handler(req):
        raise RuntimeError("boom")

    with app.test_request_context("/anything"):
        response = middleware.process(request, handler)

    assert response.status_code == 500
    assert any("boom" in message for message in messages)


def test_missing_schema_is_a_server_error(app: Flask) -> None:
    middleware = JsonApiMiddleware()

    def handler(req):
        return JsonApiResponse(entity=ScalarEntity(object()))

    with app.test_request_context("/anything"):
        response = middleware.process(request, handler)

    assert response.status_code == 500
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE


@pytest.mark.parametrize("path", ["/plain", "/empty"])
def test_content_type_is_always_set(client, path: str) -> None:
    response = client.get(path)
    assert response.status_code == 200
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE


def test_non_entity_response_body_is_untouched(client) -> None:
    assert client.get("/plain").get_data(as_text=True) == "hello"
    assert client.get("/empty").get_data(as_text=True) == ""


def test_compact_output(app: Flask) -> None:
    app.config["JSONAPI_PRETTY_PRINT"] = False
    body = app.test_client().get("/articles/2").get_data(as_text=True)
    assert "\n" not in body


def test_pretty_output(client) -> None:
    body = client.get("/articles/2").get_data(as_text=True)
    assert '\n    "jsonapi"' in body


def test_extension_is_registered(app: Flask) -> None:
    assert isinstance(app.extensions["jsonapi_fmt"], JsonApiMiddleware)


def test_strict_slash_redirect_keeps_location(app: Flask) -> None:
    @app.route("/people/")
    def people_list():
        return JsonApiResponse(entity=ScalarEntity([]))

    response = app.test_client().get("/people")

    assert response.status_code == 308
    assert response.headers["Location"].endswith("/people/")
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE


def test_method_not_allowed_keeps_allow_header(client) -> None:
    response = client.post("/articles")

    assert response.status_code == 405
    assert "GET" in response.headers["Allow"]
    assert response.headers["Content-Type"] == JSONAPI_MEDIA_TYPE
    assert response.get_json()["errors"][0]["title"] == "Method Not Allowed"
