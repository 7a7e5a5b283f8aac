from typing import Any, Optional

import pytest
from flask import Flask, abort, current_app

from jsonapi_fmt import (
    RELATIONSHIP_DATA,
    HasIdentifier,
    JsonApiErrorException,
    JsonApiMiddleware,
    JsonApiMultipleErrorException,
    JsonApiResponse,
    ResourceSchema,
    ResponseAttributes,
    ScalarEntity,
    SchemaContainer,
)


class Person(HasIdentifier):
    def __init__(self, id: int, name: str) -> None:
        self.id = id
        self.name = name

    def get_id(self) -> int:
        return self.id


class Comment(HasIdentifier):
    def __init__(self, id: int, body: str, author: Person) -> None:
        self.id = id
        self.body = body
        self.author = author

    def get_id(self) -> int:
        return self.id


class Tag(HasIdentifier):
    def __init__(self, id: str) -> None:
        self.id = id

    def get_id(self) -> str:
        return self.id


class Article(HasIdentifier):
    def __init__(self, id: int, title: str, author: Person, comments: Optional[list] = None, tags: Optional[list] = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.comments = comments or []
        self.tags = tags or []

    def get_id(self) -> int:
        return self.id


class PersonSchema(ResourceSchema):
    type = "people"

    def get_attributes(self, resource: Person, context: Any) -> dict:
        return {"name": resource.name}


class CommentSchema(ResourceSchema):
    type = "comments"

    def get_attributes(self, resource: Comment, context: Any) -> dict:
        return {"body": resource.body}

    def get_relationships(self, resource: Comment, context: Any) -> dict:
        return {"author": {RELATIONSHIP_DATA: resource.author}}


class TagSchema(ResourceSchema):
    type = "tags"

    def get_attributes(self, resource: Tag, context: Any) -> dict:
        return {}


class ArticleSchema(ResourceSchema):
    type = "articles"

    def get_attributes(self, resource: Article, context: Any) -> dict:
        return {"title": resource.title}

    def get_relationships(self, resource: Article, context: Any) -> dict:
        return {
            "author": {RELATIONSHIP_DATA: resource.author},
            "comments": {RELATIONSHIP_DATA: resource.comments},
        }


class CodedError(Exception):
    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


@pytest.fixture
def people() -> dict:
    return {9: Person(9, "Dan Gebhardt"), 2: Person(2, "Jane Doe")}


@pytest.fixture
def articles(people: dict) -> list:
    comments = [Comment(5, "First!", people[2]), Comment(12, "I like XML better", people[9])]
    return [
        Article(1, "JSON:API paints my bikeshed!", people[9], comments, [Tag("api"), Tag("rest")]),
        Article(2, "Rails is Omakase", people[2]),
        Article(3, "Flask is fine too", people[9]),
    ]


@pytest.fixture
def schemas() -> SchemaContainer:
    return SchemaContainer(
        {
            Person: PersonSchema(),
            Comment: CommentSchema(),
            Tag: TagSchema(),
            Article: ArticleSchema(),
        }
    )


@pytest.fixture
def app(schemas: SchemaContainer, articles: list) -> Flask:
    app = Flask("jsonapi_fmt_test_app")
    app.config.update(TESTING=True, JSONAPI_META_AUTHOR="Jane Doe")
    JsonApiMiddleware(app, schemas=schemas)

    def get_article(article_id: int) -> Article:
        for article in articles:
            if article.id == article_id:
                return article
        raise JsonApiErrorException(404, "Not found", f"Article {article_id} was not found")

    @app.route("/articles")
    def article_list():
        response = JsonApiResponse(entity=ScalarEntity(articles))
        return response.with_attribute(ResponseAttributes.ATTR_TOTAL_COUNT, current_app.config.get("ARTICLES_TOTAL", len(articles)))

    @app.route("/articles/<int:article_id>")
    def article_detail(article_id: int):
        return JsonApiResponse(entity=ScalarEntity(get_article(article_id)))

    @app.route("/articles/<int:article_id>/relationships/author")
    def article_author_relationship(article_id: int):
        return JsonApiResponse(entity=ScalarEntity(get_article(article_id).author))

    @app.route("/articles/<int:article_id>/relationships/comments")
    def article_comments_relationship(article_id: int):
        return JsonApiResponse(entity=ScalarEntity(get_article(article_id).comments))

    @app.route("/articles/<int:article_id>/comments")
    def article_comments(article_id: int):
        return JsonApiResponse(entity=ScalarEntity(get_article(article_id).comments))

    @app.route("/articles/<int:article_id>/relationships/tags")
    def article_tags_relationship(article_id: int):
        return JsonApiResponse(entity=ScalarEntity(get_article(article_id).tags))

    @app.route("/articles/<int:article_id>/tags", methods=["POST"])
    def article_tags_create(article_id: int):
        return JsonApiResponse(status=201)

    @app.route("/fail/single")
    def fail_single():
        raise JsonApiErrorException(
            422,
            "Invalid attribute",
            "Title can't be empty",
            {"pointer": "/data/attributes/title"},
        )

    @app.route("/fail/multiple")
    def fail_multiple():
        errors = JsonApiMultipleErrorException()
        errors.add_error(422, "Missing required attribute", "Title is required", {"pointer": "/data/attributes/title"})
        errors.add_error(400, "Invalid attribute", "Body should be a string", {"pointer": "/data/attributes/body"})
        raise errors

    @app.route("/fail/abort")
    def fail_abort():
        abort(403)

    @app.route("/fail/crash")
    def fail_crash():
        raise CodedError("database is on fire", 42)

    @app.route("/fail/uncoded")
    def fail_uncoded():
        raise KeyError("secret")

    @app.route("/plain")
    def plain():
        return "hello"

    @app.route("/empty")
    def empty():
        return JsonApiResponse()

    return app


@pytest.fixture
def client(app: Flask):
    return app.test_client()
