"""
Tests for the FastAPI glue: Controller, dependencies and middleware.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from representers import Controller, Representer, ViewContext, install_representers
from representers.deps import ControllerDep
from representers.middleware import ProblemDetail, problem_response
from representers.settings import RepresenterSettings


class WebBook(Representer, representer_name="Representers.Book"):
    pass


WebBook.model_reader("id", "title", "price")


def _load(book_id: int) -> SimpleNamespace:
    return SimpleNamespace(id=book_id, title="Dune", price="9.99")


def build_app(settings: RepresenterSettings) -> FastAPI:
    app = FastAPI()
    install_representers(app, settings, configure_logs=False)

    @app.get("/books/{book_id}", name="show_book")
    def show_book(book_id: int, controller: ControllerDep):
        return controller.render(WebBook(_load(book_id), controller), "show")

    @app.get("/books/{book_id}/edit")
    def edit_book(book_id: int, controller: ControllerDep):
        return controller.render(WebBook(_load(book_id), controller), "form")

    @app.get("/books/{book_id}/link")
    def link_book(book_id: int, controller: ControllerDep):
        return controller.render(WebBook(_load(book_id), controller), "link")

    @app.get("/books/{book_id}/missing")
    def missing(book_id: int, controller: ControllerDep):
        return controller.render(WebBook(_load(book_id), controller), "nonexistent")

    @app.get("/controller")
    def describe(controller: ControllerDep):
        return {
            "format": controller.template_format,
            "view_paths": [str(p) for p in controller.view_paths],
            "is_view_context": isinstance(controller, ViewContext),
            "verified_empty": controller.verified_request(None),
            "verified_token": controller.verified_request(controller.form_authenticity_token()),
        }

    return app


@pytest.fixture
def client(settings):
    return TestClient(build_app(settings))


class TestRendering:
    def test_renders_html(self, client):
        response = client.get("/books/1")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<h1>Dune</h1>" in response.text
        assert '<p class="price">9.99</p>' in response.text

    def test_format_query_parameter(self, client):
        response = client.get("/books/1", params={"format": "text"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.strip() == "Dune (9.99)"

    def test_url_for_in_template(self, client):
        response = client.get("/books/5/link")
        assert '<a href="http://testserver/books/5">Dune</a>' in response.text

    def test_missing_template_is_problem_response(self, client):
        response = client.get("/books/1/missing")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["title"] == "Template Not Found"
        assert "representers/book/nonexistent.html.j2" in body["detail"]
        assert body["type"] == "about:blank"
        assert body["status"] == 500
        assert body["instance"] == "http://testserver/books/1/missing"
        assert "representers/book/nonexistent.html.j2" in body["templates"]

    def test_missing_template_detail_hidden_without_debug(self, templates_path):
        client = TestClient(build_app(RepresenterSettings(view_paths=[templates_path], debug=False)))
        response = client.get("/books/1/missing")
        assert response.status_code == 500
        assert "nonexistent" not in response.json()["detail"]
        assert response.json()["templates"] == []


class TestForgeryProtection:
    def test_token_issued_and_set_as_cookie(self, client):
        response = client.get("/books/1/edit")
        token = response.cookies.get("csrf_token")
        assert token
        assert f'name="authenticity_token" value="{token}"' in response.text

    def test_token_reused_from_cookie(self, client):
        first = client.get("/books/1/edit")
        token = first.cookies.get("csrf_token")
        second = client.get("/books/1/edit")
        assert f'value="{token}"' in second.text
        assert "csrf_token" not in second.cookies

    def test_no_hidden_field_when_disabled(self, templates_path):
        settings = RepresenterSettings(view_paths=[templates_path], csrf_protection=False)
        response = TestClient(build_app(settings)).get("/books/1/edit")
        assert "authenticity_token" not in response.text

    def test_verified_request(self, client):
        body = client.get("/controller").json()
        assert body["verified_empty"] is False
        assert body["verified_token"] is True


class TestController:
    def test_describes_view_configuration(self, client, templates_path):
        body = client.get("/controller").json()
        assert body["format"] == "html"
        assert body["view_paths"] == [str(templates_path)]
        assert body["is_view_context"] is True

    def test_format_is_lowercased(self, client):
        assert client.get("/controller", params={"format": "TEXT"}).json()["format"] == "text"

    def test_explicit_format_argument(self, settings):
        request = SimpleNamespace(
            query_params={},
            state=SimpleNamespace(),
            url=SimpleNamespace(path="/"),
            cookies={},
        )
        controller = Controller(request, settings, template_format="XML")
        assert controller.template_format == "xml"
        assert "xml" in repr(controller)


class TestMiddleware:
    def test_request_id_generated(self, client):
        response = client.get("/books/1")
        assert response.headers["X-Request-ID"]

    def test_request_id_propagated(self, client):
        response = client.get("/books/1", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_settings_on_state(self, settings):
        app = build_app(settings)
        assert app.state.representer_settings is settings
        middleware = [m.cls.__name__ for m in app.user_middleware]
        assert "RequestIDMiddleware" in middleware

    def test_logging_left_to_host_by_default(self, settings):
        logger = logging.getLogger("representers")
        before = list(logger.handlers)
        install_representers(FastAPI(), settings)
        assert logger.handlers == before

    def test_configure_logs_opt_in(self, settings):
        logger = logging.getLogger("representers")
        install_representers(FastAPI(), settings, configure_logs=True)
        install_representers(FastAPI(), settings, configure_logs=True)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO


class TestProblemResponse:
    def test_body_is_problem_detail(self):
        response = problem_response(status=404, title="Missing", detail="gone", instance="/x")
        assert response.status_code == 404
        assert response.media_type == "application/problem+json"
        assert ProblemDetail.model_validate_json(response.body) == ProblemDetail(
            title="Missing", status=404, detail="gone", instance="/x"
        )
