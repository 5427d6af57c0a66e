"""Tests for representers.view.View."""

import pytest
from jinja2 import TemplateNotFound

from representers.errors import ConfigurationError
from representers.view import View

from conftest import StubController


class TestViewConstruction:
    def test_for_controller_uses_view_paths_and_format(self, templates_path):
        controller = StubController(template_format="text")
        view = View.for_controller(controller)
        assert view.view_paths == [str(templates_path)]
        assert view.template_format == "text"
        assert view.controller is controller
        assert view.extensions == ("j2", "jinja2", "jinja")

    def test_for_controller_reads_optional_settings(self, templates_path):
        controller = StubController()
        controller.template_extensions = [".jinja"]
        controller.autoescape_formats = ["xml"]
        view = View.for_controller(controller)
        assert view.extensions == ("jinja",)
        assert view.autoescape_formats == frozenset({"xml"})

    def test_requires_view_paths(self):
        with pytest.raises(ConfigurationError):
            View([])

    def test_requires_extensions(self, templates_path):
        with pytest.raises(ConfigurationError):
            View([templates_path], extensions=())

    def test_controller_and_view_are_template_globals(self, templates_path):
        controller = StubController()
        view = View([templates_path], controller)
        assert view.env.globals["controller"] is controller
        assert view.env.globals["view"] is view


class TestTemplateNames:
    def test_candidates_in_extension_order(self, templates_path):
        view = View([templates_path], template_format="html")
        assert view.template_names("representers/book/show") == [
            "representers/book/show.html.j2",
            "representers/book/show.html.jinja2",
            "representers/book/show.html.jinja",
        ]

    def test_format_change_changes_candidates(self, templates_path):
        view = View([templates_path])
        view.template_format = "text"
        assert view.template_names("x/show")[0] == "x/show.text.j2"

    def test_name_with_extension_used_as_is(self, templates_path):
        view = View([templates_path])
        assert view.template_names("shared/banner.html.j2") == ["shared/banner.html.j2"]


class TestAutoescape:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("representers/book/show.html.j2", True),
            ("representers/book/feed.xml.j2", True),
            ("representers/book/show.text.j2", False),
            ("representers/book/show.json.j2", False),
            ("shared/banner.j2", True),
            ("shared/banner", True),
            ("representers/book/show.text.J2", False),
            (None, True),
        ],
    )
    def test_by_format_in_file_name(self, templates_path, name, expected):
        view = View([templates_path])
        assert view._autoescape(name) is expected


class TestRender:
    def test_renders_with_locals(self, templates_path, book):
        view = View([templates_path])
        html = view.render("shared/banner", {"representer": book})
        assert html == '<div class="banner">Dune &lt;Deluxe&gt;</div>'

    def test_explicit_file_name(self, templates_path, book):
        view = View([templates_path])
        html = view.render("shared/banner.html.j2", {"representer": book})
        assert "banner" in html

    def test_extend_adds_globals_and_filters(self, templates_path):
        view = View([templates_path]).extend({"shout": str.upper})
        assert view.env.globals["shout"] is str.upper
        assert view.env.filters["shout"] is str.upper

    def test_missing_template(self, templates_path):
        with pytest.raises(TemplateNotFound):
            View([templates_path]).render("nowhere/nothing")

    def test_later_view_path_is_searched(self, tmp_path, templates_path, book):
        (tmp_path / "shared").mkdir()
        view = View([tmp_path, templates_path])
        assert "banner" in view.render("shared/banner", {"representer": book})

    def test_template_without_format_part_is_escaped(self, tmp_path, book):
        (tmp_path / "shared").mkdir()
        (tmp_path / "shared" / "plain.j2").write_text("{{ representer.title }}")
        view = View([tmp_path])
        assert view.render("shared/plain.j2", {"representer": book}) == "Dune &lt;Deluxe&gt;"

    def test_earlier_view_path_wins(self, tmp_path, templates_path, book):
        (tmp_path / "shared").mkdir()
        (tmp_path / "shared" / "banner.html.j2").write_text("override {{ representer.title }}")
        view = View([tmp_path, templates_path])
        assert view.render("shared/banner", {"representer": book}) == "override Dune &lt;Deluxe&gt;"
