"""
Tests for the Jinja2 view renderer.
"""

import pytest
from jinja2 import TemplateNotFound

from catalog.rendering import JinjaRenderer


@pytest.fixture
def renderer():
    return JinjaRenderer()


def test_renders_book_table(renderer):
    html = renderer.render("book-table", [{
        "ID": "b1",
        "BookName": "Frankenstein",
        "BookAuthor": "Mary Shelley",
        "BookEdition": "978-3-649-64609-9",
        "BookPages": "280",
    }]).decode("utf-8")

    assert "Frankenstein" in html
    assert "Mary Shelley" in html
    assert "978-3-649-64609-9" in html


def test_renders_lists(renderer):
    assert b"Edgar Allan Poe" in renderer.render("author-list", ["Edgar Allan Poe"])
    assert b"1843" in renderer.render("year-list", ["1843"])


def test_renders_pages_without_data(renderer):
    assert b"<html" in renderer.render("index", None)
    assert b"search-bar" in renderer.render("search-bar", None)


def test_escapes_html(renderer):
    html = renderer.render("author-list", ["<script>alert(1)</script>"])
    assert b"<script>alert" not in html
    assert b"&lt;script&gt;" in html


def test_unknown_template(renderer):
    with pytest.raises(TemplateNotFound):
        renderer.render("missing", None)


def test_custom_templates_dir(tmp_path):
    (tmp_path / "greeting.html").write_text("Hello {{ data }}", encoding="utf-8")

    assert JinjaRenderer(tmp_path).render("greeting", "reader") == b"Hello reader"
