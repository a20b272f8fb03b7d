import jinja2
import pytest

from httprender import Templates


def test_inline_template():
    templates = Templates()

    assert templates.render("Hello {{ name }}!", {"name": "<Ada>"}) == "Hello <Ada>!"
    assert templates.render("Hello {{ name }}!", {"name": "<Ada>"}, html=True) == (
        "Hello &lt;Ada&gt;!"
    )


def test_value_is_exposed():
    templates = Templates()

    assert templates.render("{{ value|length }}", [1, 2, 3]) == "3"


def test_named_templates():
    templates = Templates(templates={"hello": "Hello {{ name }}"})
    templates.register("bye", "Bye {{ name }}")

    assert templates.render("tmpl://hello", {"name": "Ada"}) == "Hello Ada"
    assert templates.render("tmpl://bye", {"name": "Ada"}) == "Bye Ada"


def test_named_template_missing():
    with pytest.raises(jinja2.TemplateNotFound):
        Templates().render("tmpl://missing", {})


def test_directory(template_path):
    templates = Templates(directory=template_path.dirname)

    assert templates.render("tmpl://test.html", {"name": "<b>"}, html=True) == (
        "<p>&lt;b&gt;</p>"
    )


def test_registered_template_wins_over_directory(template_path):
    templates = Templates(directory=template_path.dirname)
    templates.register("test.html", "registered {{ name }}")

    assert templates.render("tmpl://test.html", {"name": "Ada"}) == "registered Ada"


def test_custom_filters():
    templates = Templates(filters={"shout": lambda s: s.upper() + "!"})

    assert templates.render("{{ name|shout }}", {"name": "ada"}) == "ADA!"
    assert templates.render("{{ name|slugify }}", {"name": "Ada Lovelace"}) == "ada-lovelace"


def test_context():
    templates = Templates(context={"site": "example"})

    assert templates.render("{{ site }}/{{ page }}", {"page": 1}) == "example/1"

    templates.context = {"page": "home"}
    assert templates.context["site"] == "example"
    assert templates.render("{{ page }}", {}, html=True) == "home"
