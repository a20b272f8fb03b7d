import pytest
from starlette.datastructures import MutableHeaders

from httprender.params import Header, Headers, Status, Template, apply, normalize, pop_template


def test_normalize_loose_params():
    params = normalize([201, "X-Foo", "bar", {"X-Bar": "baz"}])

    assert params == [Status(201), Header("X-Foo", "bar"), Headers({"X-Bar": "baz"})]


def test_normalize_drops_unpaired_name():
    assert normalize(["X-Foo"]) == []


def test_normalize_rejects_unknown_params():
    with pytest.raises(TypeError):
        normalize([1.5])

    with pytest.raises(TypeError):
        normalize([True])


def test_apply_first_status_wins():
    headers = MutableHeaders()

    assert apply(headers, [0, Status(201), 404]) == 201
    assert apply(headers, []) == 0


def test_apply_headers_in_order():
    headers = MutableHeaders()

    apply(
        headers,
        [
            Header("X-Foo", "one"),
            "X-Foo",
            "two",
            Headers({"X-Bar": "three"}),
        ],
    )

    assert headers["x-foo"] == "two"
    assert headers["x-bar"] == "three"


def test_apply_order_independent():
    first, second = MutableHeaders(), MutableHeaders()

    assert apply(first, ["X-Foo", "bar", 201]) == apply(second, [201, "X-Foo", "bar"])
    assert first == second


def test_pop_template():
    source, remaining = pop_template([Status(201), Template("{{ a }}"), Template("{{ b }}")])

    assert source == "{{ a }}"
    assert remaining == [Status(201)]


def test_pop_template_without_template():
    source, remaining = pop_template(["X-Foo", "bar"])

    assert source is None
    assert remaining == [Header("X-Foo", "bar")]


def test_apply_stringifies_header_values():
    headers = MutableHeaders()

    apply(headers, [Headers({"X-Count": 3}), {"X-Flag": True}, Header("X-Id", 7)])

    assert headers["x-count"] == "3"
    assert headers["x-flag"] == "True"
    assert headers["x-id"] == "7"
