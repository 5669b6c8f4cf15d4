import pytest

from page_loader import (
    ElementPresent,
    InvalidPageDescriptorError,
    Locator,
    TitleEquals,
    UrlContains,
    actions,
    descriptor_from_dict,
    load_descriptors,
)
from page_loader.page_loader import DocumentPropertyEquals


PAGES_YAML = """
pages:
  login:
    target: /login
    verify:
      title: Login
    fields:
      email: name=email
      password: {name: password}
      submit: {css: "input[type=submit]", cached: true}
      form: {locator: "id=login"}
      inputs: {tag: input, scope: form, many: true}
  search:
    target: /search
    verify:
      element: id=results
"""


@pytest.fixture
def pages_file(tmp_path):
    path = tmp_path / "pages.yaml"
    path.write_text(PAGES_YAML, encoding="utf-8")
    return path


def test_load_descriptors_builds_every_page(pages_file):
    pages = load_descriptors(pages_file)

    assert set(pages) == {"login", "search"}
    login = pages["login"]
    assert login.name == "login"
    assert login.target == "/login"
    assert login.verification == TitleEquals("Login")
    assert pages["search"].verification == ElementPresent(Locator.by_id("results"))


def test_field_shorthands(pages_file):
    fields = load_descriptors(pages_file)["login"].fields

    assert fields["email"].locator == Locator.by_name("email")
    assert fields["password"].locator == Locator.by_name("password")
    assert fields["submit"].locator == Locator.by_css("input[type=submit]")
    assert fields["submit"].cached is True
    assert fields["form"].locator == Locator.by_id("login")
    assert fields["inputs"].scope == "form"
    assert fields["inputs"].many is True


def test_yaml_descriptor_loads_end_to_end(pages_file, loader, fake_browser):
    page = loader.load(load_descriptors(pages_file)["login"])

    page.email.invoke(actions.send_keys("a@b.com"))
    page.submit.invoke(actions.click())

    assert len(page.inputs) == 3
    assert [action for _, action in fake_browser.actions] == [
        actions.send_keys("a@b.com"),
        actions.click(),
    ]


@pytest.mark.parametrize(
    "verify, expected",
    [
        ({"url_contains": "/login"}, UrlContains("/login")),
        ({"property": {"name": "lang", "value": "en"}}, DocumentPropertyEquals("lang", "en")),
        (None, None),
    ],
)
def test_verify_conditions(verify, expected):
    descriptor = descriptor_from_dict({"target": "/x", "verify": verify})
    assert descriptor.verification == expected


@pytest.mark.parametrize(
    "data, message",
    [
        ({"fields": {}}, "missing 'target'"),
        ({"target": "/x", "verify": {"title": "a", "url_contains": "b"}}, "exactly one condition"),
        ({"target": "/x", "verify": {"smell": "fresh"}}, "unknown verify condition"),
        ({"target": "/x", "verify": {"property": {"name": "lang"}}}, "needs 'name' and 'value'"),
        ({"target": "/x", "fields": ["email"]}, "'fields' must be a mapping"),
        ({"target": "/x", "fields": {"email": "#email"}}, "page.email"),
        ({"target": "/x", "fields": {"email": {"id": "a", "css": "b"}}}, "exactly one locator strategy"),
        ({"target": "/x", "fields": {"email": {"cached": True}}}, "exactly one locator strategy"),
        ({"target": "/x", "fields": {"email": 42}}, "cannot build a locator"),
        ({"target": "/x", "fields": {"a": {"id": "a", "scope": "b"}}}, "unknown field"),
        ({"target": "/x", "fields": {"email": {"name": "email", "cahced": True}}}, "unknown field option"),
        ({"target": "/x", "fields": {"email": {"name": "email", "cached": "false"}}}, "must be true or false"),
        ({"target": "/x", "fields": {"rows": {"tag": "tr", "many": 1}}}, "must be true or false"),
        ({"target": "/x", "fields": {"email": {"name": "email", "scope": ["form"]}}}, "must be a field name"),
    ],
)
def test_malformed_descriptors_are_rejected(data, message):
    with pytest.raises(InvalidPageDescriptorError, match=message):
        descriptor_from_dict(data)


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(InvalidPageDescriptorError, match="not found"):
        load_descriptors(tmp_path / "nope.yaml")


def test_file_without_pages_is_rejected(tmp_path):
    path = tmp_path / "pages.yaml"
    path.write_text("login:\n  target: /login\n", encoding="utf-8")

    with pytest.raises(InvalidPageDescriptorError, match="'pages'"):
        load_descriptors(path)
