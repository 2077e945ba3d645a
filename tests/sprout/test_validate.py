from __future__ import annotations

import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sprout.services import InvalidNameError, PlaceholderNameError, ReservedNameError
from sprout.validate import NAME_REGEX, validate_project_name

IDENTIFIER_START = string.ascii_letters + "_"
IDENTIFIER_CHARS = string.ascii_letters + string.digits + "_"
INVALID_CHARS = "-. /\\:!@#$%^&*()+=[]{}'\"<>?,;~`"


@st.composite
def names_with_invalid_character(draw: st.DrawFn) -> str:
    prefix = draw(st.text(alphabet=IDENTIFIER_CHARS, max_size=8))
    bad = draw(st.sampled_from(INVALID_CHARS))
    suffix = draw(st.text(alphabet=IDENTIFIER_CHARS, max_size=8))
    return f"{prefix}{bad}{suffix}"


@pytest.mark.parametrize("name", ["MyApp", "my_app", "_private", "App2", "AwesomeProject"])
def test_valid_names_pass(name: str) -> None:
    validate_project_name(name)


@pytest.mark.parametrize(
    "name",
    ["", None, "1App", "my-app", "my app", "app.name", "ünïcode", "MyApp\n", "\nMyApp"],
)
def test_invalid_names_raise(name: str | None) -> None:
    with pytest.raises(InvalidNameError) as exc_info:
        validate_project_name(name)
    assert exc_info.value.code == "validation_failed"
    assert "is not a valid name for a project" in exc_info.value.message


@pytest.mark.parametrize("name", ["class", "Import", "json", "OS", "sprout", "match"])
def test_reserved_names_raise(name: str) -> None:
    with pytest.raises(ReservedNameError) as exc_info:
        validate_project_name(name)
    assert name in str(exc_info.value)


@pytest.mark.parametrize("name", ["HelloWorld", "helloworld", "MyHelloWorldApp"])
def test_placeholder_names_raise(name: str) -> None:
    with pytest.raises(PlaceholderNameError):
        validate_project_name(name)


def test_placeholder_errors_are_invalid_name_errors() -> None:
    assert issubclass(PlaceholderNameError, InvalidNameError)
    assert issubclass(ReservedNameError, InvalidNameError)


@given(names_with_invalid_character())
def test_names_containing_invalid_characters_are_rejected(name: str) -> None:
    with pytest.raises(InvalidNameError):
        validate_project_name(name)


@given(
    st.tuples(
        st.sampled_from(string.digits),
        st.text(alphabet=IDENTIFIER_CHARS, max_size=10),
    ).map("".join)
)
def test_names_starting_with_digit_are_rejected(name: str) -> None:
    with pytest.raises(InvalidNameError):
        validate_project_name(name)


@given(
    st.tuples(
        st.sampled_from("Zz"),
        st.text(alphabet=IDENTIFIER_CHARS, min_size=6, max_size=16),
    ).map("".join)
)
def test_identifier_names_are_accepted_unless_reserved(name: str) -> None:
    assert NAME_REGEX.fullmatch(name)
    try:
        validate_project_name(name)
    except (ReservedNameError, PlaceholderNameError):
        pass
