import pytest

from wiregen.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    sanitize_identifier,
    split_words,
    to_camel_case,
    to_pascal_case,
    to_screaming_snake,
    to_snake_case,
)
from wiregen.codegen.languages.python.naming import constant_case, pascal_case, snake_case


@pytest.mark.parametrize(
    "name, words",
    [
        ("user_profile", ["user", "profile"]),
        ("userProfile", ["user", "profile"]),
        ("HTTPServer", ["http", "server"]),
        ("kebab-case-name", ["kebab", "case", "name"]),
        ("ALL_CAPS", ["all", "caps"]),
        ("v2Api", ["v2", "api"]),
    ],
)
def test_split_words(name, words):
    assert split_words(name) == words


def test_case_conversions():
    assert to_snake_case("UserProfile") == "user_profile"
    assert to_camel_case("user_profile") == "userProfile"
    assert to_pascal_case("user_profile") == "UserProfile"
    assert to_screaming_snake("maxRetries") == "MAX_RETRIES"
    assert to_camel_case("") == ""


def test_sanitize_identifier():
    assert sanitize_identifier("a.b") == "a_b"
    assert sanitize_identifier("9lives") == "_9lives"
    assert sanitize_identifier("___") == "name"
    assert sanitize_identifier("", fallback="module") == "module"


def test_sanitizer_escapes_keywords():
    sanitizer = NameSanitizer(reserved_words={"class"})
    assert sanitizer.sanitize_name("class") == "class_"
    assert sanitizer.sanitize_name("Class", NamingCase.PASCAL_CASE) == "Class"


def test_python_naming():
    assert pascal_case("http_status") == "HttpStatus"
    assert snake_case("from") == "from_"
    assert snake_case("isActive") == "is_active"
    assert constant_case("none") == "NONE"
