import pytest

from basnet.http.mime_types import extension_to_type


@pytest.mark.parametrize(
    "extension, expected",
    [
        ("gif", "image/gif"),
        ("htm", "text/html"),
        ("html", "text/html"),
        ("jpg", "image/jpeg"),
        ("png", "image/png"),
    ],
)
def test_known_extensions(extension, expected):
    assert extension_to_type(extension) == expected


@pytest.mark.parametrize("extension", ["", "txt", "jpeg", "tar.gz"])
def test_unknown_extension_is_plain_text(extension):
    assert extension_to_type(extension) == "text/plain"


def test_lookup_is_case_sensitive():
    assert extension_to_type("GIF") == "text/plain"
    assert extension_to_type("Html") == "text/plain"