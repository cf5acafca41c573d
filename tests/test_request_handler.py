from urllib.parse import quote

import pytest

from basnet.http.reply import Header, Reply, Status
from basnet.http.request_handler import RequestHandler, url_decode


def test_url_decode_plain_text_unchanged():
    assert url_decode("/index.html") == "/index.html"


def test_url_decode_plus_is_space():
    assert url_decode("a+b+c") == "a b c"


def test_url_decode_percent_escape():
    assert url_decode("%41") == "A"


@pytest.mark.parametrize("text", ["hello world/x", "/a b/c.html", "100% sure"])
def test_url_decode_round_trip(text):
    assert url_decode(quote(text)) == text


@pytest.mark.parametrize("text", ["%", "%4", "abc%", "%zz", "%g1"])
def test_url_decode_rejects_bad_escapes(text):
    with pytest.raises(ValueError):
        url_decode(text)


@pytest.fixture
def doc_root(tmp_path):
    (tmp_path / "index.html").write_bytes(b"<p>hi</p>")
    (tmp_path / "pic.png").write_bytes(b"\x89PNG")
    (tmp_path / "notes").write_bytes(b"plain")
    (tmp_path / "my file.gif").write_bytes(b"GIF89a")
    sub = tmp_path / "dir.d"
    sub.mkdir()
    (sub / "readme").write_bytes(b"text")
    return tmp_path


def test_directory_serves_index(doc_root):
    rep = RequestHandler(doc_root).handle_request("/")
    assert rep.status == Status.OK
    assert rep.content == b"<p>hi</p>"
    assert rep.headers == [
        Header("Content-Length", str(len(b"<p>hi</p>"))),
        Header("Content-Type", "text/html"),
    ]


def test_mime_type_from_extension(doc_root):
    rep = RequestHandler(str(doc_root)).handle_request("/pic.png")
    assert rep.status == Status.OK
    assert rep.content == b"\x89PNG"
    assert rep.headers[1] == Header("Content-Type", "image/png")


@pytest.mark.parametrize("uri", ["/notes", "/dir.d/readme"])
def test_no_extension_is_plain_text(doc_root, uri):
    rep = RequestHandler(doc_root).handle_request(uri)
    assert rep.status == Status.OK
    assert rep.headers[1] == Header("Content-Type", "text/plain")


def test_encoded_path_is_decoded(doc_root):
    rep = RequestHandler(doc_root).handle_request("/my%20file.gif")
    assert rep.content == b"GIF89a"
    assert rep.headers[1] == Header("Content-Type", "image/gif")


def test_missing_file_is_not_found(doc_root):
    rep = RequestHandler(doc_root).handle_request("/absent.html")
    assert rep == Reply.stock_reply(Status.NOT_FOUND)


@pytest.mark.parametrize("uri", ["", "index.html", "/../secret", "/a/../b", "/%zz"])
def test_bad_requests(doc_root, uri):
    rep = RequestHandler(doc_root).handle_request(uri)
    assert rep == Reply.stock_reply(Status.BAD_REQUEST)


def test_doc_root_is_kept_as_string(doc_root):
    handler = RequestHandler(doc_root)
    assert handler.doc_root == str(doc_root)