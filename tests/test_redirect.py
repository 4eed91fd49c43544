import socket
import threading

import pytest

from termtunes.redirect import (
    RedirectError,
    handle_connection,
    parse_request,
    redirect_uri_web_server,
)

REQUEST = b"GET /callback?code=abc HTTP/1.1\r\nHost: localhost\r\n\r\n"


def _read_all(sock):
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_parse_request_returns_target():
    assert parse_request(REQUEST) == "/callback?code=abc"


def test_parse_request_malformed():
    with pytest.raises(RedirectError, match="Malformed request"):
        parse_request(b"GET")


def test_parse_request_invalid_utf8():
    with pytest.raises(RedirectError, match="Invalid UTF-8 sequence"):
        parse_request(b"GET /\xff\xfe HTTP/1.1")


def test_handle_connection_success():
    server_end, client_end = socket.socketpair()
    with server_end, client_end:
        client_end.sendall(REQUEST)
        url = handle_connection(server_end, "<p>ok</p>")
        server_end.close()
        response = _read_all(client_end)
    assert url == "/callback?code=abc"
    assert response == b"HTTP/1.1 200 OK\r\n\r\n<p>ok</p>"


def test_handle_connection_error():
    server_end, client_end = socket.socketpair()
    with server_end, client_end:
        client_end.sendall(b"nonsense")
        url = handle_connection(server_end, "<p>ok</p>")
        server_end.close()
        response = _read_all(client_end)
    assert url is None
    assert response == (
        b"HTTP/1.1 400 Bad Request\r\n\r\n400 - Bad Request - Malformed request"
    )


def test_server_skips_bad_requests_and_returns_path():
    port = _free_port()
    responses = []
    threads = []

    def client():
        for payload in (b"garbage", REQUEST):
            with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
                sock.sendall(payload)
                responses.append(_read_all(sock))

    def on_listening():
        thread = threading.Thread(target=client)
        threads.append(thread)
        thread.start()

    url = redirect_uri_web_server(port, "<p>ok</p>", on_listening)
    threads[0].join(5)
    assert url == "/callback?code=abc"
    assert responses[0].startswith(b"HTTP/1.1 400 Bad Request")
    assert responses[1] == b"HTTP/1.1 200 OK\r\n\r\n<p>ok</p>"


def test_server_port_in_use():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as occupier:
        occupier.bind(("127.0.0.1", 0))
        occupier.listen()
        port = occupier.getsockname()[1]
        with pytest.raises(RedirectError):
            redirect_uri_web_server(port)