"""A one-shot local web server that captures the OAuth redirect path."""

from __future__ import annotations

import socket
from typing import Callable

REQUEST_BUFFER_SIZE = 1000

DEFAULT_SUCCESS_PAGE = (
    "<!DOCTYPE html><html><head><title>Authorised</title></head>"
    "<body><p>Authorisation complete. You can close this window.</p></body></html>"
)


class RedirectError(Exception):
    """Raised when the redirect request cannot be read or the server cannot start."""


def parse_request(data: bytes) -> str:
    """Return the request target of a raw HTTP request."""
    try:
        request = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RedirectError(f"Invalid UTF-8 sequence: {exc}") from exc
    parts = request.rstrip("\0").split()
    if len(parts) > 1:
        return parts[1]
    raise RedirectError("Malformed request")


def _respond_with_success(conn: socket.socket, success_page: str) -> None:
    conn.sendall(f"HTTP/1.1 200 OK\r\n\r\n{success_page}".encode("utf-8"))


def _respond_with_error(conn: socket.socket, error_message: str) -> None:
    print(f"Error: {error_message}")
    response = f"HTTP/1.1 400 Bad Request\r\n\r\n400 - Bad Request - {error_message}"
    conn.sendall(response.encode("utf-8"))


def handle_connection(
    conn: socket.socket, success_page: str = DEFAULT_SUCCESS_PAGE
) -> str | None:
    """Answer one connection; return the requested path if the request was valid."""
    data = conn.recv(REQUEST_BUFFER_SIZE)
    try:
        url = parse_request(data)
    except RedirectError as exc:
        _respond_with_error(conn, str(exc))
        return None
    _respond_with_success(conn, success_page)
    return url


def redirect_uri_web_server(
    port: int,
    success_page: str = DEFAULT_SUCCESS_PAGE,
    on_listening: Callable[[], None] | None = None,
) -> str:
    """Listen on 127.0.0.1:``port`` until a valid request arrives; return its path.

    ``on_listening`` is called once the socket is ready, e.g. to open the
    authorisation page in a browser.
    """
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        listener.bind(("127.0.0.1", port))
        listener.listen()
    except OSError as exc:
        listener.close()
        print(f"Error: {exc}")
        raise RedirectError(f"Cannot listen on port {port}: {exc}") from exc

    with listener:
        if on_listening is not None:
            on_listening()
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                print(f"Error: {exc}")
                continue
            with conn:
                try:
                    url = handle_connection(conn, success_page)
                except OSError as exc:
                    print(f"Error: {exc}")
                    continue
            if url is not None:
                return url