import socket
from typing import Tuple

from ..exceptions import WhoisConnectionError

WHOIS_PORT = 43


def split_host_port(host: str, default_port: int = WHOIS_PORT) -> Tuple[str, int]:
    """
    Split an optional ":port" suffix off a WHOIS host.

    Inputs:
      - host: "whois.example.net" or "whois.example.net:4343"
      - default_port: Port used when host carries none.
    Outputs:
      - (host, port) tuple.

    Example:
      >>> split_host_port('whois.example.net:4343')
      ('whois.example.net', 4343)
    """
    text = str(host or "").strip()
    if text.count(":") == 1:
        name, _, port = text.partition(":")
        if port.isdigit():
            return name, int(port)
    return text, int(default_port)


def whois_query(
    host: str,
    query: str,
    *,
    port: int = WHOIS_PORT,
    connect_timeout_ms: int = 5000,
    read_timeout_ms: int = 10000,
    max_bytes: int = 1024 * 1024,
    encoding: str = "utf-8",
) -> bytes:
    """
    Perform a single WHOIS query (RFC 3912): send the request line, read until EOF.

    Inputs:
      - host: WHOIS server host/IP.
      - query: Request text; a CRLF terminator is appended when missing.
      - port: TCP port (43 typically).
      - connect_timeout_ms: TCP connect timeout.
      - read_timeout_ms: Read timeout per operation.
      - max_bytes: Stop reading after this many bytes.
      - encoding: Encoding used for the request text.
    Outputs:
      - bytes: Raw response body.

    Example:
      >>> raw = whois_query('whois.verisign-grs.com', 'example.com')
    """
    payload = query if query.endswith("\r\n") else query.rstrip("\n") + "\r\n"
    try:
        sock = socket.create_connection(
            (host, int(port)), timeout=connect_timeout_ms / 1000.0
        )
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.settimeout(read_timeout_ms / 1000.0)
            sock.sendall(payload.encode(encoding, errors="replace"))
            return _recv_all(sock, max_bytes)
        finally:
            try:
                sock.close()
            except (
                Exception
            ):  # pragma: no cover - defensive: low-value edge case or environment-specific behaviour that is hard to test reliably
                pass
    except (OSError, TimeoutError) as e:
        raise WhoisConnectionError(f"Network error talking to {host}:{port}: {e}")


def _recv_all(sock: socket.socket, max_bytes: int) -> bytes:
    """
    Receive from a blocking socket until EOF or max_bytes.

    Inputs:
      - sock: Connected socket
      - max_bytes: Upper bound on bytes kept
    Outputs:
      - bytes: Data received (truncated to max_bytes).
    """
    chunks = []
    total = 0
    while total < max_bytes:
        chunk = sock.recv(min(4096, max_bytes - total))
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)
