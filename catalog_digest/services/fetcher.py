"""Guarded HTTP GET used for robots policies and sitemap documents.

Bodies are returned as text.  Sitemaps published as ``sitemap.xml.gz`` (served
raw, not via ``Content-Encoding``) are inflated, with the 10 MB cap applied to
the inflated size as well.
"""

import codecs
import ipaddress
import logging
import socket
import zlib
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

logger = logging.getLogger(__name__)

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
TIMEOUT = 15  # seconds
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}

USER_AGENT = "CatalogDigestBot/1.0 (+sitemap discovery)"
_DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/plain, application/xml, text/xml;q=0.9, application/x-gzip;q=0.8, */*;q=0.5",
}

_GZIP_MAGIC = b"\x1f\x8b"


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise ValueError if *url* is not a public http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(parsed.hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


async def fetch_url(url: str) -> str:
    """Fetch *url* and return the response body as text.

    Redirects are followed by hand so every hop is validated before it is
    requested.

    Raises:
        ValueError: if the URL (or a redirect target) fails validation.
        httpx.HTTPError: on network errors, timeouts and non-2xx responses.
        RuntimeError: if the body (or its inflated form) exceeds MAX_CONTENT_SIZE,
            a gzip body is corrupt, or redirects loop.
    """
    validate_url(url)

    current_url = url
    async with httpx.AsyncClient(
        follow_redirects=False, timeout=TIMEOUT, headers=_DEFAULT_HEADERS
    ) as client:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    next_url = urljoin(current_url, response.headers.get("location", ""))
                    validate_url(next_url)
                    logger.debug("Redirect %s -> %s", current_url, next_url)
                    current_url = next_url
                    continue

                response.raise_for_status()

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > MAX_CONTENT_SIZE:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > MAX_CONTENT_SIZE:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                return decode_body(b"".join(chunks), response.charset_encoding)

    raise RuntimeError("Too many redirects.")


def _inflate(raw: bytes) -> bytes:
    inflater = zlib.decompressobj(wbits=zlib.MAX_WBITS | 16)
    try:
        data = inflater.decompress(raw, MAX_CONTENT_SIZE + 1)
    except zlib.error as exc:
        raise RuntimeError(f"Corrupt gzip body: {exc}") from exc
    if len(data) > MAX_CONTENT_SIZE:
        raise RuntimeError("Decompressed body exceeds the maximum allowed size.")
    return data


def _text_encoding(charset: Optional[str]) -> str:
    """Codec for *charset*; UTF-8 (and unknown charsets) also drop a leading BOM."""
    try:
        name = codecs.lookup(charset or "utf-8").name
    except LookupError:
        name = "utf-8"
    return "utf-8-sig" if name == "utf-8" else name


def decode_body(raw: bytes, charset: Optional[str] = None) -> str:
    """Turn a raw response body into text, inflating gzip-compressed sitemaps."""
    if raw.startswith(_GZIP_MAGIC):
        raw = _inflate(raw)
    return raw.decode(_text_encoding(charset), errors="replace")
