"""
Attachment download service with origin, size, and timeout
enforcement.

Downloads the bytes behind a candidate attachment URL using the
workflow token as a bearer credential.  Validation is layered:

1. **Origin allow-list**: ``is_allowed_domain`` is checked before
   any socket is opened.  Untrusted hosts never see the token.
2. **Declared size**: a ``Content-Length`` above
   ``MAX_FILE_SIZE`` aborts before the body is read.
3. **Transferred size**: the body is streamed and the download is
   abandoned as soon as the running total passes the limit, so a
   server that omits or lies about ``Content-Length`` cannot make
   us buffer more than one extra chunk.

``fetch_file`` raises on every refusal; ``download_file`` is the
lenient wrapper used by the ingestion pipeline, which logs the
reason and returns ``None`` so one bad URL never aborts a run.
"""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from issue_attachments.core.config import get_settings
from issue_attachments.core.constants import (
    DOWNLOAD_CHUNK_SIZE,
    MAX_FILE_SIZE,
)
from issue_attachments.core.security import is_allowed_domain

logger = logging.getLogger(__name__)

# Maximum number of redirects to follow per download request.
_MAX_REDIRECTS: int = 5


class DownloadError(Exception):
    """Base class for refusals raised by ``fetch_file``."""


class UntrustedDomainError(DownloadError):
    """Raised when the URL host is not on the allow-list."""


class DownloadTooLargeError(DownloadError):
    """Raised when the content exceeds the size limit."""


def _log_redirect(
    request: httpx.Request,
    response: httpx.Response,
) -> None:
    """Log each redirect hop.

    Used as an httpx *response* event hook.  Only the target host
    is logged because GitHub redirects to pre-signed storage URLs
    whose query string is a credential.
    """
    if response.next_request is not None:
        logger.debug(
            "Redirect %s from %s to host %s",
            response.status_code,
            request.url.host,
            response.next_request.url.host,
        )


def _declared_length(response: httpx.Response) -> int | None:
    """Return the ``Content-Length`` header as an int, if usable."""
    raw = response.headers.get("content-length")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _fetch_once(
    url: str,
    token: str,
    *,
    timeout: float,
    max_bytes: int,
) -> bytes:
    """Perform a single GET and return the complete body."""
    headers = {
        "Authorization": f"Bearer {token}",
        "Accept": "application/octet-stream",
    }
    with (
        httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            max_redirects=_MAX_REDIRECTS,
            event_hooks={"response": [_log_redirect]},
        ) as client,
        client.stream("GET", url, headers=headers) as response,
    ):
        response.raise_for_status()

        # Untrusted, but allows an early exit without reading
        # the body.
        declared = _declared_length(response)
        if declared is not None and declared > max_bytes:
            raise DownloadTooLargeError(
                f"File too large: {declared} bytes exceeds limit of "
                f"{max_bytes} bytes"
            )

        chunks: list[bytes] = []
        received = 0
        for chunk in response.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
            received += len(chunk)
            if received > max_bytes:
                raise DownloadTooLargeError(
                    f"Downloaded file too large: exceeded {max_bytes} "
                    f"bytes (received {received} so far)"
                )
            chunks.append(chunk)

    return b"".join(chunks)


def fetch_file(
    url: str,
    token: str,
    *,
    max_bytes: int = MAX_FILE_SIZE,
) -> bytes:
    """Download *url* and return its bytes, raising on any refusal.

    Transport-level failures (timeouts, DNS errors, connection
    resets) are retried ``DOWNLOAD_RETRIES`` times before the last
    error is re-raised.  HTTP status errors and size refusals are
    not retried.

    Args:
        url: Candidate attachment URL.
        token: Bearer credential sent with the request.
        max_bytes: Size limit for both the declared and the
            transferred length.

    Returns:
        The complete response body, at most *max_bytes* long.

    Raises:
        UntrustedDomainError: If the host is not allow-listed.
            No request is made in that case.
        DownloadTooLargeError: If the declared or transferred
            size exceeds *max_bytes*.
        httpx.HTTPStatusError: On non-2xx responses.
        httpx.HTTPError: On transport errors after the last retry
            or on too many redirects.
    """
    if not is_allowed_domain(url):
        raise UntrustedDomainError(
            f"Refusing to download from untrusted domain: {url}"
        )

    settings = get_settings()
    retrying = Retrying(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.DOWNLOAD_RETRIES + 1),
        wait=wait_none(),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    body = retrying(
        _fetch_once,
        url,
        token,
        timeout=settings.DOWNLOAD_TIMEOUT,
        max_bytes=max_bytes,
    )

    logger.info("Downloaded %d bytes from %s", len(body), url)
    return body


def download_file(
    url: str,
    token: str,
    *,
    max_bytes: int = MAX_FILE_SIZE,
) -> bytes | None:
    """Download *url*, logging but never raising on failure.

    Args:
        url: Candidate attachment URL.
        token: Bearer credential sent with the request.
        max_bytes: Size limit passed through to ``fetch_file``.

    Returns:
        The file bytes, or ``None`` when the download was refused
        or failed.  A partial body is never returned.
    """
    try:
        return fetch_file(url, token, max_bytes=max_bytes)
    except DownloadError as exc:
        logger.error("%s", exc)
    except httpx.HTTPStatusError as exc:
        logger.error(
            "Error downloading %s: HTTP status %s",
            url,
            exc.response.status_code,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error(
            "Error downloading %s: %s",
            url,
            exc,
        )
    return None
