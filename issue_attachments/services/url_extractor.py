"""
Attachment URL discovery in free-form comment text.

GitHub renders uploaded files into a comment as either a bare URL
or a markdown link / image.  Rather than parsing markdown, each
recognised shape gets its own small matcher; the results are
unioned and deduplicated in order of discovery.

Recognised shapes:

1. ``https://github.com/<owner>/<repo>/assets/<id>/<name>``
   (older upload format).
2. ``https://github.com/user-attachments/files/<id>/<name>``
   (current upload format).
3. Markdown links ``[text](url)`` wrapping either of the above.
4. Markdown links to ``raw.githubusercontent.com``.
5. Markdown images whose URL lives on ``github.com`` or
   ``user-images.githubusercontent.com``.

Matchers never raise: unmatched or adversarial input simply
yields nothing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from urllib.parse import urlparse

from issue_attachments.core.constants import IMAGE_HOSTS

logger = logging.getLogger(__name__)

# ``\w`` and ``\d`` match ASCII only.
_FLAGS = re.ASCII

_NAME = r"[\w\-.%]+"
_ASSET_URL = rf"https://github\.com/[^/]+/[^/]+/assets/\d+/{_NAME}"
_ATTACHMENT_URL = rf"https://github\.com/user-attachments/files/\d+/{_NAME}"

_ASSET_RE = re.compile(_ASSET_URL, _FLAGS)
_ATTACHMENT_RE = re.compile(_ATTACHMENT_URL, _FLAGS)
_MD_ASSET_LINK_RE = re.compile(rf"\[[^\]]*\]\(({_ASSET_URL})\)", _FLAGS)
_MD_ATTACHMENT_LINK_RE = re.compile(
    rf"\[[^\]]*\]\(({_ATTACHMENT_URL})\)",
    _FLAGS,
)
_MD_RAW_LINK_RE = re.compile(
    r"\[[^\]]*\]\((https://raw\.githubusercontent\.com/[^)]+)\)",
    _FLAGS,
)
_MD_IMAGE_RE = re.compile(r"!\[[^\]]*\]\((https://[^)]+)\)", _FLAGS)

Matcher = Callable[[str], Iterable[str]]


def _match_asset_urls(text: str) -> Iterator[str]:
    """Bare ``/assets/<id>/`` URLs."""
    for m in _ASSET_RE.finditer(text):
        yield m.group(0)


def _match_attachment_urls(text: str) -> Iterator[str]:
    """Bare ``/user-attachments/files/<id>/`` URLs."""
    for m in _ATTACHMENT_RE.finditer(text):
        yield m.group(0)


def _match_markdown_links(text: str) -> Iterator[str]:
    """URLs inside ``[text](url)`` for the upload and raw shapes."""
    for pattern in (
        _MD_ASSET_LINK_RE,
        _MD_ATTACHMENT_LINK_RE,
        _MD_RAW_LINK_RE,
    ):
        for m in pattern.finditer(text):
            yield m.group(1)


def _is_image_host(url: str) -> bool:
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    return hostname in IMAGE_HOSTS


def _match_markdown_images(text: str) -> Iterator[str]:
    """URLs inside ``![alt](url)`` pointing at a GitHub image host."""
    for m in _MD_IMAGE_RE.finditer(text):
        url = m.group(1)
        if _is_image_host(url):
            yield url


MATCHERS: tuple[Matcher, ...] = (
    _match_asset_urls,
    _match_attachment_urls,
    _match_markdown_links,
    _match_markdown_images,
)


def extract_file_urls(comment_body: str) -> list[str]:
    """Return every attachment URL referenced in *comment_body*.

    Duplicates are dropped by exact string equality; the first
    occurrence wins, so the result order is stable for a given
    input (matcher order first, then position in the text).

    Args:
        comment_body: Untrusted comment text.  May be empty.

    Returns:
        A list of candidate URLs.  Empty when nothing matches.
        Origins are *not* validated here.
    """
    if not comment_body:
        return []

    found: dict[str, None] = {}
    for matcher in MATCHERS:
        for url in matcher(comment_body):
            found.setdefault(url, None)

    urls = list(found)
    logger.debug("Extracted %d candidate URL(s)", len(urls))
    return urls
