"""
Content acquisition: turn a source identifier into plain text.

A source is either an http(s) URL, fetched and stripped of markup, or a local
file path. Every way this can go wrong surfaces as AcquisitionFailure.
"""
from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from .errors import AcquisitionFailure

logger = logging.getLogger(__name__)

NOISE_TAGS = ["script", "style", "noscript", "template", "iframe"]


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def extract_rtf_text(rtf_content: str) -> str:
    """Extract plain text from RTF content."""
    # Remove RTF control words and groups
    text = re.sub(r'\\\*.*?;', '', rtf_content)
    text = re.sub(r'\\[a-z]+-?\d*', '', text)
    text = re.sub(r'\\[^a-z]', '', text)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def extract_markdown_text(md_content: str) -> str:
    """Extract plain text from Markdown content."""
    # Remove code blocks
    text = re.sub(r'```.*?```', '', md_content, flags=re.DOTALL)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    text = re.sub(r'^#{1,6}\s+', '', text, flags=re.MULTILINE)
    text = re.sub(r'^[ \t]*[-*+][ \t]+', '', text, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'(?<!\w)_{1,2}(.*?)_{1,2}(?!\w)', r'\1', text)
    # Images before links, keep the visible text
    text = re.sub(r'!\[([^\]]*)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'^>\s?', '', text, flags=re.MULTILINE)
    text = re.sub(r'^-{3,}$', '', text, flags=re.MULTILINE)
    text = re.sub(r'\n\s*\n', '\n\n', text)
    return text.strip()


def html_to_text(html: str) -> str:
    """Visible text of an HTML page, whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def convert_by_extension(content: str, name: str) -> str:
    extension = Path(name).suffix.lower().lstrip(".")
    if extension == "rtf":
        return extract_rtf_text(content)
    if extension == "md":
        return extract_markdown_text(content)
    return content


def fetch_webtext(url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT,
                  session: Optional[requests.Session] = None) -> str:
    getter = session or requests
    try:
        r = getter.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise AcquisitionFailure(url, f"request failed: {exc}") from exc

    encoding = r.encoding or "utf-8"
    try:
        html = r.content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise AcquisitionFailure(url, f"response is not valid {encoding}") from exc
    logger.info("fetched %s (%d bytes)", url, len(r.content))
    return html_to_text(html)


def read_file(path: str) -> str:
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise AcquisitionFailure(path, "file is not valid UTF-8") from exc
    except OSError as exc:
        raise AcquisitionFailure(path, exc.strerror or str(exc)) from exc
    logger.info("read %s (%d chars)", path, len(content))
    return convert_by_extension(content, p.name)


def load_text(source: str, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> str:
    if not source:
        raise AcquisitionFailure(source, "no source given")
    if is_url(source):
        return fetch_webtext(source, timeout=timeout)
    return read_file(source)
