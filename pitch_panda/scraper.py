"""Website fetching and text chunking."""

import re
from typing import List, Tuple
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from . import config
from .schemas import TextChunk
from .utils import ensure_scheme, get_domain

logger = config.logger

NON_CONTENT_TAGS = ["script", "style", "nav", "footer", "iframe", "noscript"]
CONTENT_TAGS = ["h1", "h2", "h3", "p", "li", "blockquote"]
HEADING_TAGS = {"h1", "h2", "h3"}
KEY_PATH_PATTERN = re.compile(
    r"/(about|team|product|pricing|customers|company|solutions|careers)(/|$|[-_])", re.IGNORECASE
)


def normalize_url(url: str) -> str:
    """Ensure a scheme and a host are present."""
    full_url = ensure_scheme(url)
    parsed = urlparse(full_url)
    if not parsed.netloc or " " in parsed.netloc or "." not in parsed.netloc:
        raise ValueError(f"Invalid URL: {url}")
    return parsed.geturl()


def _content_root(soup: BeautifulSoup):
    return soup.find("main") or soup.find("article") or soup.find("body")


def extract_text_chunks(html: str, location_prefix: str = "") -> List[TextChunk]:
    """Split page content into chunks, one per h1-h3 section."""
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup.find_all(NON_CONTENT_TAGS):
        element.decompose()

    root = _content_root(soup)
    if root is None:
        return []

    chunks: List[TextChunk] = []
    current_section = ""
    section_texts: List[str] = []

    def flush():
        if section_texts:
            location = current_section or "/"
            if location_prefix:
                location = f"{location_prefix} > {location}" if current_section else location_prefix
            chunks.append(
                TextChunk(
                    id=f"chunk-{len(chunks)}",
                    text="\n".join(section_texts),
                    source_type="website",
                    location=location,
                )
            )

    for element in root.find_all(CONTENT_TAGS):
        text = element.get_text(" ", strip=True)
        if not text:
            continue
        if element.name in HEADING_TAGS:
            flush()
            section_texts = []
            current_section = text
        section_texts.append(text)

    flush()
    return chunks


def html_to_text(html: str, max_chars: int | None = None) -> str:
    """Collapse a page to whitespace-normalized plain text."""
    max_chars = config.MAX_WEBSITE_CHARS if max_chars is None else max_chars
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup.find_all(["script", "style"]):
        element.decompose()
    text = re.sub(r"\s+", " ", soup.get_text(" ")).strip()
    return text[:max_chars] or "(No readable text found on homepage.)"


def fetch_html(url: str) -> str:
    response = requests.get(
        url,
        headers={"User-Agent": config.USER_AGENT},
        timeout=config.HTTP_TIMEOUT,
    )
    response.raise_for_status()
    return response.text


def scrape_website(url: str, location_prefix: str = "") -> Tuple[str, List[TextChunk]]:
    """Fetch a page and chunk it; failures log and return no content."""
    try:
        normalized = normalize_url(url)
        html = fetch_html(normalized)
        chunks = extract_text_chunks(html, location_prefix=location_prefix)
        logger.info(f"[OK] Fetched {normalized} ({len(chunks)} chunks)")
        return html, chunks
    except Exception as exc:
        logger.warning(f"Website scraping failed for {url}: {exc}. Analysis will continue without it.")
        return "", []


def find_key_pages(html: str, base_url: str, limit: int) -> List[str]:
    """Same-domain links that look like about/team/product pages."""
    if limit <= 0 or not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    domain = get_domain(base_url)
    found: List[str] = []
    for anchor in soup.find_all("a", href=True):
        link = urljoin(base_url, anchor["href"]).split("#")[0].rstrip("/")
        parsed = urlparse(link)
        if parsed.scheme not in ("http", "https") or get_domain(link) != domain:
            continue
        if not KEY_PATH_PATTERN.search(parsed.path + "/"):
            continue
        if link not in found and link != base_url.rstrip("/"):
            found.append(link)
        if len(found) >= limit:
            break
    return found


def crawl_website(start_url: str, max_pages: int = 5) -> Tuple[str, List[TextChunk]]:
    """Scrape the homepage plus a handful of key sub-pages on the same domain."""
    html, chunks = scrape_website(start_url)
    if not html:
        return html, chunks

    base_url = normalize_url(start_url)
    for page_url in find_key_pages(html, base_url, max_pages - 1):
        _, page_chunks = scrape_website(page_url, location_prefix=urlparse(page_url).path or "/")
        chunks.extend(page_chunks)

    for index, chunk in enumerate(chunks):
        chunk.id = f"chunk-{index}"
    return html, chunks
