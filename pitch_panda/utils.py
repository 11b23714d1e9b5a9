"""URL and string helpers."""

import re


def ensure_scheme(url: str) -> str:
    url = url.strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        return f"https://{url}"
    return url


def get_domain(url: str) -> str:
    """Extract the bare domain from a URL ("https://www.supercity.ai/" -> "supercity.ai")."""
    domain = re.sub(r"^https?://", "", url.strip(), flags=re.IGNORECASE)
    domain = domain.split("/")[0].split("?")[0].split("#")[0]
    domain = re.sub(r"^www\.", "", domain, flags=re.IGNORECASE)
    return domain.lower()


def slugify(text: str) -> str:
    """Slugify a string for filenames ("Super City AI" -> "super-city-ai")."""
    return re.sub(r"[^a-z0-9_-]+", "-", text.lower()).strip("-")


def truncate(text: str | None, n: int = 180) -> str:
    text = (text or "").strip()
    if len(text) <= n:
        return text
    return text[: n - 1].rstrip() + "…"
