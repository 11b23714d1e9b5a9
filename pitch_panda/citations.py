"""Citation helpers for tracking and rendering sources."""

from datetime import datetime
from typing import Any, Dict, List, Tuple


def add_source(
    sources: List[Dict[str, Any]], url: str, title: str, content: str = ""
) -> Tuple[List[Dict[str, Any]], int]:
    """Add a source and return its citation number."""
    for source in sources:
        if source["url"] == url:
            return sources, source["number"]

    citation_num = len(sources) + 1
    source_entry: Dict[str, Any] = {
        "number": citation_num,
        "url": url,
        "title": title,
        "content_snippet": content[:200] if content else "",
        "accessed_date": datetime.now().strftime("%Y-%m-%d"),
    }
    sources.append(source_entry)
    return sources, citation_num


def merge_sources(*source_lists: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Union of source lists by URL, first occurrence wins, renumbered from 1."""
    merged: List[Dict[str, Any]] = []
    seen = set()
    for sources in source_lists:
        for source in sources or []:
            if not source.get("url") or source["url"] in seen:
                continue
            seen.add(source["url"])
            merged.append({**source, "number": len(merged) + 1})
    return merged


def generate_references_section(sources: List[Dict[str, Any]]) -> str:
    """Generate formatted references section."""
    if not sources:
        return "No sources cited."

    references = ["## References\n"]
    for source in sorted(sources, key=lambda x: x["number"]):
        ref = f"[{source['number']}] {source['title']}. "
        ref += f"Retrieved {source['accessed_date']}. "
        ref += f"{source['url']}\n"
        references.append(ref)

    return "\n".join(references)
