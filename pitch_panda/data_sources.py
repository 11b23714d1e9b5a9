"""External search helpers."""

from typing import Any, Dict, List

from . import config

logger = config.logger


def web_search(query: str, num_results: int = 5) -> List[Dict[str, Any]]:
    """Perform web search using Tavily."""
    search_tool = config.get_search_tool()
    if search_tool is None:
        return []
    try:
        results = search_tool.invoke({"query": query, "max_results": num_results})
        return results if isinstance(results, list) else []
    except Exception as exc:  # pragma: no cover - runtime logging
        logger.warning(f"Search error: {exc}")
        return []


def research_queries(name: str, domain: str) -> List[str]:
    """Queries covering the public record of a startup."""
    subject = f"{name} ({domain})" if name and name.lower() != domain else domain
    return [
        f"{subject} startup company overview product",
        f"{subject} funding round investors raised",
        f"{subject} competitors alternatives",
        f"{subject} news customers partnership",
    ]
