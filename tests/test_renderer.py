from pitch_panda import nodes
from pitch_panda.renderer import render_competition_clipboard, render_failure_report, render_markdown
from pitch_panda.schemas import Competitor

from conftest import make_business, make_core, make_evidence, make_risk


def make_analysis():
    state = {
        "startup_id": "analysis-1",
        "url": "https://supercity.ai",
        "name": "Super City AI",
        "core": make_core(),
        "business": make_business(),
        "risk": make_risk(),
        "evidence": make_evidence(),
        "sources": [],
    }
    return nodes.merge_analysis(state)["final_analysis"]


def test_clipboard_tags():
    competitors = [
        Competitor(name="GridCo", product_type="SaaS", differentiation="Hardware-free", active_locations=["US", "UK"]),
        Competitor(name="Meterly", product_type="Hardware", description="Smart meters"),
        Competitor(name=" Anon "),
    ]

    lines = render_competition_clipboard("saas", competitors).splitlines()

    assert lines == [
        "GridCo: same problem; same product type; Hardware-free; geo: US, UK",
        "Meterly: same problem; different product type (Hardware); Smart meters; geo: n/a",
        "Anon: same problem; solution unspecified; ; geo: n/a",
    ]


def test_clipboard_empty():
    assert render_competition_clipboard("SaaS", []) == "(no competitors found)"


def test_clipboard_truncates_long_notes():
    line = render_competition_clipboard("SaaS", [Competitor(name="X", description="y" * 500)])
    assert "y" * 179 + "…" in line
    assert "y" * 180 not in line


def test_render_markdown_sections():
    report = render_markdown(make_analysis(), memo="## Executive Summary\nNeutral memo.", errors=["research_web failed: x"])

    assert report.startswith("# Super City AI\n")
    assert "**Website:** https://supercity.ai" in report
    assert "Neutral memo." in report
    for heading in (
        "## Problem", "## Solution", "## Value Proposition", "## Classification", "## Market", "## Team",
        "## Traction", "## Competition", "## Funding", "## Business Model", "## Risks",
        "## Missing Information", "## Evidence", "## Sources", "## Errors/Warnings",
    ):
        assert heading in report
    assert "GridCo: same problem; same product type; Hardware-free; geo: n/a" in report
    assert "### Market\n- [high] Long municipal sales cycles" in report
    assert "- research_web failed: x" in report


def test_render_markdown_without_memo_or_errors():
    report = render_markdown(make_analysis())
    assert "## Investment Memo" not in report
    assert "## Errors/Warnings" not in report


def test_render_failure_report():
    state = {
        "url": "supercity.ai",
        "name": None,
        "web_chunks": [],
        "core": make_core(),
        "errors": ["business_analysis failed: timeout"],
    }

    report = render_failure_report(state)

    assert report.startswith("# supercity.ai: analysis incomplete")
    assert "- Website chunks: 0" in report
    assert "## Completed stages\n- core" in report
    assert "- business_analysis failed: timeout" in report


def test_render_markdown_lists_references_from_collected_sources():
    sources = [
        {"number": 1, "url": "https://supercity.ai", "title": "Super City AI - Website", "accessed_date": "2026-10-19"},
        {"number": 1, "url": "https://news.example.com/a", "title": "Super City raises seed", "accessed_date": "2026-10-19"},
    ]

    report = render_markdown(make_analysis(), sources=sources)

    assert "## References" in report
    assert "[1] Super City AI - Website. Retrieved 2026-10-19. https://supercity.ai" in report
    assert "[2] Super City raises seed. Retrieved 2026-10-19. https://news.example.com/a" in report
    assert "## References" not in render_markdown(make_analysis())
