"""Markdown rendering of analyses, competitor one-liners and failure reports."""

from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .citations import generate_references_section, merge_sources
from .schemas import Competitor, StartupAnalysis
from .state import StartupState
from .utils import get_domain, truncate


def bullets(items: Iterable[str]) -> str:
    items = [item for item in items if item]
    return "\n".join(f"- {item}" for item in items) if items else "- None"


def render_locations(locations: List[str]) -> str:
    return bullets(locations) if locations else "- None specified"


def render_competition_clipboard(product_type: Optional[str], competitors: List[Competitor]) -> str:
    """One copy-paste line per competitor."""
    if not competitors:
        return "(no competitors found)"

    target_type = (product_type or "").strip().lower()
    lines = []
    for competitor in competitors:
        name = (competitor.name or "Unknown").strip()
        competitor_type = (competitor.product_type or "").strip().lower()
        if competitor_type and target_type and competitor_type == target_type:
            tag = "same product type"
        elif competitor.product_type:
            tag = f"different product type ({competitor.product_type})"
        else:
            tag = "solution unspecified"
        note = competitor.differentiation or competitor.description or ""
        geo = ", ".join(competitor.active_locations) or "n/a"
        lines.append(f"{name}: same problem; {tag}; {truncate(note)}; geo: {geo}")
    return "\n".join(lines)


def render_competitor(competitor: Competitor) -> str:
    lines = [f"### {competitor.name}"]
    if competitor.website:
        lines.append(f"**Website:** {competitor.website}")
    lines.append(f"**Product type:** {competitor.product_type or 'Unknown'}")
    if competitor.description:
        lines.append(f"\n{competitor.description}")
    if competitor.differentiation:
        lines.append(f"\n**Differentiation:** {competitor.differentiation}")
    lines.append(f"\n**Active Locations**\n{render_locations(competitor.active_locations)}")
    return "\n".join(lines)


def _market_section(analysis: StartupAnalysis) -> str:
    market = analysis.market
    lines = [market.market_size_summary or "No market summary available."]
    for label, value, explicit, source_label in (
        ("TAM", market.tam, market.tam_is_explicit, market.tam_label),
        ("SAM", market.sam, market.sam_is_explicit, market.sam_label),
        ("SOM", market.som, market.som_is_explicit, market.som_label),
    ):
        if value:
            origin = f"labeled \"{source_label}\"" if explicit and source_label else "estimate"
            lines.append(f"- **{label}:** {value} ({origin})")
    if market.industry_investment_size:
        lines.append(f"- **Industry spend (not TAM):** {market.industry_investment_size}")
    if market.target_customers:
        lines.append(f"- **Target customers:** {market.target_customers}")
    if market.growth_trends:
        lines.append(f"\n**Trends**\n{bullets(market.growth_trends)}")
    if market.market_notes:
        lines.append(f"\n{market.market_notes}")
    return "\n".join(lines)


def _team_section(analysis: StartupAnalysis) -> str:
    team = analysis.team
    members = []
    for member in team.members:
        line = f"**{member.name}** - {member.role}"
        if member.background:
            line += f": {member.background}"
        members.append(line)
    text = f"**Size:** {team.size or 'Not specified'}\n\n{bullets(members)}"
    if team.collective_expertise:
        text += f"\n\n{team.collective_expertise}"
    return text


def _traction_section(analysis: StartupAnalysis) -> str:
    traction = analysis.traction
    metrics = [
        f"{m.metric}: {m.value}" + (f" ({m.timeframe})" if m.timeframe else "") + (f", {m.trend}" if m.trend else "")
        for m in traction.metrics
    ]
    partnerships = [f"{p.name} ({p.type})" + (f": {p.details}" if p.details else "") for p in traction.partnerships]
    return (
        f"**Metrics**\n{bullets(metrics)}\n\n"
        f"**Partnerships**\n{bullets(partnerships)}\n\n"
        f"**Milestones**\n{bullets(traction.milestones)}"
    )


def _funding_section(analysis: StartupAnalysis) -> str:
    funding = analysis.funding
    rounds = [
        f"{r.type}: {r.amount or 'undisclosed'}"
        + (f" from {', '.join(r.investors)}" if r.investors else "")
        + (f" ({r.date})" if r.date else "")
        + f" [{r.status}]"
        for r in funding.rounds
    ]
    text = f"**Status:** {funding.status}\n**Total raised:** {funding.total_raised or 'Not disclosed'}\n\n{bullets(rounds)}"
    if funding.notes:
        text += f"\n\n{funding.notes}"
    return text


def _risk_section(analysis: StartupAnalysis) -> str:
    if not analysis.risks:
        return "No risks identified."
    grouped: "OrderedDict[str, List[str]]" = OrderedDict()
    for risk in analysis.risks:
        label = f"[{risk.severity}] {risk.description}" if risk.severity else risk.description
        grouped.setdefault(risk.category, []).append(label)
    return "\n\n".join(
        f"### {category.replace('_', ' ').title()}\n{bullets(items)}" for category, items in grouped.items()
    )


def render_markdown(
    analysis: StartupAnalysis,
    memo: Optional[str] = None,
    errors: Iterable[str] = (),
    sources: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """Full markdown report for a completed analysis.

    ``sources`` are the citation entries collected during the run; when given,
    a numbered references list with titles and retrieval dates follows the
    source URLs.
    """
    title = analysis.name or get_domain(analysis.url)
    model = analysis.business_model
    errors = list(errors)

    parts = [
        f"# {title}",
        f"**Website:** {analysis.url}  \n**Analyzed:** {analysis.analyzed_at[:10]}",
    ]
    if memo:
        parts.append(f"## Investment Memo\n\n{memo.strip()}")

    parts.extend(
        [
            "---",
            f"## Problem\n{analysis.problem.one_liner}\n\n{analysis.problem.details}\n\n"
            f"**Target users:** {analysis.problem.target_users}\n\n**Pain points**\n{bullets(analysis.problem.pain_points)}",
            f"## Solution\n{analysis.solution.one_liner}\n\n{analysis.solution.details}\n\n"
            f"**Features**\n{bullets(analysis.solution.features)}",
            f"## Value Proposition\n{analysis.value_proposition.summary}\n\n"
            f"{bullets(analysis.value_proposition.key_benefits)}",
            f"## Classification\n**Product type:** {analysis.product_type}  \n"
            f"**Sector:** {analysis.sector}  \n**Subsector:** {analysis.subsector}\n\n"
            f"**Active Locations**\n{render_locations(analysis.active_locations)}",
            f"## Market\n{_market_section(analysis)}",
            f"## Team\n{_team_section(analysis)}",
            f"## Traction\n{_traction_section(analysis)}",
            f"## Competition\n**Positioning:** {analysis.competition.positioning}\n\n"
            + ("\n\n".join(render_competitor(c) for c in analysis.competition.competitors) or "No competitors found."),
            "## Competition (Copy-paste one-liners)\n"
            + render_competition_clipboard(analysis.product_type, analysis.competition.competitors),
            f"## Funding\n{_funding_section(analysis)}",
            f"## Business Model\n{model.summary or 'Not clearly defined'}\n\n"
            f"**Monetization**\n{bullets(model.monetization)}"
            + (f"\n\n**Pricing:** {model.pricing}" if model.pricing else ""),
            f"## Risks\n{_risk_section(analysis)}",
            f"## Missing Information\n{bullets(analysis.missing_info)}",
            f"## Evidence\n{analysis.evidence_summary or 'No evidence available'}",
            f"## Sources\n{bullets(analysis.sources)}",
        ]
    )
    if sources:
        parts.append(generate_references_section(merge_sources(sources)).rstrip())
    if errors:
        parts.append(f"## Errors/Warnings\n{bullets(errors)}")

    return "\n\n".join(parts) + "\n"


def render_failure_report(state: StartupState) -> str:
    """Report for a run that produced no final analysis."""
    title = state.get("name") or get_domain(state.get("url") or "")
    stages = [
        ("Website chunks", len(state.get("web_chunks") or [])),
        ("Search results", len(state.get("search_chunks") or [])),
        ("Deck slides", len(state.get("deck_slides") or [])),
        ("Structured slides", len(state.get("deck_structured") or [])),
    ]
    completed = [
        key for key in ("extra_context_data", "evidence", "core", "business", "risk")
        if state.get(key) is not None
    ]

    return "\n\n".join(
        [
            f"# {title}: analysis incomplete",
            f"**Website:** {state.get('url')}  \n**Attempted:** {datetime.now().strftime('%Y-%m-%d %H:%M')}",
            "## Inputs collected\n" + bullets(f"{label}: {count}" for label, count in stages),
            "## Completed stages\n" + bullets(completed),
            "## Errors\n" + bullets(state.get("errors") or ["Unknown failure"]),
        ]
    ) + "\n"
