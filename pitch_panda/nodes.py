"""Graph node functions for each analysis stage.

Every node takes the current StartupState and returns a partial update.
Nodes raise when a precondition is not met; the workflow records the failure
in ``errors`` and lets the remaining stages run.
"""

import json
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from . import config, data_sources, llm, prompts
from .citations import add_source, merge_sources
from .deck import load_deck, validate_slides
from .schemas import (
    Business,
    Core,
    Evidence,
    ExtraContextData,
    Risk,
    Slide,
    SlideImage,
    StartupAnalysis,
    TextChunk,
    UnclassifiedValue,
)
from .scraper import crawl_website, html_to_text
from .state import StartupState
from .utils import ensure_scheme, get_domain

logger = config.logger


def _banner(title: str) -> None:
    logger.info(f"\n{'=' * 60}")
    logger.info(title)
    logger.info(f"{'=' * 60}\n")


def _display_name(state: StartupState) -> str:
    return state.get("name") or get_domain(state["url"])


def _numbered(items: Iterable[Any], fmt: Callable[[Any], str]) -> str:
    return "\n".join(f"{i}. {fmt(item)}" for i, item in enumerate(items, start=1))


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "\n[...truncated]"


# ---------------------------------------------------------------------------
# Stage 1: ingestion
# ---------------------------------------------------------------------------

def ingest_website(state: StartupState) -> Dict[str, Any]:
    """Crawl the startup website into text chunks."""
    _banner(f"INGESTING WEBSITE: {state['url']}")

    html, chunks = crawl_website(state["url"])
    if html and not chunks:
        chunks = [TextChunk(id="chunk-0", text=html_to_text(html), source_type="website", location="/")]

    update: Dict[str, Any] = {"website_html": html or None, "web_chunks": chunks}
    if html:
        sources, _ = add_source([], ensure_scheme(state["url"]), f"{_display_name(state)} - Website", chunks[0].text)
        update["sources"] = sources
    else:
        update["errors"] = [f"Website ingestion returned no content for {state['url']}"]

    logger.info(f"[OK] Extracted {len(chunks)} text chunks from website")
    return update


def ingest_deck(state: StartupState) -> Dict[str, Any]:
    """Load the pitch deck from disk when given a path, then validate the slides."""
    _banner("INGESTING DECK")

    slides = state.get("deck_slides") or []
    if state.get("deck_path"):
        slides = load_deck(state["deck_path"])

    if not slides:
        logger.info("No deck slides provided")
        return {"deck_slides": []}

    valid = validate_slides(slides)
    logger.info(f"[OK] Validated {len(valid)} slides")
    return {"deck_slides": valid}


def research_web(state: StartupState) -> Dict[str, Any]:
    """Optional public web research through the search tool."""
    if not config.search_enabled():
        logger.info("Web search not configured, skipping research")
        return {"search_chunks": []}

    _banner("RESEARCHING PUBLIC SOURCES")

    sources: List[Dict[str, Any]] = []
    chunks: List[TextChunk] = []
    for query in data_sources.research_queries(state.get("name") or "", get_domain(state["url"])):
        for result in data_sources.web_search(query):
            url = result.get("url")
            if not url or any(chunk.location == url for chunk in chunks):
                continue
            title = result.get("title", "Untitled")
            content = result.get("content", "")
            sources, _ = add_source(sources, url, title, content)
            chunks.append(
                TextChunk(id=f"search-{len(chunks)}", text=f"{title}\n{content}", source_type="web_search", location=url)
            )
        logger.info(f"[OK] Completed search: {query}")

    logger.info(f"[OK] Collected {len(chunks)} search results")
    return {"search_chunks": chunks, "sources": sources}


EXPLICIT_METRICS = (
    ("mrr", "mrr_label", "mrr_is_explicit", "MRR"),
    ("arr", "arr_label", "arr_is_explicit", "ARR"),
    ("funding_raised_total", "funding_raised_label", "funding_raised_is_explicit", "funding"),
    ("tam_claimed", "tam_label", "tam_is_explicit", "TAM"),
    ("sam_claimed", "sam_label", "sam_is_explicit", "SAM"),
    ("som_claimed", "som_label", "som_is_explicit", "SOM"),
)


def enforce_explicit_labels(data: ExtraContextData) -> ExtraContextData:
    """Demote metrics that lack an explicit label to unclassified values."""
    data = data.model_copy(deep=True)

    for value_field, label_field, explicit_field, kind in EXPLICIT_METRICS:
        value = getattr(data, value_field)
        if not value:
            continue
        label = getattr(data, label_field)
        if getattr(data, explicit_field) and label:
            continue
        data.unclassified_values.append(
            UnclassifiedValue(
                value=value,
                context=label,
                possible_meaning=f"Possibly {kind}",
                reason_unclassified=f"No explicit {kind} label",
            )
        )
        setattr(data, value_field, None)
        setattr(data, label_field, None)
        setattr(data, explicit_field, False)

    kept_rounds = []
    for funding_round in data.funding_rounds:
        if funding_round.is_explicit_label and funding_round.source_label:
            kept_rounds.append(funding_round)
            continue
        data.unclassified_values.append(
            UnclassifiedValue(
                value=funding_round.amount or funding_round.type,
                context=f"{funding_round.type} round",
                possible_meaning="Possibly a funding round",
                reason_unclassified="Funding round without an explicit funding label",
            )
        )
    data.funding_rounds = kept_rounds
    return data


def extract_extra_context(state: StartupState) -> Dict[str, Any]:
    """Structure user-supplied private context."""
    text = (state.get("extra_context") or "").strip()
    if not text:
        return {"extra_context_data": None}

    _banner("EXTRACTING PRIVATE CONTEXT")

    messages = [
        SystemMessage(content=prompts.EXTRA_CONTEXT_PROMPT),
        HumanMessage(
            content=f"USER-PROVIDED CONTEXT (raw):\n{text}\n\n"
            "Extract the structured data using the explicit labeling rules."
        ),
    ]
    data = enforce_explicit_labels(llm.invoke_structured(ExtraContextData, messages))

    logger.info(f"[OK] Private context extracted ({len(data.unclassified_values)} unclassified values)")
    return {"extra_context_data": data}


# ---------------------------------------------------------------------------
# Stage 2: deck vision
# ---------------------------------------------------------------------------

def analyze_slide(slide: SlideImage) -> Slide:
    """Run the vision model over a single slide image."""
    logger.info(f"Analyzing slide {slide.page}")
    message = HumanMessage(
        content=[
            {"type": "text", "text": f"{prompts.SLIDE_ANALYSIS_PROMPT}\n\nAnalyze slide {slide.page}:"},
            {"type": "image_url", "image_url": {"url": slide.image_data_url}},
        ]
    )
    result = llm.invoke_structured(Slide, [message], vision=True)
    return result.model_copy(update={"page": slide.page})


def deck_vision(state: StartupState) -> Dict[str, Any]:
    """Structure every slide with the vision model, a few at a time."""
    slides = state.get("deck_slides") or []
    if not slides:
        logger.info("Skipping deck vision (no slides)")
        return {"deck_structured": []}

    _banner(f"ANALYZING {len(slides)} DECK SLIDES")

    structured = llm.batch_process(slides, analyze_slide, concurrency=config.SLIDE_CONCURRENCY)
    structured.sort(key=lambda s: s.page)

    logger.info(f"[OK] Slide types: {', '.join(f'{s.page}:{s.slide_type}' for s in structured)}")
    return {"deck_structured": structured}


# ---------------------------------------------------------------------------
# Stage 3: evidence
# ---------------------------------------------------------------------------

def build_website_context(chunks: Optional[List[TextChunk]]) -> str:
    if not chunks:
        return "No website content available."
    blocks = []
    for chunk in chunks:
        label = "Web search" if chunk.source_type == "web_search" else "Website"
        blocks.append(f"[{label}: {chunk.location}]\n{chunk.text}\n")
    return _clip("\n---\n".join(blocks), config.MAX_CONTEXT_CHARS)


def build_deck_context(slides: Optional[List[Slide]]) -> str:
    if not slides:
        return "No pitch deck available."

    blocks = []
    for slide in slides:
        parts = [f"[Slide {slide.page} - Type: {slide.slide_type}]"]
        if slide.title:
            parts.append(f"Title: {slide.title}")
        if slide.main_bullets:
            parts.append("Bullets:\n" + "\n".join(f"  - {b}" for b in slide.main_bullets))
        if slide.figures:
            parts.append("Figures:\n" + "\n".join(f"  - {f.label}: {f.value}{f.unit or ''}" for f in slide.figures))
        if slide.logos:
            parts.append("Logos: " + ", ".join(f"{l.name} ({l.role})" if l.role else l.name for l in slide.logos))
        if slide.claims:
            parts.append("Claims:\n" + "\n".join(f"  - {c}" for c in slide.claims))
        if slide.visual_structures:
            visuals = []
            for v in slide.visual_structures:
                line = f"  - {v.type}"
                if v.subject:
                    line += f": {v.subject}"
                if v.qualitative_trend:
                    line += f" ({v.qualitative_trend})"
                visuals.append(line)
            parts.append("Visuals:\n" + "\n".join(visuals))
        if slide.caveats:
            parts.append("Caveats: " + "; ".join(slide.caveats))
        blocks.append("\n".join(parts))
    return "\n\n---\n\n".join(blocks)


def build_extra_context(state: StartupState) -> str:
    data = state.get("extra_context_data")
    if data is not None:
        return json.dumps(data.model_dump(exclude_none=True, exclude_defaults=True), indent=2)
    raw = (state.get("extra_context") or "").strip()
    return raw or "No private context provided."


def evidence_extraction(state: StartupState) -> Dict[str, Any]:
    """Extract grounded facts with provenance from every available input."""
    _banner("EXTRACTING EVIDENCE")

    chunks = (state.get("web_chunks") or []) + (state.get("search_chunks") or [])
    slides = state.get("deck_structured") or []
    has_context = bool(state.get("extra_context_data") or (state.get("extra_context") or "").strip())

    if not chunks and not slides and not has_context:
        logger.warning("No content available for evidence extraction")
        return {
            "evidence": None,
            "errors": ["No content available for evidence extraction (website, deck and context all missing)"],
        }

    messages = [
        SystemMessage(content=prompts.EVIDENCE_EXTRACTION_PROMPT),
        HumanMessage(
            content=f"""Extract all factual evidence from the following startup materials.

Startup: {_display_name(state)} ({state['url']})

WEBSITE AND WEB SEARCH CONTENT:
{build_website_context(chunks)}

PITCH DECK SLIDES:
{build_deck_context(slides)}

PRIVATE CONTEXT (user-provided):
{build_extra_context(state)}

Extract structured evidence with accurate provenance. Only include facts that are explicitly stated."""
        ),
    ]
    evidence = llm.invoke_structured(Evidence, messages)

    logger.info(f"[OK] Extraction stats: {evidence.stats()}")
    return {"evidence": evidence}


# ---------------------------------------------------------------------------
# Stage 4: core and business analysis (parallel)
# ---------------------------------------------------------------------------

def _snippets(items) -> str:
    return _numbered(items, lambda e: f"{e.text} [Source: {e.source.label()}]")


def build_core_context(state: StartupState) -> str:
    evidence = state.get("evidence")
    if evidence is None:
        return "No evidence available."

    sections = [f"Startup: {_display_name(state)} ({state['url']})"]
    if evidence.problem_snippets:
        sections.append(f"Problem Evidence:\n{_snippets(evidence.problem_snippets)}")
    if evidence.solution_snippets:
        sections.append(f"Solution Evidence:\n{_snippets(evidence.solution_snippets)}")
    if evidence.value_prop_snippets:
        sections.append(f"Value Proposition Evidence:\n{_snippets(evidence.value_prop_snippets)}")
    if evidence.market_snippets:
        sections.append(f"Market Context:\n{_snippets(evidence.market_snippets)}")
    if evidence.claims:
        sections.append(f"Claims:\n{_numbered(evidence.claims[:5], lambda c: c.text)}")

    extra = state.get("extra_context_data")
    if extra is not None:
        market_claims = [
            f"{label}: {value} (labeled '{source_label}')"
            for label, value, source_label in (
                ("TAM", extra.tam_claimed, extra.tam_label),
                ("SAM", extra.sam_claimed, extra.sam_label),
                ("SOM", extra.som_claimed, extra.som_label),
            )
            if value
        ]
        if extra.industry_investment_size:
            market_claims.append(
                f"Industry spend (not TAM): {extra.industry_investment_size} ({extra.industry_investment_label or 'unlabeled'})"
            )
        if market_claims:
            sections.append("Founder-reported market data (private context, may be optimistic):\n" + "\n".join(market_claims))

    return "\n\n".join(sections)


def core_analysis(state: StartupState) -> Dict[str, Any]:
    """Synthesize problem, solution, value proposition and market from evidence."""
    _banner("CORE ANALYSIS")

    if state.get("evidence") is None:
        raise ValueError("No evidence available for core analysis")

    messages = [
        SystemMessage(content=prompts.CORE_ANALYSIS_PROMPT),
        HumanMessage(
            content=f"Synthesize the core problem, solution, value proposition and market from the following evidence:\n\n"
            f"{build_core_context(state)}\n\nCreate a clear, concise analysis."
        ),
    ]
    core = llm.invoke_structured(Core, messages)

    logger.info(f"[OK] Problem: {core.problem.one_liner}")
    logger.info(f"[OK] Solution: {core.solution.one_liner}")
    logger.info(f"[OK] Value Prop: {core.value_proposition.summary}")
    return {"core": core}


def _team_fact(t) -> str:
    line = t.name
    if t.role:
        line += f" - {t.role}"
    if t.background:
        line += f": {t.background}"
    return f"{line} [Source: {t.source.label()}]"


def _traction_fact(t) -> str:
    line = f"{t.metric_type}: {t.value}"
    if t.timeframe:
        line += f" ({t.timeframe})"
    if t.context:
        line += f" - {t.context}"
    return f"{line} [Source: {t.source.label()}]"


def _funding_fact(f) -> str:
    line = f.round_type or "Round"
    if f.amount:
        line += f": {f.amount}"
    if f.investors:
        line += f" from {', '.join(f.investors)}"
    if f.date:
        line += f" ({f.date})"
    return f"{line} [Source: {f.source.label()}]"


def build_business_context(state: StartupState) -> str:
    evidence = state.get("evidence")
    if evidence is None:
        return "No evidence available."

    sections = []
    if evidence.team_facts:
        sections.append(f"Team:\n{_numbered(evidence.team_facts, _team_fact)}")
    if evidence.traction_facts:
        sections.append(f"Traction:\n{_numbered(evidence.traction_facts, _traction_fact)}")
    if evidence.competition_snippets:
        sections.append(f"Competition:\n{_snippets(evidence.competition_snippets)}")
    if evidence.funding_facts:
        sections.append(f"Funding:\n{_numbered(evidence.funding_facts, _funding_fact)}")
    if evidence.business_model_snippets:
        sections.append(f"Business Model:\n{_snippets(evidence.business_model_snippets)}")

    extra = state.get("extra_context_data")
    if extra is not None:
        facts = extra.model_dump(
            include={
                "founded_year", "mrr", "arr", "funding_raised_total", "funding_rounds", "current_funding_round",
                "target_funding_amount", "funding_investors", "burn_rate", "runway", "valuation",
                "team_size_claimed", "team_members", "key_hires", "customer_count", "user_count",
                "retention_rate", "churn_rate", "ltv", "cac", "loi_count", "loi_value",
                "competition_claims", "unique_advantages_claimed",
            },
            exclude_none=True,
            exclude_defaults=True,
        )
        if facts:
            sections.append(
                "Private context (user-provided; competition claims are self-reported):\n"
                + json.dumps(facts, indent=2)
            )

    return "\n\n".join(sections) or "Evidence contains no business facts."


def business_analysis(state: StartupState) -> Dict[str, Any]:
    """Analyze team, traction, competition, funding and business model."""
    _banner("BUSINESS ANALYSIS")

    if state.get("evidence") is None:
        raise ValueError("No evidence available for business analysis")

    messages = [
        SystemMessage(content=prompts.BUSINESS_ANALYSIS_PROMPT),
        HumanMessage(
            content=f"Analyze the business fundamentals from the following evidence:\n\n{build_business_context(state)}\n\n"
            "Create structured analysis of team, traction, competition, funding, and business model."
        ),
    ]
    business = llm.invoke_structured(Business, messages)

    logger.info(f"[OK] Team members: {len(business.team.members)}")
    logger.info(f"[OK] Traction metrics: {len(business.traction.metrics)}")
    logger.info(f"[OK] Competitors identified: {len(business.competition.competitors)}")
    logger.info(f"[OK] Funding rounds: {len(business.funding.rounds)}")
    return {"business": business}


# ---------------------------------------------------------------------------
# Stage 5: risk
# ---------------------------------------------------------------------------

def build_risk_context(state: StartupState) -> str:
    sections = []

    core = state.get("core")
    if core is not None:
        sections.append(
            f"Problem/Solution:\nProblem: {core.problem.one_liner}\nSolution: {core.solution.one_liner}\n"
            f"Value Prop: {core.value_proposition.summary}\nMarket: {core.market.market_size_summary or 'Not described'}"
        )

    business = state.get("business")
    if business is not None:
        team, traction = business.team, business.traction
        members = "\n".join(f"- {m.name} ({m.role})" for m in team.members)
        sections.append(
            f"Team:\nSize: {team.size or 'Unknown'}\nMembers: {len(team.members)} key members identified\n{members}".rstrip()
        )
        metrics = ", ".join(f"{m.metric}: {m.value}" for m in traction.metrics) or "None reported"
        sections.append(
            f"Traction:\nMetrics: {metrics}\nPartnerships: {len(traction.partnerships)} partnerships\n"
            f"Milestones: {len(traction.milestones)} milestones"
        )
        sections.append(
            f"Competition:\nCompetitors: {len(business.competition.competitors)} identified\n"
            f"Positioning: {business.competition.positioning}"
        )
        sections.append(f"Funding:\nRounds: {len(business.funding.rounds)} rounds\nStatus: {business.funding.status}")
        model = business.business_model
        sections.append(
            f"Business Model:\n{model.summary or 'Not clearly defined'}\n"
            f"Monetization: {', '.join(model.monetization) or 'Not specified'}"
        )

    evidence = state.get("evidence")
    if evidence is not None:
        coverage = "\n".join(f"{key.replace('_', ' ').capitalize()}: {count}" for key, count in evidence.stats().items())
        sections.append(f"Evidence Coverage:\n{coverage}")

    extra = state.get("extra_context_data")
    if extra is not None and extra.unclassified_values:
        sections.append(
            "Unclassified figures in private context:\n"
            + "\n".join(f"- {u.value}: {u.reason_unclassified or 'unlabeled'}" for u in extra.unclassified_values)
        )

    return "\n\n".join(sections)


def risk_analysis(state: StartupState) -> Dict[str, Any]:
    """Identify risks and missing information."""
    _banner("RISK ANALYSIS")

    if state.get("core") is None or state.get("business") is None:
        raise ValueError("Core and business analysis required for risk assessment")

    messages = [
        SystemMessage(content=prompts.RISK_ANALYSIS_PROMPT),
        HumanMessage(
            content=f"Identify investment risks and missing critical information:\n\n{build_risk_context(state)}\n\n"
            "Provide categorized risks with severity levels and a list of missing information."
        ),
    ]
    risk = llm.invoke_structured(Risk, messages)

    logger.info(f"[OK] Risks identified: {len(risk.risks)}")
    logger.info(f"[OK] Missing info items: {len(risk.missing_info)}")
    logger.info(f"[OK] Risk categories: {dict(Counter(r.category for r in risk.risks))}")
    return {"risk": risk}


# ---------------------------------------------------------------------------
# Stage 6: merge
# ---------------------------------------------------------------------------

COVERAGE_FIELDS = (
    ("problem", "problem_snippets"),
    ("solution", "solution_snippets"),
    ("team", "team_facts"),
    ("traction", "traction_facts"),
    ("funding", "funding_facts"),
    ("competition", "competition_snippets"),
    ("market", "market_snippets"),
)

ALL_EVIDENCE_FIELDS = (
    "problem_snippets", "solution_snippets", "value_prop_snippets", "team_facts", "competition_snippets",
    "funding_facts", "traction_facts", "market_snippets", "business_model_snippets", "claims",
)


def build_evidence_summary(evidence: Optional[Evidence]) -> str:
    """One-line summary of evidence volume, provenance balance and coverage."""
    if evidence is None:
        return "No evidence available"

    total = sum(len(getattr(evidence, field)) for _, field in COVERAGE_FIELDS)
    kinds = Counter(item.source.kind for field in ALL_EVIDENCE_FIELDS for item in getattr(evidence, field))
    coverage = [label for label, field in COVERAGE_FIELDS if getattr(evidence, field)]

    return ". ".join(
        [
            f"Total evidence items: {total}",
            f"Sources - Deck: {kinds['deck_slide']}, Website: {kinds['website']}, "
            f"Web search: {kinds['web_search']}, Context: {kinds['extra_context']}",
            f"Coverage: {', '.join(coverage) or 'none'}",
        ]
    )


def merge_analysis(state: StartupState) -> Dict[str, Any]:
    """Combine all stage outputs into the final StartupAnalysis. No LLM call."""
    _banner("MERGING ANALYSIS")

    core, business, risk = state.get("core"), state.get("business"), state.get("risk")
    if core is None or business is None or risk is None:
        raise ValueError("Core, business, and risk analysis required for merge")

    homepage = ensure_scheme(state["url"])
    source_urls = [source["url"] for source in merge_sources(state.get("sources") or [])]

    final_analysis = StartupAnalysis(
        startup_id=state["startup_id"],
        url=state["url"],
        name=state.get("name"),
        problem=core.problem,
        solution=core.solution,
        value_proposition=core.value_proposition,
        market=core.market,
        product_type=core.product_type,
        sector=core.sector,
        subsector=core.subsector,
        active_locations=core.active_locations,
        team=business.team,
        traction=business.traction,
        competition=business.competition,
        funding=business.funding,
        business_model=business.business_model,
        risks=risk.risks,
        missing_info=risk.missing_info,
        extra_context=state.get("extra_context_data"),
        sources=list(dict.fromkeys([homepage, *source_urls])),
        evidence_summary=build_evidence_summary(state.get("evidence")),
        analyzed_at=datetime.now(timezone.utc).isoformat(),
    )

    logger.info("[OK] Final analysis structure complete")
    return {"final_analysis": final_analysis}


# ---------------------------------------------------------------------------
# Stage 7: memo
# ---------------------------------------------------------------------------

def _bullets(lines: Iterable[str]) -> str:
    return "\n".join(f"- {line}" for line in lines) or "- None"


def build_memo_context(analysis: StartupAnalysis) -> str:
    a = analysis
    sections = [f"Startup: {a.name or get_domain(a.url)} ({a.url})\nAnalyzed: {a.analyzed_at[:10]}"]

    sections.append(
        f"PROBLEM:\n{a.problem.one_liner}\n{a.problem.details}\nTarget users: {a.problem.target_users}\n"
        f"Pain points: {', '.join(a.problem.pain_points)}"
    )
    sections.append(f"SOLUTION:\n{a.solution.one_liner}\n{a.solution.details}\nFeatures: {', '.join(a.solution.features)}")
    sections.append(
        f"VALUE PROPOSITION:\n{a.value_proposition.summary}\nBenefits: {', '.join(a.value_proposition.key_benefits)}"
    )
    sections.append(
        f"CLASSIFICATION:\nProduct type: {a.product_type}\nSector: {a.sector} / {a.subsector}\n"
        f"Active locations: {', '.join(a.active_locations) or 'Unknown'}"
    )

    m = a.market
    market_lines = [m.market_size_summary or "No market summary"]
    for label, value, explicit in (("TAM", m.tam, m.tam_is_explicit), ("SAM", m.sam, m.sam_is_explicit), ("SOM", m.som, m.som_is_explicit)):
        if value:
            market_lines.append(f"{label}: {value} ({'as labeled by company' if explicit else 'estimate'})")
    if m.industry_investment_size:
        market_lines.append(f"Industry spend (not TAM): {m.industry_investment_size}")
    if m.growth_trends:
        market_lines.append(f"Trends: {', '.join(m.growth_trends)}")
    if m.target_customers:
        market_lines.append(f"Target customers: {m.target_customers}")
    sections.append("MARKET:\n" + "\n".join(market_lines))

    members = []
    for member in a.team.members:
        line = f"{member.name} ({member.role})"
        if member.background:
            line += f": {member.background}"
        if member.strengths:
            line += f"\n  Strengths: {', '.join(member.strengths)}"
        members.append(line)
    team = f"TEAM:\nSize: {a.team.size or 'Not specified'}\nKey members:\n{_bullets(members)}"
    if a.team.collective_expertise:
        team += f"\nCollective expertise: {a.team.collective_expertise}"
    sections.append(team)

    metrics = [
        f"{t.metric}: {t.value}" + (f" ({t.trend})" if t.trend else "") + (f" [{t.timeframe}]" if t.timeframe else "")
        for t in a.traction.metrics
    ]
    partners = [f"{p.name} ({p.type})" + (f": {p.details}" if p.details else "") for p in a.traction.partnerships]
    sections.append(
        f"TRACTION:\nMetrics:\n{_bullets(metrics)}\nPartnerships:\n{_bullets(partners)}\n"
        f"Milestones:\n{_bullets(a.traction.milestones)}"
    )

    competitors = [
        c.name + (f": {c.description}" if c.description else "") + (f" | Differentiation: {c.differentiation}" if c.differentiation else "")
        for c in a.competition.competitors
    ]
    competition = f"COMPETITION:\nPositioning: {a.competition.positioning}\nCompetitors:\n{_bullets(competitors)}"
    if a.competition.notes:
        competition += f"\nNotes: {a.competition.notes}"
    sections.append(competition)

    rounds = [
        r.type + (f": {r.amount}" if r.amount else "") + (f" from {', '.join(r.investors)}" if r.investors else "")
        + (f" ({r.date})" if r.date else "") + f" [{r.status}]"
        for r in a.funding.rounds
    ]
    funding = f"FUNDING:\nStatus: {a.funding.status}\nTotal raised: {a.funding.total_raised or 'Not disclosed'}\nRounds:\n{_bullets(rounds)}"
    if a.funding.notes:
        funding += f"\nNotes: {a.funding.notes}"
    sections.append(funding)

    model = f"BUSINESS MODEL:\n{a.business_model.summary or 'Not clearly defined'}"
    if a.business_model.monetization:
        model += f"\nMonetization: {', '.join(a.business_model.monetization)}"
    if a.business_model.pricing:
        model += f"\nPricing: {a.business_model.pricing}"
    sections.append(model)

    by_category: Dict[str, List[str]] = {}
    for r in a.risks:
        by_category.setdefault(r.category, []).append(r.description + (f" [{r.severity}]" if r.severity else ""))
    risks = "\n\n".join(f"{category.upper()}:\n{_bullets(items)}" for category, items in by_category.items())
    sections.append(f"RISKS:\n{risks or 'None identified'}")

    sections.append(f"MISSING INFORMATION:\n{_bullets(a.missing_info)}")
    return "\n\n".join(sections)


def investment_memo(state: StartupState) -> Dict[str, Any]:
    """Generate the human-readable investment memo."""
    _banner("GENERATING INVESTMENT MEMO")

    analysis = state.get("final_analysis")
    if analysis is None:
        raise ValueError("Final analysis required for memo generation")

    messages = [
        SystemMessage(content=prompts.MEMO_GENERATION_PROMPT),
        HumanMessage(
            content=f"Generate a professional investment memo from this structured analysis:\n\n"
            f"{build_memo_context(analysis)}\n\nWrite a clear, balanced, actionable investment memo."
        ),
    ]
    memo = llm.invoke_text(messages, temperature=0.3, max_tokens=2000)

    logger.info(f"[OK] Memo generated ({len(memo)} characters)")
    return {"memo": memo}
