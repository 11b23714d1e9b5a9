"""
Pydantic schemas for the startup analysis pipeline.

The LLM is asked to fill these models through structured output. Every list
defaults to empty and every optional scalar to None, so a sparse response still
validates into a complete object: empty arrays are better than hallucinated data.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Raw inputs
# ---------------------------------------------------------------------------

class TextChunk(BaseModel):
    """Text chunk scraped from the website or returned by web search."""
    id: str = Field(description="Unique identifier for this chunk")
    text: str = Field(description="The text content")
    source_type: Literal["website", "web_search"] = "website"
    location: str = Field(description='URL path or section (e.g., "/about", "/product")')


class SlideImage(BaseModel):
    """Raw slide image as a base64 data URL."""
    page: int = Field(ge=1)
    image_data_url: str = Field(description="Base64 data URL of the slide image")
    file_name: Optional[str] = None


# ---------------------------------------------------------------------------
# Deck understanding
# ---------------------------------------------------------------------------

SLIDE_TYPES = (
    "problem", "solution", "team", "traction", "market", "competition",
    "product", "roadmap", "financials", "funding", "other",
)

SlideType = Literal[
    "problem", "solution", "team", "traction", "market", "competition",
    "product", "roadmap", "financials", "funding", "other",
]


class Figure(BaseModel):
    label: str = Field(description="Label or description of the metric")
    value: str = Field(description='Value as string (e.g., "1000", "$2M", "50%")')
    unit: Optional[str] = Field(default=None, description='Unit of measurement (e.g., "$", "%", "users")')

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, v):
        return v if isinstance(v, str) else str(v)


class Logo(BaseModel):
    name: str = Field(description="Name or identifier of the logo/brand")
    role: Optional[str] = Field(default=None, description="customer, partner, investor, competitor")


class VisualStructure(BaseModel):
    type: str = Field(description="Type of visual: chart, graph, diagram, table, etc.")
    subject: Optional[str] = Field(default=None, description="What the visual is about")
    qualitative_trend: Optional[str] = Field(default=None, description="increasing, decreasing, stable, etc.")


class Slide(BaseModel):
    """Structured representation of a single pitch deck slide."""
    page: Optional[int] = Field(default=None, description="Page number (1-indexed); set from the source image")
    slide_type: SlideType = Field(default="other", description="Classified type of the slide")
    title: Optional[str] = Field(default=None, description="Main title of the slide")
    main_bullets: List[str] = Field(default_factory=list, description="Main bullet points or text blocks")
    figures: List[Figure] = Field(default_factory=list, description="Quantitative figures or data points")
    logos: List[Logo] = Field(default_factory=list, description="Logos, brands, or company names identified")
    claims: List[str] = Field(default_factory=list, description="Explicit self-reported claims on the slide")
    visual_structures: List[VisualStructure] = Field(default_factory=list, description="Charts and their trends")
    caveats: List[str] = Field(default_factory=list, description="Disclaimers, footnotes, qualifying statements")

    @field_validator("slide_type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        v = (v or "other").strip().lower() if isinstance(v, str) else "other"
        return v if v in SLIDE_TYPES else "other"


# ---------------------------------------------------------------------------
# Evidence
# ---------------------------------------------------------------------------

ProvenanceKind = Literal["deck_slide", "website", "web_search", "extra_context"]


class Provenance(BaseModel):
    kind: ProvenanceKind = Field(description="Source type")
    page: Optional[int] = Field(default=None, description="Slide page number if from deck")
    location: Optional[str] = Field(default=None, description="URL path or section if from website")
    snippet: Optional[str] = Field(default=None, description="Verbatim snippet from source")

    def label(self) -> str:
        if self.kind == "deck_slide":
            return f"Slide {self.page}"
        if self.kind == "extra_context":
            return "Private context"
        return self.location or "/"


class EvidenceItem(BaseModel):
    text: str = Field(description="The evidence text")
    source: Provenance = Field(description="Where this evidence came from")


class FundingFact(BaseModel):
    round_type: Optional[str] = Field(default=None, description="e.g., Seed, Series A")
    amount: Optional[str] = Field(default=None, description="e.g., $2M")
    investors: List[str] = Field(default_factory=list, description="List of investor names")
    date: Optional[str] = Field(default=None, description="Date or timeframe")
    source: Provenance


class TractionFact(BaseModel):
    metric_type: str = Field(description="revenue, users, customers, growth_rate, etc.")
    value: str = Field(description="Metric value")
    timeframe: Optional[str] = None
    context: Optional[str] = None
    source: Provenance

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, v):
        return v if isinstance(v, str) else str(v)


class TeamFact(BaseModel):
    name: str
    role: Optional[str] = None
    background: Optional[str] = Field(default=None, description="Past experience, education")
    source: Provenance


class Evidence(BaseModel):
    """Grounded facts extracted from the website, deck, search results and private context."""
    problem_snippets: List[EvidenceItem] = Field(default_factory=list)
    solution_snippets: List[EvidenceItem] = Field(default_factory=list)
    value_prop_snippets: List[EvidenceItem] = Field(default_factory=list)
    team_facts: List[TeamFact] = Field(default_factory=list)
    competition_snippets: List[EvidenceItem] = Field(default_factory=list)
    funding_facts: List[FundingFact] = Field(default_factory=list)
    traction_facts: List[TractionFact] = Field(default_factory=list)
    market_snippets: List[EvidenceItem] = Field(default_factory=list)
    business_model_snippets: List[EvidenceItem] = Field(default_factory=list)
    claims: List[EvidenceItem] = Field(default_factory=list, description="Self-reported claims needing verification")

    def stats(self) -> dict:
        return {
            "problem_snippets": len(self.problem_snippets),
            "solution_snippets": len(self.solution_snippets),
            "team_facts": len(self.team_facts),
            "traction_facts": len(self.traction_facts),
            "funding_facts": len(self.funding_facts),
            "competition_snippets": len(self.competition_snippets),
            "market_snippets": len(self.market_snippets),
        }


# ---------------------------------------------------------------------------
# Core analysis
# ---------------------------------------------------------------------------

class Problem(BaseModel):
    one_liner: str = Field(description="One sentence problem statement")
    details: str = Field(default="", description="2-4 sentences elaborating on the problem")
    pain_points: List[str] = Field(default_factory=list)
    target_users: str = Field(default="Unknown", description="Who experiences this problem")


class Solution(BaseModel):
    one_liner: str = Field(description="One sentence solution description")
    details: str = Field(default="", description="2-4 sentences explaining how it works")
    features: List[str] = Field(default_factory=list)


class ValueProposition(BaseModel):
    summary: str = Field(description="Clear statement of unique value delivered")
    key_benefits: List[str] = Field(default_factory=list)


class Market(BaseModel):
    tam: Optional[str] = Field(default=None, description="Only if explicitly labeled TAM, or an estimate")
    tam_label: Optional[str] = None
    tam_is_explicit: bool = False
    sam: Optional[str] = None
    sam_label: Optional[str] = None
    sam_is_explicit: bool = False
    som: Optional[str] = None
    som_label: Optional[str] = None
    som_is_explicit: bool = False
    market_size_summary: Optional[str] = None
    growth_trends: List[str] = Field(default_factory=list)
    target_customers: Optional[str] = None
    industry_investment_size: Optional[str] = Field(default=None, description="Industry spend, not TAM")
    market_notes: Optional[str] = None


class Core(BaseModel):
    problem: Problem
    solution: Solution
    value_proposition: ValueProposition
    market: Market = Field(default_factory=Market)
    product_type: str = Field(default="Unknown", description="SaaS | App | Platform | API | Service | Hardware | Marketplace | Other")
    sector: str = Field(default="Unknown", description="Broad industry")
    subsector: str = Field(default="Unknown", description="Specific niche")
    active_locations: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Business analysis
# ---------------------------------------------------------------------------

class TeamMember(BaseModel):
    name: str
    role: str = "Unknown"
    background: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    source_ids: List[str] = Field(default_factory=list, description="References to evidence sources")


class Team(BaseModel):
    size: Optional[str] = Field(default=None, description='Team size (e.g., "10-50 employees")')
    members: List[TeamMember] = Field(default_factory=list)
    collective_expertise: Optional[str] = None


class TractionMetric(BaseModel):
    metric: str = Field(description="Metric name (e.g., MRR, users, customers)")
    value: str
    trend: Optional[str] = None
    timeframe: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, v):
        return v if isinstance(v, str) else str(v)


class Partnership(BaseModel):
    name: str
    type: str = Field(description="customer, partner, LOI, pilot, integration, distribution, etc.")
    details: Optional[str] = None


class Traction(BaseModel):
    metrics: List[TractionMetric] = Field(default_factory=list)
    partnerships: List[Partnership] = Field(default_factory=list)
    milestones: List[str] = Field(default_factory=list)


class Competitor(BaseModel):
    name: str
    website: Optional[str] = None
    product_type: Optional[str] = None
    description: Optional[str] = None
    differentiation: Optional[str] = Field(default=None, description="How the startup differs from this competitor")
    active_locations: List[str] = Field(default_factory=list)


class Competition(BaseModel):
    competitors: List[Competitor] = Field(default_factory=list)
    positioning: str = Field(default="Unknown", description="How the startup positions itself vs competition")
    notes: Optional[str] = None


class FundingRound(BaseModel):
    type: str = Field(description="pre-seed, seed, Series A, etc.")
    amount: Optional[str] = None
    investors: List[str] = Field(default_factory=list)
    date: Optional[str] = None
    status: str = Field(default="completed", description="completed, ongoing, target")


class Funding(BaseModel):
    rounds: List[FundingRound] = Field(default_factory=list)
    total_raised: Optional[str] = None
    status: str = Field(default="Unknown", description="Current fundraising status")
    notes: Optional[str] = None


class BusinessModel(BaseModel):
    summary: Optional[str] = None
    monetization: List[str] = Field(default_factory=list)
    pricing: Optional[str] = None


class Business(BaseModel):
    team: Team = Field(default_factory=Team)
    traction: Traction = Field(default_factory=Traction)
    competition: Competition = Field(default_factory=Competition)
    funding: Funding = Field(default_factory=Funding)
    business_model: BusinessModel = Field(default_factory=BusinessModel)


# ---------------------------------------------------------------------------
# Risk analysis
# ---------------------------------------------------------------------------

SEVERITIES = ("low", "medium", "high", "critical")


class RiskItem(BaseModel):
    category: str = Field(description="market, team, competition, technology, business_model, execution, regulatory, financial")
    description: str
    severity: Optional[Literal["low", "medium", "high", "critical"]] = None

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, v):
        if not isinstance(v, str):
            return None
        v = v.strip().lower()
        return v if v in SEVERITIES else None


class Risk(BaseModel):
    risks: List[RiskItem] = Field(default_factory=list)
    missing_info: List[str] = Field(default_factory=list, description="Critical information not found")


# ---------------------------------------------------------------------------
# Private context
# ---------------------------------------------------------------------------

class ClaimedFundingRound(BaseModel):
    type: str
    amount: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = Field(default=None, description="equity, non-dilutive, grant, debt")
    date: Optional[str] = None
    investors: List[str] = Field(default_factory=list)
    is_explicit_label: bool = False
    source_label: Optional[str] = None
    is_inferred: bool = False


class ContextTeamMember(BaseModel):
    name: str
    role: Optional[str] = None
    past_experience: Optional[str] = None


class UnclassifiedValue(BaseModel):
    value: str
    context: Optional[str] = None
    possible_meaning: Optional[str] = None
    reason_unclassified: Optional[str] = None


class ExtraContextData(BaseModel):
    """Structured reading of user-supplied private context."""
    founded_year: Optional[str] = None

    mrr: Optional[str] = None
    mrr_label: Optional[str] = None
    mrr_is_explicit: bool = False
    arr: Optional[str] = None
    arr_label: Optional[str] = None
    arr_is_explicit: bool = False

    funding_raised_total: Optional[str] = None
    funding_raised_label: Optional[str] = None
    funding_raised_is_explicit: bool = False
    funding_rounds: List[ClaimedFundingRound] = Field(default_factory=list)
    non_dilutive_funding: Optional[str] = None
    current_funding_round: Optional[str] = None
    target_funding_amount: Optional[str] = None
    funding_investors: List[str] = Field(default_factory=list)
    burn_rate: Optional[str] = None
    runway: Optional[str] = None
    valuation: Optional[str] = None

    tam_claimed: Optional[str] = None
    tam_label: Optional[str] = None
    tam_is_explicit: bool = False
    sam_claimed: Optional[str] = None
    sam_label: Optional[str] = None
    sam_is_explicit: bool = False
    som_claimed: Optional[str] = None
    som_label: Optional[str] = None
    som_is_explicit: bool = False
    industry_investment_size: Optional[str] = None
    industry_investment_label: Optional[str] = None

    team_size_claimed: Optional[str] = None
    team_members: List[ContextTeamMember] = Field(default_factory=list)
    key_hires: List[str] = Field(default_factory=list)

    customer_count: Optional[str] = None
    user_count: Optional[str] = None
    retention_rate: Optional[str] = None
    churn_rate: Optional[str] = None
    ltv: Optional[str] = None
    cac: Optional[str] = None
    loi_count: Optional[int] = None
    loi_value: Optional[str] = None

    competition_claims: List[str] = Field(default_factory=list)
    unique_advantages_claimed: List[str] = Field(default_factory=list)
    unclassified_values: List[UnclassifiedValue] = Field(default_factory=list)
    other_notes: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Final output
# ---------------------------------------------------------------------------

class StartupAnalysis(BaseModel):
    """Final structured startup analysis."""
    startup_id: str
    url: str
    name: Optional[str] = None

    problem: Problem
    solution: Solution
    value_proposition: ValueProposition
    market: Market = Field(default_factory=Market)
    product_type: str = "Unknown"
    sector: str = "Unknown"
    subsector: str = "Unknown"
    active_locations: List[str] = Field(default_factory=list)

    team: Team
    traction: Traction
    competition: Competition
    funding: Funding
    business_model: BusinessModel

    risks: List[RiskItem] = Field(default_factory=list)
    missing_info: List[str] = Field(default_factory=list)

    extra_context: Optional[ExtraContextData] = None
    sources: List[str] = Field(default_factory=list)
    evidence_summary: Optional[str] = None
    analyzed_at: str = Field(description="ISO timestamp of analysis")
