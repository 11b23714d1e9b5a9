import os

import pytest

os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.pop("TAVILY_API_KEY", None)

from pitch_panda import llm  # noqa: E402
from pitch_panda.schemas import (  # noqa: E402
    Business,
    Competition,
    Competitor,
    Core,
    Evidence,
    EvidenceItem,
    ExtraContextData,
    Funding,
    FundingFact,
    FundingRound,
    Market,
    Problem,
    Provenance,
    Risk,
    RiskItem,
    Slide,
    Solution,
    Team,
    TeamFact,
    TeamMember,
    Traction,
    TractionFact,
    TractionMetric,
    ValueProposition,
)

PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


def make_evidence() -> Evidence:
    website = Provenance(kind="website", location="/")
    slide = Provenance(kind="deck_slide", page=2)
    return Evidence(
        problem_snippets=[EvidenceItem(text="Cities waste energy in public buildings", source=website)],
        solution_snippets=[EvidenceItem(text="AI platform that optimizes building energy", source=slide)],
        team_facts=[TeamFact(name="Ada Lovelace", role="CEO", source=website)],
        traction_facts=[TractionFact(metric_type="customers", value=12, source=slide)],
        funding_facts=[FundingFact(round_type="Seed", amount="$2M", source=Provenance(kind="extra_context"))],
        market_snippets=[EvidenceItem(text="Smart city market grows fast", source=Provenance(kind="web_search", location="https://news.example.com/a"))],
        claims=[EvidenceItem(text="First to market", source=slide)],
    )


def make_core() -> Core:
    return Core(
        problem=Problem(one_liner="Cities waste energy", pain_points=["High bills"]),
        solution=Solution(one_liner="AI energy optimization", features=["Forecasting"]),
        value_proposition=ValueProposition(summary="Cuts energy costs by 20%"),
        market=Market(tam="$50B", tam_label="TAM", tam_is_explicit=True),
        product_type="SaaS",
        sector="Climate",
        subsector="Smart buildings",
        active_locations=["Germany"],
    )


def make_business() -> Business:
    return Business(
        team=Team(size="8", members=[TeamMember(name="Ada Lovelace", role="CEO")]),
        traction=Traction(metrics=[TractionMetric(metric="customers", value="12")]),
        competition=Competition(
            competitors=[Competitor(name="GridCo", product_type="saas", differentiation="Hardware-free")],
            positioning="Software-only",
        ),
        funding=Funding(rounds=[FundingRound(type="Seed", amount="$2M")], status="Raising Series A"),
    )


def make_risk() -> Risk:
    return Risk(
        risks=[
            RiskItem(category="market", description="Long municipal sales cycles", severity="high"),
            RiskItem(category="team", description="No CTO named", severity="medium"),
        ],
        missing_info=["No revenue data provided"],
    )


class FakeLLM:
    """Stands in for llm.invoke_structured / llm.invoke_text and records calls."""

    def __init__(self):
        self.calls = []
        self.failing = set()
        self.responses = {
            Slide: lambda messages: Slide(page=99, slide_type="Traction", title="Growth"),
            ExtraContextData: lambda messages: ExtraContextData(mrr="$40k", mrr_label="MRR", mrr_is_explicit=True),
            Evidence: lambda messages: make_evidence(),
            Core: lambda messages: make_core(),
            Business: lambda messages: make_business(),
            Risk: lambda messages: make_risk(),
        }
        self.memo = "## Executive Summary\nSuper City AI sells energy software."

    def invoke_structured(self, schema, messages, vision=False):
        self.calls.append((schema, messages, vision))
        if schema in self.failing:
            raise RuntimeError(f"{schema.__name__} model unavailable")
        return self.responses[schema](messages)

    def invoke_text(self, messages, temperature=0.3, max_tokens=2000):
        self.calls.append(("text", messages, False))
        if "text" in self.failing:
            raise RuntimeError("text model unavailable")
        return self.memo

    def schemas_called(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm, "invoke_structured", fake.invoke_structured)
    monkeypatch.setattr(llm, "invoke_text", fake.invoke_text)
    return fake


@pytest.fixture
def homepage_html():
    return """
    <html><body>
      <nav>Home About</nav>
      <main>
        <h1>Super City AI</h1>
        <p>Energy optimization for public buildings.</p>
        <h2>Team</h2>
        <li>Ada Lovelace, CEO</li>
        <a href="/about">About us</a>
        <a href="https://other.example.com/team">Elsewhere</a>
      </main>
      <footer>Copyright</footer>
    </body></html>
    """


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def fake_http(monkeypatch, homepage_html):
    """Serve pages from a dict keyed by URL; unknown URLs return 404."""
    import requests

    pages = {
        "https://supercity.ai": homepage_html,
        "https://supercity.ai/about": "<html><body><h2>Our story</h2><p>Founded in Berlin.</p></body></html>",
    }
    requested = []

    def fake_get(url, headers=None, timeout=None):
        requested.append(url)
        if url in pages:
            return FakeResponse(pages[url])
        return FakeResponse("", status_code=404)

    monkeypatch.setattr(requests, "get", fake_get)
    return pages, requested
