import pytest

from pitch_panda import config, runner
from pitch_panda.schemas import Business, Evidence, Slide, SlideImage
from pitch_panda.workflow import STAGE_PROGRESS, build_workflow, guarded

from conftest import PNG_DATA_URL


@pytest.fixture(autouse=True)
def no_search(monkeypatch):
    monkeypatch.setattr(config, "search_enabled", lambda: False)


def test_guarded_converts_exceptions_to_errors():
    def boom(state):
        raise ValueError("exploded")

    assert guarded("boom", boom)({}) == {"errors": ["boom failed: exploded"]}
    assert guarded("ok", lambda state: {"memo": "x"})({}) == {"memo": "x"}


def test_graph_has_every_stage():
    nodes = set(build_workflow().get_graph().nodes)
    assert set(STAGE_PROGRESS) <= nodes


def test_full_pipeline(fake_llm, fake_http):
    slides = [SlideImage(page=1, image_data_url=PNG_DATA_URL)]

    state = runner.analyze_startup("supercity.ai", name="Super City AI", deck_slides=slides, extra_context="MRR: $40k")

    assert state["errors"] == []
    analysis = state["final_analysis"]
    assert analysis.name == "Super City AI"
    assert analysis.sources[0] == "https://supercity.ai"
    assert analysis.extra_context.mrr == "$40k"
    assert state["memo"] == fake_llm.memo
    assert [s.page for s in state["deck_structured"]] == [1]
    assert len(fake_llm.calls) == 7


def test_failed_stage_is_recorded_and_run_finishes(fake_llm, fake_http):
    fake_llm.failing.add(Business)

    state = runner.analyze_startup("supercity.ai")

    assert state["final_analysis"] is None
    assert state["core"] is not None
    assert "business_analysis failed: Business model unavailable" in state["errors"]
    assert "risk_analysis failed: Core and business analysis required for risk assessment" in state["errors"]
    assert "investment_memo failed: Final analysis required for memo generation" in state["errors"]


def test_memo_failure_keeps_final_analysis(fake_llm, fake_http):
    fake_llm.failing.add("text")

    state = runner.analyze_startup("supercity.ai")

    assert state["final_analysis"] is not None
    assert state["memo"] is None
    assert state["errors"] == ["investment_memo failed: text model unavailable"]


def test_no_content_anywhere(fake_llm, fake_http):
    state = runner.analyze_startup("unknown.example.com")

    assert state["evidence"] is None
    assert state["final_analysis"] is None
    assert (
        "No content available for evidence extraction (website, deck and context all missing)" in state["errors"]
    )
    assert "core_analysis failed: No evidence available for core analysis" in state["errors"]
    assert fake_llm.calls == []


def test_stream_reports_progress(fake_llm, fake_http):
    events = list(runner.stream_analysis("supercity.ai", name="Super City AI"))

    assert len(events) == len(STAGE_PROGRESS)
    progress = [event["progress"] for event in events]
    assert progress == sorted(progress)
    assert {e["stage"] for e in events[:4]} == {"ingest"}
    assert events[-1]["stage"] == "complete"
    assert events[-1]["progress"] == 100
    assert events[0]["state"]["memo"] is None
    assert events[0]["state"]["final_analysis"] is None
    assert events[-1]["state"] is not events[0]["state"]
    final_state = events[-1]["state"]
    assert final_state["final_analysis"] is not None
    assert final_state["sources"][0]["url"] == "https://supercity.ai"


def test_stream_reports_catastrophic_failure(monkeypatch):
    class BrokenGraph:
        def stream(self, state, stream_mode=None):
            raise RuntimeError("graph exploded")
            yield

    monkeypatch.setattr(runner, "build_workflow", lambda: BrokenGraph())

    events = list(runner.stream_analysis("supercity.ai"))

    assert events == [
        {"stage": "error", "progress": -1, "node": None, "state": events[0]["state"]}
    ]
    assert events[0]["state"]["errors"] == ["Pipeline failed: graph exploded"]


def test_analyze_startup_catches_catastrophic_failure(monkeypatch):
    class BrokenGraph:
        def invoke(self, state):
            raise RuntimeError("graph exploded")

    monkeypatch.setattr(runner, "build_workflow", lambda: BrokenGraph())

    state = runner.analyze_startup("supercity.ai")

    assert state["final_analysis"] is None
    assert state["errors"] == ["Pipeline failed: graph exploded"]


def test_slide_failure_drops_deck_and_run_continues(fake_llm, fake_http):
    fake_llm.failing.add(Slide)
    slides = [SlideImage(page=p, image_data_url=PNG_DATA_URL) for p in (1, 2)]

    state = runner.analyze_startup("supercity.ai", deck_slides=slides)

    assert "deck_vision failed: Slide model unavailable" in state["errors"]
    assert state["deck_structured"] is None
    assert Evidence in fake_llm.schemas_called()
    assert state["final_analysis"] is not None
    assert runner.run_status(state) == "Partial"
