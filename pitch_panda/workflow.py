"""Build and compile the LangGraph workflow."""

from functools import wraps
from typing import Any, Callable, Dict

from langgraph.graph import END, START, StateGraph

from . import config
from .nodes import (
    business_analysis,
    core_analysis,
    deck_vision,
    evidence_extraction,
    extract_extra_context,
    ingest_deck,
    ingest_website,
    investment_memo,
    merge_analysis,
    research_web,
    risk_analysis,
)
from .state import StartupState

logger = config.logger

INGEST_NODES = ["ingest_website", "ingest_deck", "research_web", "extract_extra_context"]

STAGE_PROGRESS = {
    "ingest_website": ("ingest", 15),
    "ingest_deck": ("ingest", 15),
    "research_web": ("ingest", 15),
    "extract_extra_context": ("ingest", 15),
    "deck_vision": ("vision", 30),
    "evidence_extraction": ("evidence", 45),
    "core_analysis": ("analysis", 65),
    "business_analysis": ("analysis", 65),
    "risk_analysis": ("risk", 80),
    "merge_analysis": ("merge", 90),
    "investment_memo": ("complete", 100),
}


def guarded(name: str, fn: Callable[[StartupState], Dict[str, Any]]):
    """Record a node failure in ``errors`` instead of aborting the run."""

    @wraps(fn)
    def node(state: StartupState) -> Dict[str, Any]:
        logger.info(f"Executing node: {name}")
        try:
            update = fn(state)
        except Exception as exc:
            logger.error(f"Node {name} failed: {exc}")
            return {"errors": [f"{name} failed: {exc}"]}
        logger.info(f"Node {name} completed")
        return update

    return node


def build_workflow():
    """Build and compile the LangGraph workflow."""
    workflow = StateGraph(StartupState)

    workflow.add_node("ingest_website", guarded("ingest_website", ingest_website))
    workflow.add_node("ingest_deck", guarded("ingest_deck", ingest_deck))
    workflow.add_node("research_web", guarded("research_web", research_web))
    workflow.add_node("extract_extra_context", guarded("extract_extra_context", extract_extra_context))

    workflow.add_node("deck_vision", guarded("deck_vision", deck_vision))
    workflow.add_node("evidence_extraction", guarded("evidence_extraction", evidence_extraction))

    workflow.add_node("core_analysis", guarded("core_analysis", core_analysis))
    workflow.add_node("business_analysis", guarded("business_analysis", business_analysis))

    workflow.add_node("risk_analysis", guarded("risk_analysis", risk_analysis))
    workflow.add_node("merge_analysis", guarded("merge_analysis", merge_analysis))
    workflow.add_node("investment_memo", guarded("investment_memo", investment_memo))

    for node in INGEST_NODES:
        workflow.add_edge(START, node)
    workflow.add_edge(INGEST_NODES, "deck_vision")
    workflow.add_edge("deck_vision", "evidence_extraction")
    workflow.add_edge("evidence_extraction", "core_analysis")
    workflow.add_edge("evidence_extraction", "business_analysis")
    workflow.add_edge(["core_analysis", "business_analysis"], "risk_analysis")
    workflow.add_edge("risk_analysis", "merge_analysis")
    workflow.add_edge("merge_analysis", "investment_memo")
    workflow.add_edge("investment_memo", END)

    return workflow.compile()
