"""State definition for the Pitch Panda analysis graph."""

from operator import add
from typing import Annotated, Any, Dict, List, Optional, TypedDict

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
)


class StartupState(TypedDict):
    """State object flowing through every node of the analysis graph."""

    # Input
    startup_id: str
    url: str
    name: Optional[str]
    deck_path: Optional[str]
    extra_context: Optional[str]

    # Raw inputs
    deck_slides: Optional[List[SlideImage]]
    website_html: Optional[str]

    # Processed inputs
    web_chunks: Optional[List[TextChunk]]
    search_chunks: Optional[List[TextChunk]]
    deck_structured: Optional[List[Slide]]
    extra_context_data: Optional[ExtraContextData]

    # Analysis stages
    evidence: Optional[Evidence]
    core: Optional[Core]
    business: Optional[Business]
    risk: Optional[Risk]

    # Final outputs
    final_analysis: Optional[StartupAnalysis]
    memo: Optional[str]

    # Accumulated across stages and parallel branches
    sources: Annotated[List[Dict[str, Any]], add]
    errors: Annotated[List[str], add]
