"""Execution helpers for running single, streamed or batch analyses."""

import argparse
import json
import os
import sys
import time
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd

from . import config
from .renderer import render_failure_report, render_markdown
from .schemas import SlideImage, StartupAnalysis
from .state import StartupState
from .store import AnalysisStore
from .utils import get_domain, slugify
from .workflow import STAGE_PROGRESS, build_workflow

logger = config.logger

ACCUMULATED_KEYS = ("errors", "sources")


def initial_state(
    url: str,
    name: Optional[str] = None,
    deck_path: Optional[str] = None,
    deck_slides: Optional[List[SlideImage]] = None,
    extra_context: Optional[str] = None,
    startup_id: Optional[str] = None,
) -> StartupState:
    return {
        "startup_id": startup_id or f"analysis-{int(time.time() * 1000)}",
        "url": url,
        "name": name,
        "deck_path": deck_path,
        "extra_context": extra_context,
        "deck_slides": deck_slides,
        "website_html": None,
        "web_chunks": None,
        "search_chunks": None,
        "deck_structured": None,
        "extra_context_data": None,
        "evidence": None,
        "core": None,
        "business": None,
        "risk": None,
        "final_analysis": None,
        "memo": None,
        "sources": [],
        "errors": [],
    }


def _banner(title: str, state: StartupState) -> None:
    logger.info(f"\n{'=' * 70}")
    logger.info(title)
    logger.info(f"Startup: {state.get('name') or get_domain(state['url'])} ({state['url']})")
    logger.info(f"{'=' * 70}\n")


def analyze_startup(url: str, **kwargs) -> StartupState:
    """Run the full pipeline and return the final state."""
    state = initial_state(url, **kwargs)
    _banner("STARTING PITCH PANDA ANALYSIS", state)

    app = build_workflow()
    try:
        final_state = app.invoke(state)
    except Exception as exc:
        logger.exception(f"Pipeline failed: {exc}")
        state["errors"] = state["errors"] + [f"Pipeline failed: {exc}"]
        return state

    logger.info(f"\n{'=' * 70}")
    logger.info("ANALYSIS COMPLETE")
    logger.info(f"{'=' * 70}\n")
    if final_state.get("errors"):
        logger.warning(f"Analysis finished with {len(final_state['errors'])} errors")
    return final_state


def stream_analysis(url: str, **kwargs) -> Iterator[Dict[str, Any]]:
    """Yield {stage, progress, node, state} after each node completes."""
    state = initial_state(url, **kwargs)
    _banner("STREAMING PITCH PANDA ANALYSIS", state)

    app = build_workflow()
    try:
        for chunk in app.stream(state, stream_mode="updates"):
            for node, update in chunk.items():
                for key, value in (update or {}).items():
                    if key in ACCUMULATED_KEYS:
                        state[key] = state[key] + list(value)
                    else:
                        state[key] = value
                stage, progress = STAGE_PROGRESS.get(node, ("unknown", 0))
                yield {"stage": stage, "progress": progress, "node": node, "state": {**state}}
    except Exception as exc:
        logger.exception(f"Pipeline failed: {exc}")
        state["errors"] = state["errors"] + [f"Pipeline failed: {exc}"]
        yield {"stage": "error", "progress": -1, "node": None, "state": {**state}}


def run_status(state: StartupState) -> str:
    if state.get("final_analysis") is None:
        return "Failed"
    return "Partial" if state.get("errors") else "Success"


def write_report(state: StartupState, output_dir: str = config.OUTPUT_DIR) -> str:
    """Render the state to markdown and write it; returns the file path."""
    os.makedirs(output_dir, exist_ok=True)
    slug = slugify(state.get("name") or get_domain(state["url"])) or "analysis"
    report_filename = os.path.join(output_dir, f"{slug}.md")

    analysis = state.get("final_analysis")
    if analysis is not None:
        report = render_markdown(analysis, state.get("memo"), state.get("errors") or [], state.get("sources") or [])
    else:
        report = render_failure_report(state)

    with open(report_filename, "w", encoding="utf-8") as file:
        file.write(report)

    logger.info(f"[OK] Report saved to: {report_filename}")
    return report_filename


def analyze_single_startup(
    url: str,
    output_dir: str = config.OUTPUT_DIR,
    store: Optional[AnalysisStore] = None,
    **kwargs,
) -> Dict[str, Any]:
    """Analyze one startup, write its report and summarize the outcome."""
    try:
        state = analyze_startup(url, **kwargs)
        filename = write_report(state, output_dir)
        if store is not None and state.get("final_analysis") is not None:
            store.save(url, state["final_analysis"], state.get("memo"))
    except Exception as exc:  # pragma: no cover - runtime logging
        logger.exception(f"Error during execution: {exc}")
        return {"url": url, "name": kwargs.get("name"), "status": "Failed", "filename": None, "errors": 1, "risks": 0}

    analysis = state.get("final_analysis")
    return {
        "url": url,
        "name": kwargs.get("name"),
        "status": run_status(state),
        "filename": filename,
        "errors": len(state.get("errors") or []),
        "risks": len(analysis.risks) if analysis is not None else 0,
    }


def analyze_batch(startups_file: str, output_dir: str = config.OUTPUT_DIR, store: Optional[AnalysisStore] = None):
    """Analyze multiple startups from a JSON file."""
    with open(startups_file, "r", encoding="utf-8") as file:
        startups = json.load(file)

    results = []
    for startup in startups:
        result = analyze_single_startup(
            startup["url"],
            output_dir=output_dir,
            store=store,
            name=startup.get("name"),
            deck_path=startup.get("deck"),
            extra_context=startup.get("context"),
        )
        results.append(result)

    return pd.DataFrame(results, columns=["url", "name", "status", "filename", "errors", "risks"])


def _report_cached(url: str, store: AnalysisStore, output_dir: str) -> None:
    record = store.get(url)
    logger.info(f"{get_domain(url)} was already analyzed on {record.get('updated_at', 'unknown date')[:10]}")
    logger.info("Use --force to run the analysis again")
    state = initial_state(url, name=record.get("name"))
    state["final_analysis"] = StartupAnalysis.model_validate(record["analysis"])
    state["memo"] = record.get("memo")
    write_report(state, output_dir)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Pitch Panda - Automated Startup Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Single startup analysis:
    pitch-panda https://supercity.ai --name "Super City AI"

  With a pitch deck and private context:
    pitch-panda supercity.ai --deck ./decks/supercity.pdf --context-file ./notes/supercity.txt

  Batch analysis:
    pitch-panda --batch startups.json --output-dir ./reports
        """,
    )

    parser.add_argument("url", nargs="?", help="Startup website URL")
    parser.add_argument("--name", type=str, help="Startup name")
    parser.add_argument("--deck", type=str, help="Pitch deck: a PDF, an image, or a directory of slide images")
    context_group = parser.add_mutually_exclusive_group()
    context_group.add_argument("--context", type=str, help="Private context text (metrics, funding details)")
    context_group.add_argument("--context-file", type=str, help="Path to a text file with private context")
    parser.add_argument("--batch", type=str, help="Path to JSON file with a list of startups")
    parser.add_argument(
        "--output-dir", type=str, default=config.OUTPUT_DIR, help=f"Output directory for reports (default: {config.OUTPUT_DIR})"
    )
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the analysis store")
    parser.add_argument("--force", action="store_true", help="Re-run even if the domain was already analyzed")

    args = parser.parse_args(argv)

    missing_keys = config.validate_api_keys()
    if missing_keys:
        logger.error(f"Missing required environment variables: {', '.join(missing_keys)}")
        return 1

    store = None if args.no_cache else AnalysisStore()

    if args.batch:
        if not os.path.exists(args.batch):
            logger.error(f"Batch file not found: {args.batch}")
            return 1

        logger.info(f"Running batch analysis from: {args.batch}")
        results_df = analyze_batch(args.batch, args.output_dir, store=store)

        os.makedirs(args.output_dir, exist_ok=True)
        summary_file = os.path.join(args.output_dir, f"batch_results_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv")
        results_df.to_csv(summary_file, index=False, encoding="utf-8")

        logger.info(f"\n{'=' * 70}")
        logger.info("BATCH ANALYSIS COMPLETE")
        logger.info(f"{'=' * 70}")
        logger.info(f"\nResults summary saved to: {summary_file}")
        logger.info("\nSummary:")
        logger.info(results_df.to_string(index=False))
        return 0 if (results_df["status"] != "Failed").all() else 1

    if not args.url:
        parser.print_help()
        logger.error("Either a URL or --batch must be provided")
        return 1

    if store is not None and not args.force and store.exists(args.url):
        _report_cached(args.url, store, args.output_dir)
        return 0

    extra_context = args.context
    if args.context_file:
        with open(args.context_file, "r", encoding="utf-8") as file:
            extra_context = file.read()

    result = analyze_single_startup(
        args.url,
        output_dir=args.output_dir,
        store=store,
        name=args.name,
        deck_path=args.deck,
        extra_context=extra_context,
    )
    logger.info(f"Status: {result['status']} ({result['errors']} errors, {result['risks']} risks)")
    return 0 if result["status"] != "Failed" else 1


if __name__ == "__main__":
    sys.exit(main())
