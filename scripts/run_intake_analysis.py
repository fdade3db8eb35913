#!/usr/bin/env python3
"""
Intake Analysis Runner

Runs the intake analysis for one research session:
1. Load the session's research data (JSON)
2. Check there is enough data to analyze
3. Analyze with Claude (or fall back to defaults without an API key)
4. Write the result JSON

Usage:
    # Set environment variables first (optional - defaults are used without it):
    export ANTHROPIC_API_KEY=your_key

    # Run analysis:
    python scripts/run_intake_analysis.py session.json

    # With options:
    python scripts/run_intake_analysis.py session.json \
        --output results/acme.json \
        --model claude-sonnet-4-20250514
"""

import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run_intake_analysis(
    input_path: Path,
    output_path: Path = None,
    model: str = None,
    force: bool = False,
):
    """Run the analysis pipeline for one session file."""

    load_dotenv()

    from intake_analyzer.analyzer import ClaudeClient, IntakeAnalyzer, can_analyze
    from intake_analyzer.models import AnalysisInput
    from intake_analyzer.utils import get_settings

    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    with open(input_path, encoding="utf-8") as f:
        session = json.load(f)

    try:
        data = AnalysisInput.from_dict(session)
    except ValueError as e:
        print(f"ERROR: {e}")
        return None

    ok, reason = can_analyze(session)
    if not ok and not force:
        print(f"ERROR: {reason}")
        print("  Use --force to analyze anyway (fields will be mostly defaults)")
        return None

    print(f"\n{'='*70}")
    print("INTAKE ANALYZER")
    print(f"{'='*70}")
    print(f"Session:      {data.session_id}")
    print(f"Business:     {data.business_name}")
    print(f"Website:      {data.website}")
    print(f"Location:     {data.location or '(not specified)'}")
    print(f"Environment:  {settings.ENVIRONMENT}")
    print(f"Evidence:     {', '.join(k for k, v in data.evidence_summary().items() if v) or 'none'}")
    print(f"{'='*70}\n")

    client = ClaudeClient(model=model, settings=settings)
    if not client.is_configured:
        print("⚠ ANTHROPIC_API_KEY not set - using fallback analysis")

    analyzer = IntakeAnalyzer(client=client, settings=settings)
    result = await analyzer.analyze(data)
    analysis = result.data

    output_path = output_path or input_path.with_name(f"{input_path.stem}_analysis.json")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(analysis.to_dict(), f, indent=2, ensure_ascii=False)

    # =========================================================================
    # Summary
    # =========================================================================
    print("\n" + "="*70)
    print("ANALYSIS COMPLETE")
    print("="*70)
    print(f"Model: {analysis.model}")
    print(f"Taxonomy version: {analysis.taxonomy_version}")
    print(f"Overall confidence: {analysis.overall_confidence:.1%}")
    print(f"High / low confidence fields: "
          f"{analysis.fields_with_high_confidence} / {analysis.fields_with_low_confidence}")
    print(f"Data quality: {analysis.data_quality_score:.0f}/100")
    print(f"Duration: {analysis.processing_time_ms / 1000:.1f} seconds")
    print(f"Cost: ${result.estimated_cost:.4f}")
    for warning in analysis.warnings:
        print(f"  ⚠ {warning}")
    print("="*70 + "\n")

    return {
        "success": result.success,
        "output_path": str(output_path),
        "model": analysis.model,
        "cost": result.estimated_cost,
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze research data and pre-populate the intake questionnaire"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Research session JSON (sessionId, businessName, website, evidence...)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the result (default: <input>_analysis.json)"
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Claude model override"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Analyze even when no GBP, crawl or sitemap data is present"
    )

    args = parser.parse_args()

    result = asyncio.run(run_intake_analysis(
        input_path=args.input,
        output_path=args.output,
        model=args.model,
        force=args.force,
    ))

    if result:
        print(f"\nResult saved to: {result['output_path']}")
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
