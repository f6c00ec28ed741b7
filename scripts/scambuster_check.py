#!/usr/bin/env python3
# scripts/scambuster_check.py

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from scambuster.core.config import load_config
from scambuster.core.pipeline import TrustPipeline
from scambuster.normalize.transformer import load_report_records
from scambuster.report.summary import CheckSummaryRenderer

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("scambuster_check")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="ScamBuster Identifier Check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Human-readable summary for an identifier's reports
  scambuster_check.py --input reports.json --query 0712345678

  # JSON assessment with an open dispute
  scambuster_check.py --input reports.json --disputes --format json
        """,
    )

    parser.add_argument(
        "--input", required=True, help="Input JSON file with the identifier's reports"
    )
    parser.add_argument(
        "--query", default=None, help="Identifier shown in the summary (default: first report's)"
    )
    parser.add_argument(
        "--disputes", action="store_true", help="An active dispute exists for the identifier"
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format (default: text)"
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Configuration file path (default: config/config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        pipeline = TrustPipeline(config)
    except ValueError as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    input_path = Path(args.input).resolve()
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        sys.exit(1)

    try:
        reports = load_report_records(input_path)
    except ValueError as e:
        logger.error(f"Failed to read reports: {e}")
        sys.exit(1)

    assessment = pipeline.assess_identifier(reports, has_disputes=args.disputes)
    independence = pipeline.summarize_independence(reports)

    if args.format == "json":
        output = {
            "assessment": assessment.model_dump(mode="json"),
            "independence": independence.model_dump(mode="json"),
        }
        print(json.dumps(output, indent=2))
    else:
        query = args.query or (reports[0].identifier if reports else "")
        renderer = CheckSummaryRenderer()
        print(renderer.render(query, reports, assessment, independence.summary))


if __name__ == "__main__":
    main()
