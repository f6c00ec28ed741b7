#!/usr/bin/env python3
# scripts/scambuster_ingest.py

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError

from scambuster.core.config import load_config
from scambuster.core.pipeline import DuplicateReportError, TrustPipeline
from scambuster.normalize.schema import ReportSubmission
from scambuster.normalize.transformer import load_report_records

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("scambuster_ingest")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="ScamBuster Report Ingestion Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Score a new submission against stored reports
  scambuster_ingest.py --submission new.json --existing reports.json --output scored.json

  # First report for an identifier
  scambuster_ingest.py --submission new.json --reporter-ip 41.90.1.2
        """,
    )

    parser.add_argument(
        "--submission", required=True, help="JSON file with the raw report submission"
    )
    parser.add_argument(
        "--existing", default=None, help="JSON file with reports stored for the identifier"
    )
    parser.add_argument(
        "--reporter-ip", default=None, help="Submitter IP address (stored hashed)"
    )
    parser.add_argument(
        "--reporter-verified", action="store_true", help="Reporter is phone-verified"
    )
    parser.add_argument(
        "--official-source", action="store_true", help="Report is backed by an official source"
    )
    parser.add_argument(
        "--output", default=None, help="Output JSON file (default: stdout)"
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

    submission_path = Path(args.submission).resolve()
    if not submission_path.exists():
        logger.error(f"Submission file not found: {submission_path}")
        sys.exit(1)

    try:
        with open(submission_path, "r", encoding="utf-8") as f:
            submission = ReportSubmission.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid submission: {e}")
        sys.exit(1)

    existing = []
    if args.existing:
        existing_path = Path(args.existing).resolve()
        if not existing_path.exists():
            logger.error(f"Existing reports file not found: {existing_path}")
            sys.exit(1)
        try:
            existing = load_report_records(existing_path)
        except ValueError as e:
            logger.error(f"Failed to read existing reports: {e}")
            sys.exit(1)

    try:
        outcome = pipeline.evaluate_submission(
            submission,
            existing,
            reporter_ip=args.reporter_ip,
            reporter_verified=args.reporter_verified,
            has_official_source=args.official_source,
        )
    except DuplicateReportError as e:
        logger.error(f"{e} (existing report: {e.existing_report_id})")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Submission rejected: {e}")
        sys.exit(1)

    logger.info(outcome.message)
    result = json.dumps(outcome.model_dump(mode="json"), indent=2)

    if args.output:
        output_path = Path(args.output).resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result)
        logger.info(f"Wrote scored report {outcome.record.id} to {output_path}")
    else:
        print(result)


if __name__ == "__main__":
    main()
