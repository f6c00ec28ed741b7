#!/usr/bin/env python3
# scripts/scambuster_sweep.py

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

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("scambuster_sweep")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="ScamBuster Expiration Sweep: list reports that should now expire",
    )
    parser.add_argument("--input", required=True, help="Input JSON file with reports")
    parser.add_argument(
        "--output", default=None, help="Output JSON file for expired IDs (default: stdout)"
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
    expired_ids = pipeline.sweep_expired(reports)

    result = json.dumps({"expired": expired_ids}, indent=2)
    if args.output:
        output_path = Path(args.output).resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result)
        logger.info(f"Wrote {len(expired_ids)} expired report IDs to {output_path}")
    else:
        print(result)


if __name__ == "__main__":
    main()
