"""
Batch runner for the compatibility scoring engine.

This is the single entrypoint for precomputing a match table offline.

Usage:
    python -m matchengine.run --profiles profiles.json --output-dir out

The runner performs the following steps:
1. Load and validate configuration
2. Load profiles
3. Score every unordered pair
4. Save the match table (matches.csv) and analytics report (report.json)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_batch(
    profiles_path: str,
    config_path: Optional[str] = None,
    weight_set: Optional[str] = None,
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
    n_jobs: Optional[int] = None,
    output_dir: str = "output"
) -> Dict[str, Any]:
    """
    Score all profile pairs in a file and write the results.

    Args:
        profiles_path: Path to a .json or .csv profile export
        config_path: Path to a YAML config (default: packaged config)
        weight_set: Weight-set name (default: general)
        threshold: Minimum score to keep (overrides config)
        limit: Maximum results to keep (overrides config)
        n_jobs: joblib worker count (overrides config)
        output_dir: Directory for matches.csv and report.json

    Returns:
        Dictionary with run summary and paths to artifacts
    """
    from .configs import load_config, load_default_config, validate_config
    from .data_loading import load_profiles
    from .evaluation import results_to_frame, create_score_report
    from .pair_generation import BatchScorer

    logger.info("=" * 60)
    logger.info("COMPATIBILITY BATCH RUN")
    logger.info("=" * 60)

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    config = load_config(config_path) if config_path else load_default_config()
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(config.get("global", {}).get("log_level", "INFO"))

    if n_jobs is not None:
        config.setdefault("global", {})["n_jobs"] = n_jobs

    # =========================================================================
    # 2. Load profiles
    # =========================================================================
    profiles = load_profiles(profiles_path)

    # =========================================================================
    # 3. Score pairs
    # =========================================================================
    scorer = BatchScorer.from_config(config, weight_set)
    results = scorer.score_batch(profiles, threshold=threshold, limit=limit)

    # =========================================================================
    # 4. Save artifacts
    # =========================================================================
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    matches_path = out / "matches.csv"
    results_to_frame(results).to_csv(matches_path, index=False)
    logger.info(f"Saved {len(results)} matches to {matches_path}")

    report = create_score_report(results, n_profiles=len(profiles))
    report_path = out / "report.json"
    report.save(str(report_path))
    logger.info("\n" + report.summary())

    return {
        "success": True,
        "n_profiles": len(profiles),
        "n_results": len(results),
        "weight_set": scorer.aggregator.weight_set.name,
        "matches_path": str(matches_path),
        "report_path": str(report_path),
    }


def main(argv=None):
    """Main entry point for the batch runner."""
    parser = argparse.ArgumentParser(
        description="Score every pair of profiles and write a match table"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        required=True,
        help="Path to profile export (.json or .csv)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: packaged config)"
    )
    parser.add_argument(
        "--weights",
        type=str,
        default=None,
        help="Weight set to use (e.g. general, event_context)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Drop matches scoring below this value"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Keep at most this many matches"
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Parallel workers (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Output directory for matches.csv and report.json"
    )

    args = parser.parse_args(argv)

    try:
        result = run_batch(
            args.profiles,
            config_path=args.config,
            weight_set=args.weights,
            threshold=args.threshold,
            limit=args.limit,
            n_jobs=args.n_jobs,
            output_dir=args.output_dir,
        )
        if result["success"]:
            logger.info("\nBatch run completed successfully!")
            return 0
        else:
            logger.error("\nBatch run failed!")
            return 1
    except Exception as e:
        logger.exception(f"Batch run failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
