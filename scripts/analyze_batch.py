#!/usr/bin/env python3
"""Batch-analyze local video files and write one JSON report per video.

Videos are analyzed a few at a time (BATCH_MAX_CONCURRENCY, default 3); a
failing video is recorded in the summary and never stops the batch.

Usage:
    python scripts/analyze_batch.py videos/*.mp4
    python scripts/analyze_batch.py --ptd --frames 20 --out reports/ ad1.mp4 ad2.mov
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from batch_processor import process_batch
from configuration import Configuration, load_env_file
from models import AnalysisOptions
from video_analyzer import VideoAnalyzer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
log = logging.getLogger(__name__)


def report_path(out_dir: str, video_path: str) -> str:
    name = os.path.splitext(os.path.basename(video_path))[0]
    return os.path.join(out_dir, f"{name}.analysis.json")


def run(videos: list[str], out_dir: str, options: AnalysisOptions, config: Configuration) -> list[dict]:
    """Analyze every video and return one summary row per input, in order."""
    os.makedirs(out_dir, exist_ok=True)
    analyzer = VideoAnalyzer(config)

    def analyze(path: str) -> dict:
        start = time.time()
        log.info("Analyzing %s", path)
        result = analyzer.analyze_video(path, options=options)
        data = result.to_dict()
        with open(report_path(out_dir, path), "w") as f:
            json.dump(data, f, indent=2)
        return {
            "scenes": len(result.scenes),
            "recommendations": len(result.recommendations),
            "processing_time_s": round(time.time() - start, 1),
        }

    outcomes = process_batch(videos, analyze, max_concurrency=config.batch_max_concurrency)

    rows = []
    for outcome in outcomes:
        row = {"video": outcome.item, "processed": outcome.ok}
        if outcome.ok:
            row.update(outcome.result)
            row["report"] = report_path(out_dir, outcome.item)
        else:
            row["error"] = outcome.error
        rows.append(row)
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Batch-analyze local video files")
    parser.add_argument("videos", nargs="+", help="Video files to analyze")
    parser.add_argument("--out", default="reports", help="Output directory for JSON reports")
    parser.add_argument("--frames", type=int, default=30, help="Frames to extract per video")
    parser.add_argument("--ptd", action="store_true", help="PTD Fitness optimized analysis")
    parser.add_argument("--concurrency", type=int, default=None, help="Videos analyzed at once")
    args = parser.parse_args(argv)

    load_env_file()
    config = Configuration.from_env()
    if not config.has_credentials:
        log.error("Set GEMINI_API_KEY (or GEMINI_USE_VERTEXAI with GCP_PROJECT_ID)")
        return 2
    if args.concurrency:
        config.batch_max_concurrency = max(1, args.concurrency)

    options = AnalysisOptions(extract_frames=args.frames, ptd_fitness_optimized=args.ptd)
    rows = run(args.videos, args.out, options, config)

    summary_path = os.path.join(args.out, "batch_summary.json")
    with open(summary_path, "w") as f:
        json.dump(rows, f, indent=2)

    failed = [r for r in rows if not r["processed"]]
    log.info("Done: %d/%d videos analyzed, summary in %s", len(rows) - len(failed), len(rows), summary_path)
    for r in failed:
        log.warning("  FAILED %s: %s", r["video"], r["error"])
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
