#!/usr/bin/env python3
import argparse

from slideshow.orchestrator import run_once


def main():
    parser = argparse.ArgumentParser(description="Picture frame slideshow curation CLI")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--manifest", dest="manifest", type=str, help="Asset manifest JSON (overrides source.manifest)")
    parser.add_argument("--store", dest="store_path", type=str, help="Seen-time JSON file (overrides store.path)")
    parser.add_argument("--output-dir", dest="output_dir", type=str, help="Output directory")
    parser.add_argument("--seed", dest="seed", type=int, help="Random seed for reproducible ordering")
    parser.add_argument("--pair-window", dest="pair_window_minutes", type=float, help="Portrait pairing window in minutes")
    parser.add_argument("--recency-bias", dest="recency_bias", type=float, help="Weight for least-recently-shown groups")
    parser.add_argument("--season-bias", dest="season_bias", type=float, help="Weight for same-month-earlier-year groups")
    parser.add_argument("--jitter", dest="jitter", type=float, help="Per-comparison random factor amplitude")
    parser.add_argument("--dedup-tolerance", dest="dedup_tolerance_seconds", type=float, help="Collapse captures within N seconds (0 = exact)")
    parser.add_argument("--timezone", dest="timezone", type=str, help="IANA zone for same-day and season rules")
    parser.add_argument("--simulate", dest="simulate_slides", type=int, help="Record N slide displays into the store after ordering")
    args = parser.parse_args()

    overrides = {
        "manifest": args.manifest,
        "store_path": args.store_path,
        "output_dir": args.output_dir,
        "seed": args.seed,
        "pair_window_minutes": args.pair_window_minutes,
        "recency_bias": args.recency_bias,
        "season_bias": args.season_bias,
        "jitter": args.jitter,
        "dedup_tolerance_seconds": args.dedup_tolerance_seconds,
        "timezone": args.timezone,
        "simulate_slides": args.simulate_slides,
    }

    files = run_once(args.config, overrides=overrides)
    for path in files:
        print(path)


if __name__ == "__main__":
    main()
