"""Command-line interface for the segmentation toolkit.

Provides subcommands: `generate`, `summarize`, and `aggregate`. Each command
is implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from segment_profit.config import ScoringMode, Settings, get_settings, parse_scoring_mode
from segment_profit.logging_config import configure_logging
from segment_profit.dataset import Dataset, SOURCE_UPLOAD
from segment_profit.errors import ParseError

# INGEST
from segment_profit.ingest.generate import generate_frame
from segment_profit.ingest.parse_upload import parse_upload

# INSIGHTS
from segment_profit.aggregate.build_insights import aggregate_by, summarize
from segment_profit.aggregate.narrative import build_insight_text

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _settings_for(args: argparse.Namespace) -> Settings:
    """Return environment settings with any `--mode` override applied."""
    s = get_settings()
    mode = getattr(args, "mode", None)
    if mode:
        s = replace(s, profitability=replace(s.profitability, mode=parse_scoring_mode(mode)))
    return s


def _load_dataset(args: argparse.Namespace) -> Dataset:
    s = _settings_for(args)
    path = Path(args.csv)
    raw = parse_upload(path, path.name)
    return Dataset.from_records(
        raw,
        s.profitability,
        source=SOURCE_UPLOAD,
        name=path.name,
        npartitions=s.enrich_partitions,
    )


# --------------------------------------------------
# GENERATE
# --------------------------------------------------
def cmd_generate(args: argparse.Namespace) -> None:
    """Write a synthetic dataset to CSV.

    Args:
        args: argparse namespace with `n`, `seed`, `out`.
    """
    s = get_settings()
    n = args.n if args.n is not None else s.dataset_size
    seed = args.seed if args.seed is not None else s.seed

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    generate_frame(n, seed).to_csv(out, index=False)

    log.info("Wrote %d synthetic records to %s", n, out)


# --------------------------------------------------
# SUMMARIZE
# --------------------------------------------------
def cmd_summarize(args: argparse.Namespace) -> None:
    """Print the insight narrative for a CSV file."""
    dataset = _load_dataset(args)
    summary = summarize(dataset.records)

    if summary.is_empty:
        log.warning("No records found in %s", args.csv)
        return

    log.info(
        "Summarized %d records (scored=%d, mode=%s)",
        summary.record_count,
        summary.scored_count,
        ScoringMode(dataset.config.mode).value,
    )
    print(build_insight_text(summary), end="")


# --------------------------------------------------
# AGGREGATE
# --------------------------------------------------
def cmd_aggregate(args: argparse.Namespace) -> None:
    """Print average profitability per value of `--key`."""
    dataset = _load_dataset(args)
    insights = aggregate_by(dataset.records, args.key)

    if not insights:
        log.warning("No groups found for key %r", args.key)
        return

    for g in insights:
        avg = "n/a" if g.average_profitability is None else f"{g.average_profitability:.2f}%"
        print(f"{g.key}\t{avg}\t{g.count}")


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    modes = [m.value for m in ScoringMode]

    p = argparse.ArgumentParser(prog="segment-profit")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate")
    p_gen.add_argument("--n", type=int, default=None)
    p_gen.add_argument("--seed", type=int, default=None)
    p_gen.add_argument("--out", default="data/records.csv")

    p_sum = sub.add_parser("summarize")
    p_sum.add_argument("csv")
    p_sum.add_argument("--mode", choices=modes, default=None)

    p_agg = sub.add_parser("aggregate")
    p_agg.add_argument("csv")
    p_agg.add_argument("--key", default="industry")
    p_agg.add_argument("--mode", choices=modes, default=None)

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(get_settings().log_path)

    args = build_parser().parse_args(argv)

    try:
        if args.cmd == "generate":
            cmd_generate(args)
        elif args.cmd == "summarize":
            cmd_summarize(args)
        elif args.cmd == "aggregate":
            cmd_aggregate(args)
        else:
            raise SystemExit(2)
    except ParseError as exc:
        log.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
