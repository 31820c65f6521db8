"""Cron entry point for evicting idle slide assets."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime

from src.handout.config import load_config
from src.handout.media.asset_store import AssetStore, utc_now
from src.handout.media.media_cleanup import EvictionSweeper


@dataclass(slots=True)
class SweepSummary:
    assets_removed: int
    bytes_freed: int
    dry_run: bool


def perform_cleanup(*, dry_run: bool, reference_time: datetime | None = None) -> SweepSummary:
    """Execute eviction logic and return summary counters."""
    config = load_config()
    store = AssetStore(root=config.storage_root)
    sweeper = EvictionSweeper(store=store, idle_threshold=config.idle_threshold)

    now = reference_time or utc_now()

    if dry_run:
        expired = sweeper.expired(now)
        return SweepSummary(
            assets_removed=len(expired),
            bytes_freed=sum(asset.size_bytes for asset in expired),
            dry_run=True,
        )

    report = sweeper.sweep(now)
    return SweepSummary(
        assets_removed=len(report.deleted), bytes_freed=report.bytes_freed, dry_run=False
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evict slide assets idle past the threshold.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        summary = perform_cleanup(dry_run=args.dry_run)
    except Exception as exc:
        print(f"sweep failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(
            f"sweep dry-run, assets_expired={summary.assets_removed}, bytes={summary.bytes_freed}",
            file=sys.stdout,
        )
    else:
        print(
            f"sweep done, assets_removed={summary.assets_removed}, bytes_freed={summary.bytes_freed}",
            file=sys.stdout,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
