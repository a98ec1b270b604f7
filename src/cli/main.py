"""
CLI entry point: barfeat export.

Loads config from --config (default config.yaml if present), environment and
flags; fetches the instrument and benchmark series, derives features and
writes one CSV. Progress and diagnostics go to stderr.
"""

import logging
import sys
from datetime import datetime, time, timezone

import click
from dotenv import load_dotenv

from config import ConfigError, load_config, with_overrides

load_dotenv()

logger = logging.getLogger("barfeat")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _utc_midnight(d):
    if d is None:
        return None
    return datetime.combine(d, time(0, 0), tzinfo=timezone.utc)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config file (default: config.yaml if present).")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """barfeat: daily bar features for an instrument joined with a benchmark index."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- barfeat export ----------


@cli.command()
@click.option("--symbol", default=None, help="Instrument symbol (env SYMBOL).")
@click.option("--benchmark", "benchmark_symbol", default=None, help="Benchmark symbol (env BENCHMARK_SYMBOL).")
@click.option("--start", "start_str", default=None, help="Inclusive start date, YYYY-MM-DD (env START).")
@click.option("--end", "end_str", default=None, help="Inclusive end date, YYYY-MM-DD (env END).")
@click.option("--out", "output", default=None, help="Output CSV path (env OUT).")
@click.option("--source", type=click.Choice(["yahoo", "alpaca", "file"]), default=None, help="Bar source override.")
@click.option("--debug", is_flag=True, default=False, help="Print diagnostics of intermediate state (env DEBUG=1).")
@click.pass_context
def export(
    ctx: click.Context,
    symbol: str | None,
    benchmark_symbol: str | None,
    start_str: str | None,
    end_str: str | None,
    output: str | None,
    source: str | None,
    debug: bool,
) -> None:
    """Fetch instrument + benchmark bars, derive features, write the CSV.

    Exits 1 when no instrument bars remain after date filtering.
    """
    try:
        cfg = load_config(ctx.obj["config_path"])
        cfg = with_overrides(
            cfg,
            symbol=symbol,
            benchmark_symbol=benchmark_symbol,
            start=start_str,
            end=end_str,
            output=output,
            source=source,
            debug=debug,
        )
    except (ConfigError, FileNotFoundError) as exc:
        raise click.UsageError(str(exc), ctx=ctx)

    if cfg.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    from cli.output import (
        format_benchmark_coverage,
        format_fetch_debug,
        format_raw_sample,
        format_summary,
    )
    from cli.structured_log import StructuredEventLogger
    from data import fetch_pair, filter_by_date, get_fetcher, sort_bars
    from export import write_rows
    from feature_core import derive_features, sort_rows

    events = StructuredEventLogger(cfg.symbol, enabled=cfg.logging.structured_events)
    events.run_start(
        benchmark=cfg.benchmark_symbol,
        source=cfg.data.source,
        start=cfg.start.isoformat() if cfg.start else None,
        end=cfg.end.isoformat() if cfg.end else None,
    )

    click.echo(f"Fetching {cfg.symbol} and {cfg.benchmark_symbol} data...", err=True)
    try:
        fetcher = get_fetcher(cfg.data)
        instrument, benchmark = fetch_pair(
            fetcher,
            cfg.symbol,
            cfg.benchmark_symbol,
            cfg.timeframe,
            start=_utc_midnight(cfg.start),
            end=_utc_midnight(cfg.end),
            limit=cfg.data.history_bars,
        )
    except Exception as exc:
        events.error(message="fetch failed", detail=repr(exc))
        raise

    if cfg.debug:
        click.echo(format_raw_sample(instrument), err=True)
        click.echo(format_raw_sample(benchmark), err=True)
        click.echo(format_fetch_debug(instrument, benchmark), err=True)

    bars = filter_by_date(sort_bars(instrument.bars), cfg.start, cfg.end)
    benchmark_bars = filter_by_date(sort_bars(benchmark.bars), cfg.start, cfg.end)
    events.fetch_complete(
        fetched={cfg.symbol: len(instrument.bars), cfg.benchmark_symbol: len(benchmark.bars)},
        filtered={cfg.symbol: len(bars), cfg.benchmark_symbol: len(benchmark_bars)},
    )

    if not bars:
        events.error(message="no candles after date filter")
        click.echo("No candles returned (check symbol/dates).", err=True)
        raise SystemExit(1)

    rows = sort_rows(derive_features(bars, benchmark_bars))
    path = write_rows(cfg.output, rows)

    click.echo(format_summary(rows, cfg.output), err=True)
    events.export_complete(
        path=str(path),
        rows=len(rows),
        first=rows[0].date,
        last=rows[-1].date,
        benchmark_rows=sum(1 for r in rows if r.has_benchmark()),
    )

    if cfg.debug:
        click.echo(format_benchmark_coverage(rows, benchmark_bars), err=True)


if __name__ == "__main__":
    cli()
