"""Load sentiment signal and model performance CSV exports into the database.

Usage:
    python -m sentiment_api.scripts.load_signals signals --source twitter tweets.csv
    python -m sentiment_api.scripts.load_signals performance performance.csv

Signal CSVs need columns symbol, date, sentiment, entry_price and may carry
sentiment_score and analyzed_count. Performance CSVs need symbol, date,
sentiment, entry_price, pl_30d, pl_60d (empty P/L cells mean "not yet known").
"""

import argparse
import sys
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from sentiment_api.core.config import load_settings
from sentiment_api.domain.entities.performance import PerformanceRecord
from sentiment_api.domain.entities.sentiment import SentimentObservation, SignalSource
from sentiment_api.domain.exceptions import DataValidationError, SentimentAPIError
from sentiment_api.storage import Database, PerformanceRepository, SignalRepository

console = Console()

SIGNAL_COLUMNS = ["symbol", "date", "sentiment", "entry_price"]
PERFORMANCE_COLUMNS = ["symbol", "date", "sentiment", "entry_price", "pl_30d", "pl_60d"]


def _optional(value):
    """NaN/empty cell -> None."""
    return None if pd.isna(value) else value


def read_csv(path: Path, required: list[str]) -> pd.DataFrame:
    """Read a CSV and check required columns; dates parsed to datetime.date.

    Raises:
        DataValidationError: missing file, missing columns or bad dates
    """
    if not path.exists():
        raise DataValidationError(f"File not found: {path}", field="path", value=str(path))

    df = pd.read_csv(path)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataValidationError(
            f"{path.name} is missing columns: {', '.join(missing)}",
            field="columns",
            value=missing,
        )

    try:
        df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d").dt.date
    except ValueError as e:
        raise DataValidationError(f"Bad date in {path.name}: {e}", field="date") from None
    df["symbol"] = df["symbol"].astype(str).str.strip().str.upper()
    return df


def parse_signals(df: pd.DataFrame, source: SignalSource) -> list[SentimentObservation]:
    observations = []
    for row in df.to_dict(orient="records"):
        score = _optional(row.get("sentiment_score"))
        count = _optional(row.get("analyzed_count"))
        observations.append(
            SentimentObservation(
                symbol=row["symbol"],
                source=source,
                date=row["date"],
                sentiment=str(row["sentiment"]).strip(),
                entry_price=float(row["entry_price"]),
                sentiment_score=float(score) if score is not None else None,
                analyzed_count=int(count) if count is not None else None,
            )
        )
    return observations


def parse_performance(df: pd.DataFrame) -> list[PerformanceRecord]:
    records = []
    for row in df.to_dict(orient="records"):
        pl_30d = _optional(row["pl_30d"])
        pl_60d = _optional(row["pl_60d"])
        records.append(
            PerformanceRecord(
                symbol=row["symbol"],
                date=row["date"],
                sentiment=str(row["sentiment"]).strip(),
                entry_price=float(row["entry_price"]),
                pl_30d=float(pl_30d) if pl_30d is not None else None,
                pl_60d=float(pl_60d) if pl_60d is not None else None,
            )
        )
    return records


def print_summary(title: str, path: Path, rows: int, symbols: int, db_path: Path) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("File", str(path))
    table.add_row("Rows Loaded", f"{rows:,}")
    table.add_row("Unique Symbols", str(symbols))
    table.add_row("Database", str(db_path))
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Load sentiment signal and model performance CSVs into SQLite"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path (default: SENTIMENT_DB_PATH or data/sentiment.db)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    signals_parser = subparsers.add_parser("signals", help="Load per-source sentiment signals")
    signals_parser.add_argument(
        "--source",
        required=True,
        choices=[s.value for s in SignalSource],
        help="Signal source the file belongs to",
    )
    signals_parser.add_argument("csv", type=Path, help="CSV file to load")

    performance_parser = subparsers.add_parser("performance", help="Load model performance rows")
    performance_parser.add_argument("csv", type=Path, help="CSV file to load")

    args = parser.parse_args(argv)

    try:
        db_path = args.db or load_settings().db_path
        with Database(db_path) as db:
            if args.command == "signals":
                source = SignalSource(args.source)
                df = read_csv(args.csv, SIGNAL_COLUMNS)
                rows = SignalRepository(db).add_many(parse_signals(df, source))
                title = f"{source.value.title()} Signals Loaded"
            else:
                df = read_csv(args.csv, PERFORMANCE_COLUMNS)
                rows = PerformanceRepository(db).add_many(parse_performance(df))
                title = "Model Performance Loaded"
    except (SentimentAPIError, ValueError) as e:
        console.print(f"[bold red]❌ {e}[/]")
        return 1

    print_summary(title, args.csv, rows, df["symbol"].nunique(), db_path)
    console.print("[bold green]✅ Done[/]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
