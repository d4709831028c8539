"""
Statement Conversion Script

Converts MetaTrader-style HTML statements into CSV or JSON trade records.

Usage:
    python convert_statement.py Statement.htm
    python convert_statement.py Statement.htm ReportHistory.html --format json
    python convert_statement.py Statement.htm --output-dir data/output

Output files are written as {output_dir}/{statement stem}.{csv|json}.
Exit status is 1 when any statement fails to import.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from mt_statement.config import get_app_config
from mt_statement.services import StatementImportService


def write_history(history, path: Path, fmt: str) -> None:
    if fmt == 'csv':
        history.to_dataframe().to_csv(path, index=False)
    else:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(history.to_dict(by_alias=True), f, ensure_ascii=False, indent=2)


def main() -> int:
    load_dotenv()
    config = get_app_config()

    parser = argparse.ArgumentParser(description="Convert HTML broker statements to trade records")
    parser.add_argument("statements", nargs="+", help="Statement HTML files")
    parser.add_argument("--format", choices=["csv", "json"], default="csv", help="Output format")
    parser.add_argument("--output-dir", default=config.output_dir, help="Directory for output files")
    args = parser.parse_args()

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    service = StatementImportService(config=config)
    failed = 0

    print("=" * 80)
    print(f"STATEMENT CONVERSION: {len(args.statements)} file(s) -> {args.format.upper()}")
    print("=" * 80)

    for statement in args.statements:
        path = Path(statement)
        try:
            result, history = service.import_file(path)
        except FileNotFoundError as e:
            print(f"  ✗ {path.name}: {e}")
            failed += 1
            continue

        if not result.succeeded:
            print(f"  ✗ {path.name}: [{result.error_code}] {result.error_message}")
            failed += 1
            continue

        out_path = output_dir / f"{path.stem}.{args.format}"
        write_history(history, out_path, args.format)

        summary = history.summary()
        print(f"  ✓ {path.name}: {result.records_count} trades -> {out_path}")
        print(f"      Net profit: {summary.net_profit:,.2f}  "
              f"Profit factor: {summary.profit_factor:.2f}  "
              f"Max drawdown: {summary.maximal_drawdown:,.2f}")

    print()
    print(f"Converted {len(args.statements) - failed}, failed {failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
