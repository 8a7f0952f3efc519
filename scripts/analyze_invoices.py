"""Parse e-invoice CSV exports, print consumption statistics and optionally export."""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dateutil.parser import ParserError, parse  # noqa: E402

from analytics import (  # noqa: E402
    FilterCriteria,
    apply_filters,
    calculate_extended_statistics,
    get_filter_summary,
    has_active_filters,
    validate_filters,
)
from config import Config  # noqa: E402
from exporters import (  # noqa: E402
    DEFAULT_EXPORT_FIELDS,
    CSVExporter,
    SummaryGenerator,
    validate_export_fields,
)
from processors.batch_processor import BatchProcessor  # noqa: E402
from utils.logging_config import setup_logging  # noqa: E402
from utils.progress import TqdmProgress  # noqa: E402


def parse_date_arg(value: str) -> date:
    """argparse type for free-form dates such as 2024-01-31 or 2024/1/31."""
    try:
        return parse(value).date()
    except (ParserError, OverflowError) as e:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}") from e


def parse_fields_arg(value: str) -> list[str]:
    return [key.strip() for key in value.split(",") if key.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyze Taiwan e-invoice CSV exports (M/D line format)"
    )
    parser.add_argument("files", nargs="+", type=Path, help="Invoice CSV files")
    parser.add_argument("--start", type=parse_date_arg, help="First invoice date to include")
    parser.add_argument("--end", type=parse_date_arg, help="Last invoice date to include")
    parser.add_argument("--merchant", default="", help="Merchant name substring")
    parser.add_argument("--min", dest="min_amount", type=float, help="Minimum invoice total")
    parser.add_argument("--max", dest="max_amount", type=float, help="Maximum invoice total")
    parser.add_argument("--category", help="Only invoices with an item in this category")
    parser.add_argument("--export", type=Path, help="Directory for CSV and markdown exports")
    parser.add_argument(
        "--fields",
        type=parse_fields_arg,
        default=list(DEFAULT_EXPORT_FIELDS),
        help=f"Comma-separated export fields (default: {','.join(DEFAULT_EXPORT_FIELDS)})",
    )
    parser.add_argument(
        "--include-items", action="store_true", help="Export one row per item"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first bad row or failed file (skip_errors=False)",
    )
    parser.add_argument("--max-errors", type=int, help="Errors recorded in detail per file")
    parser.add_argument("--env", help="Environment name from environments.json")
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    return parser


def load_environment(env_name):
    """Load environments.json when requested or present."""
    if env_name is None and not Path("environments.json").exists():
        Config.load_from_env()
        return None
    try:
        return Config.load_environment(env_name)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error loading environment: {e}")
        print("Please check your environments.json configuration")
        sys.exit(1)


def print_statistics(statistics, filter_lines):
    print()
    print("=" * 80)
    print("CONSUMPTION STATISTICS")
    print("=" * 80)
    print()

    if filter_lines:
        print("Filters:")
        for line in filter_lines:
            print(f"  {line}")
        print()

    print(f"Invoices:        {statistics.total_invoices}")
    print(f"Total Amount:    ${statistics.total_amount:,.2f}")
    print(f"Average Amount:  ${statistics.average_amount:,.2f}")
    if statistics.date_range:
        print(
            f"Date Range:      {statistics.date_range.start} to {statistics.date_range.end}"
        )
    voided = statistics.voided_invoices_stats
    if voided.total_voided_invoices:
        print(
            f"Voided:          {voided.total_voided_invoices} "
            f"(${voided.total_voided_amount:,.2f})"
        )
    print()

    if statistics.category_breakdown:
        print("Categories:")
        for stat in statistics.category_breakdown:
            print(
                f"  {stat.category:12s} {stat.count:6d} items  "
                f"${stat.amount:>12,.2f}  {stat.percentage:5.1f}%"
            )
        print()

    if statistics.top_merchants:
        print("Top Merchants:")
        for merchant in statistics.top_merchants[:5]:
            print(
                f"  {merchant.merchant_name[:30]:30s} {merchant.invoice_count:5d}  "
                f"${merchant.total_amount:>12,.2f}"
            )
        print()


async def run(args) -> int:
    if args.export:
        fields_ok, field_errors = validate_export_fields(args.fields)
        if not fields_ok:
            for error in field_errors:
                print(f"❌ {error}")
            return 2

    skip_errors = False if args.strict else None
    processor = BatchProcessor()

    with TqdmProgress("Parsing invoices", disable=args.no_progress) as progress:
        batch_result = await processor.process_files(
            args.files,
            on_progress=progress,
            skip_errors=skip_errors,
            max_errors=args.max_errors,
            show_progress=False,
        )

    processor.print_summary(batch_result)

    invoices = processor.store.invoices
    if not invoices:
        print("⚠️  No invoices parsed!")
        return 1

    filters = FilterCriteria(
        start_date=args.start,
        end_date=args.end,
        merchant_name=args.merchant,
        min_amount=args.min_amount,
        max_amount=args.max_amount,
        category=args.category,
    )
    is_valid, errors = validate_filters(filters)
    if not is_valid:
        for error in errors:
            print(f"❌ {error}")
        return 2

    if has_active_filters(filters):
        invoices = apply_filters(invoices, filters)
    statistics = calculate_extended_statistics(invoices)
    filter_lines = get_filter_summary(filters)

    print_statistics(statistics, filter_lines)

    if args.export:
        print("=" * 80)
        print("EXPORTING")
        print("=" * 80)
        print()

        exporter = CSVExporter(output_dir=args.export)
        invoice_file = exporter.export(
            invoices, selected_fields=args.fields, include_items=args.include_items
        )
        print(f"  ✅ invoices     : {invoice_file}")

        summary_file = exporter.export_summary(statistics)
        print(f"  ✅ summary      : {summary_file}")

        report_file = SummaryGenerator(args.export).generate_summary(
            batch_result, statistics, filter_lines
        )
        print(f"  ✅ report       : {report_file}")

        result_file = processor.save_batch_result(batch_result, args.export)
        print(f"  ✅ batch result : {result_file}")
        print()

    return 0 if batch_result.statistics.failed == 0 else 1


def main():
    args = build_parser().parse_args()

    load_environment(args.env)
    setup_logging(log_file=Config.LOG_FILE, log_level=Config.LOG_LEVEL, console_level="WARNING")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
