"""Generate markdown reports of parse runs and consumption statistics."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from config import Config
from models.batch_result import BatchResult
from models.statistics import ExtendedStatistics


class SummaryGenerator:
    """Generate markdown summary reports for invoice analysis runs."""

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize summary generator.

        Args:
            output_dir: Directory to save summary file (defaults to Config.OUTPUT_DIR)
        """
        self.output_dir = Path(output_dir or Config.OUTPUT_DIR)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_summary(
        self,
        batch_result: BatchResult,
        statistics: ExtendedStatistics,
        filter_summary: Optional[list[str]] = None,
        output_file: Optional[Path] = None,
    ) -> Path:
        """
        Generate a markdown report.

        Args:
            batch_result: Outcome of processing the input files
            statistics: Statistics over the (filtered) invoices
            filter_summary: Active filter descriptions, if any
            output_file: Optional custom output path

        Returns:
            Path to generated summary file
        """
        if output_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_file = self.output_dir / f"INVOICE_SUMMARY_{timestamp}.md"

        content = self.render(batch_result, statistics, filter_summary or [])

        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)

        return output_file

    def _generate_recommendations(
        self, batch_result: BatchResult, statistics: ExtendedStatistics
    ) -> list[str]:
        """Flag conditions worth a second look."""
        recommendations = []
        batch_stats = batch_result.statistics

        if batch_stats and batch_stats.failed > 0:
            recommendations.append(
                f"⚠️ {batch_stats.failed} file(s) failed to parse. "
                "Check the errors below and confirm the files are e-invoice CSV exports."
            )

        if batch_stats and batch_stats.total_errors > 0:
            recommendations.append(
                f"⚠️ {batch_stats.total_errors} rows or invoices were rejected."
            )

        empty_invoices = statistics.total_invoices > 0 and not statistics.category_breakdown
        if empty_invoices:
            recommendations.append(
                "⚠️ No item (D) lines were found. Category statistics are unavailable."
            )

        other = next((c for c in statistics.category_breakdown if c.category == "其他"), None)
        if other and other.percentage > 50:
            recommendations.append(
                f"💡 {other.percentage:.1f}% of spending is uncategorized."
            )

        if statistics.voided_invoices_stats.voided_percentage > 10:
            recommendations.append(
                f"💡 {statistics.voided_invoices_stats.voided_percentage:.1f}% "
                "of invoices are voided."
            )

        if not recommendations:
            recommendations.append("✅ Processing completed without major issues.")

        return recommendations

    def render(
        self,
        batch_result: BatchResult,
        statistics: ExtendedStatistics,
        filter_summary: list[str],
    ) -> str:
        """Build the markdown report text."""
        md = []
        batch_stats = batch_result.statistics

        md.append("# Invoice Analysis Report")
        md.append("")
        md.append(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        md.append("")
        md.append("---")
        md.append("")

        md.append("## 📊 Files")
        md.append("")
        if batch_stats:
            md.append(f"- **Files Processed:** {batch_stats.total_files}")
            md.append(
                f"- **Successful:** {batch_stats.successful} ({batch_stats.success_rate:.1f}%)"
            )
            md.append(f"- **Failed:** {batch_stats.failed}")
            md.append(f"- **Invoices Parsed:** {batch_stats.total_invoices}")
            md.append(f"- **Rejected Rows/Invoices:** {batch_stats.total_errors}")
        md.append("")

        errors = [
            f"{result.file_info.file_name}: {error}"
            for result in batch_result.results
            for error in result.errors
        ]
        if errors:
            md.append("**Top Errors:**")
            for error in errors[:10]:
                md.append(f"- {error}")
            md.append("")

        if filter_summary:
            md.append("## 🔍 Filters")
            md.append("")
            for line in filter_summary:
                md.append(f"- {line}")
            md.append("")

        md.append("## 💰 Consumption")
        md.append("")
        md.append(f"- **Invoices:** {statistics.total_invoices}")
        md.append(f"- **Total Amount:** ${statistics.total_amount:,.2f}")
        md.append(f"- **Average Amount:** ${statistics.average_amount:,.2f}")
        if statistics.date_range:
            md.append(
                f"- **Date Range:** {statistics.date_range.start.isoformat()} to "
                f"{statistics.date_range.end.isoformat()}"
            )
        voided = statistics.voided_invoices_stats
        md.append(
            f"- **Voided:** {voided.total_voided_invoices} "
            f"(${voided.total_voided_amount:,.2f}, {voided.voided_percentage:.1f}%)"
        )
        md.append("")

        md.append("## 🏷️ Categories")
        md.append("")
        md.append("| Category | Items | Amount | Share |")
        md.append("|----------|-------|--------|-------|")
        for stat in statistics.category_breakdown:
            md.append(
                f"| {stat.category} | {stat.count} | ${stat.amount:,.2f} | {stat.percentage:.1f}% |"
            )
        md.append("")

        md.append("## 📈 Monthly Trend")
        md.append("")
        md.append("| Month | Invoices | Amount | Average |")
        md.append("|-------|----------|--------|---------|")
        for month in statistics.monthly_data:
            md.append(
                f"| {month.year}-{month.month:02d} | {month.invoice_count} | "
                f"${month.total_amount:,.2f} | ${month.average_amount:,.2f} |"
            )
        md.append("")

        md.append("## 🏪 Top Merchants")
        md.append("")
        md.append("| Merchant | Invoices | Amount | Share |")
        md.append("|----------|----------|--------|-------|")
        for merchant in statistics.top_merchants:
            md.append(
                f"| {merchant.merchant_name} | {merchant.invoice_count} | "
                f"${merchant.total_amount:,.2f} | {merchant.percentage:.1f}% |"
            )
        md.append("")

        md.append("## 🛒 Frequent Items")
        md.append("")
        md.append("| Item | Category | Times | Average Price |")
        md.append("|------|----------|-------|---------------|")
        for item in statistics.item_frequency[:10]:
            md.append(
                f"| {item.item_name} | {item.category} | {item.frequency} | "
                f"${item.average_price:,.2f} |"
            )
        md.append("")

        md.append("## 💡 Recommendations")
        md.append("")
        for rec in self._generate_recommendations(batch_result, statistics):
            md.append(f"- {rec}")
        md.append("")

        md.append("---")
        md.append("")
        md.append("*Generated by einvoice-analytics*")

        return "\n".join(md)
