"""
CSV and PDF export of finance data.

Report sections are plain tables built from the aggregation outputs, so the
figures printed in a PDF are the same values the JSON endpoints return.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.config import settings
from agrofinance.core.logging import get_logger
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.services.aggregation import to_decimal
from agrofinance.services.income import IncomeService
from agrofinance.services.overview import OverviewService
from agrofinance.services.payouts import PayoutService
from agrofinance.services.ranges import DateRange
from agrofinance.services.transaction import TransactionService

logger = get_logger(__name__)

CSV_HEADER = ["Date", "Type", "Category", "Source", "Description", "Amount"]

BRAND_GREEN = colors.HexColor("#22c55e")
HEAD_DARK = colors.HexColor("#111827")
HEADER_BAND_HEIGHT = 30 * mm


class ReportKind(str, Enum):
    OVERVIEW = "overview"
    INCOME = "income"
    EXPENSES = "expenses"


REPORT_TITLES = {
    ReportKind.OVERVIEW: "Finance Overview",
    ReportKind.INCOME: "Income Report",
    ReportKind.EXPENSES: "Expenses Report",
}


@dataclass
class ReportSection:
    """One table of a PDF report."""

    head: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    highlight: bool = False


def format_money(amount: Any, currency: Optional[str] = None) -> str:
    return f"{currency or settings.currency} {to_decimal(amount):,.2f}"


def format_date(value: Optional[datetime]) -> str:
    return value.date().isoformat() if value else "—"


def csv_row(tx: FinanceTransaction) -> List[str]:
    amount = to_decimal(tx.amount)
    if TransactionType(tx.type) == TransactionType.EXPENSE:
        amount = -amount
    return [
        tx.date.date().isoformat(),
        TransactionType(tx.type).value,
        tx.category or "",
        tx.source or "",
        (tx.description or "").replace("\n", " "),
        str(amount),
    ]


def transactions_to_csv(transactions: Iterable[FinanceTransaction]) -> str:
    """Render transactions as CSV, newest first, every field quoted."""
    ordered = sorted(transactions, key=lambda tx: tx.date, reverse=True)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for tx in ordered:
        writer.writerow(csv_row(tx))
    return buffer.getvalue()[:-1]


def csv_filename(now: Optional[datetime] = None) -> str:
    return f"agrolink-finance-{(now or datetime.now()).date().isoformat()}.csv"


def pdf_filename(kind: ReportKind, now: Optional[datetime] = None) -> str:
    return f"AgroLink-Finance-{kind.value.capitalize()}-{(now or datetime.now()).date().isoformat()}.pdf"


def overview_sections(overview: Dict[str, Any]) -> List[ReportSection]:
    income = overview["income_by_source"]
    expenses = overview["expenses_by_category"]
    return [
        ReportSection(
            head=["Metric", "Amount"],
            rows=[
                ["Net Profit", format_money(overview["net_profit"])],
                ["Total Income", format_money(overview["total_income"])],
                ["Total Expenses", format_money(overview["total_expenses"])],
            ],
            highlight=True,
        ),
        ReportSection(
            head=["Income by Source", "Amount"],
            rows=[
                ["Inventory Sales Income", format_money(income["inventory_sales"])],
                ["Equipment Rental Income", format_money(income["equipment_rental"])],
                ["Platform Listing Fees", format_money(income["platform_listing_fees"])],
                ["Logistics & Delivery Income", format_money(income["delivery_income"])],
            ],
        ),
        ReportSection(
            head=["Expenses by Category", "Amount"],
            rows=[
                ["Driver Payments", format_money(expenses["driver_payments"])],
                ["Farmer Payments", format_money(expenses["farmer_payments"])],
            ],
        ),
    ]


def income_sections(order_income: Dict[str, Any], delivery_income: Dict[str, Any]) -> List[ReportSection]:
    totals = order_income["totals_by_type"]
    listings = totals["listing_commission"] + totals["listing_pass_through"]
    summary = ReportSection(
        head=["Metric", "Amount"],
        rows=[
            ["Orders Income - Inventory", format_money(totals["inventory"])],
            ["Orders Income - Rentals", format_money(totals["rental"])],
            ["Orders Income - Listings", format_money(listings)],
            ["Delivery Fees", format_money(delivery_income["total"])],
        ],
        highlight=True,
    )

    order_lines = sorted(order_income["items"], key=_created_at, reverse=True)
    orders = ReportSection(
        head=["Order", "Created", "Type", "Item", "Qty", "Unit", "Line Total"],
        rows=[
            [
                row["order_number"] or row["order_id"],
                format_date(row["created_at"]),
                str(getattr(row["item_type"], "value", row["item_type"])).upper(),
                row["title"],
                row["quantity"],
                format_money(row["unit_price"]),
                format_money(row["line_total"]),
            ]
            for row in order_lines
        ],
    )

    fee_lines = sorted(delivery_income["items"], key=_created_at, reverse=True)
    fees = ReportSection(
        head=["Order", "Created", "Delivery Fee"],
        rows=[
            [row["order_number"] or row["order_id"], format_date(row["created_at"]), format_money(row["delivery_fee"])]
            for row in fee_lines
        ],
    )
    return [summary, orders, fees]


def expenses_sections(driver_payouts: Dict[str, Any], farmer_payouts: Dict[str, Any]) -> List[ReportSection]:
    categories = ReportSection(
        head=["Category", "Amount"],
        rows=[
            ["Driver Payments", format_money(driver_payouts["total"])],
            ["Farmer Payments", format_money(farmer_payouts["total"])],
        ],
        highlight=True,
    )
    drivers = sorted(driver_payouts["totals_by_driver"], key=lambda d: d["deliveries"], reverse=True)
    per_driver = ReportSection(
        head=["Driver", "Deliveries", "Payout"],
        rows=[[d["driver_name"], d["deliveries"], format_money(d["total_payout"])] for d in drivers],
    )
    return [categories, per_driver]


def _created_at(row: Dict[str, Any]) -> datetime:
    return row["created_at"] or datetime.min


def _section_table(section: ReportSection) -> Table:
    data: List[Sequence[Any]] = [section.head] + [[str(cell) for cell in row] for row in section.rows]
    table = Table(data, repeatRows=1, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_GREEN if section.highlight else HEAD_DARK),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#d1d5db")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f9fafb")]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    return table


def _draw_page(canvas, doc) -> None:
    width, height = A4
    canvas.saveState()

    canvas.setFillColor(BRAND_GREEN)
    canvas.rect(0, height - HEADER_BAND_HEIGHT, width, HEADER_BAND_HEIGHT, stroke=0, fill=1)
    canvas.setFillColor(colors.white)
    canvas.setFont("Helvetica-Bold", 18)
    canvas.drawString(15 * mm, height - 14 * mm, settings.report_brand_name)
    canvas.setFont("Helvetica", 9)
    canvas.drawString(15 * mm, height - 21 * mm, settings.report_tagline)

    contact = [settings.report_address, settings.report_phone, settings.report_website]
    y = height - 10 * mm
    for line in contact:
        if line:
            canvas.drawRightString(width - 15 * mm, y, line)
            y -= 5 * mm

    canvas.setFillColor(colors.grey)
    canvas.setFont("Helvetica", 8)
    canvas.drawString(15 * mm, 10 * mm, settings.report_brand_name)
    canvas.drawRightString(width - 15 * mm, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def render_pdf(title: str, sections: List[ReportSection], generated_at: Optional[datetime] = None) -> bytes:
    """Lay out ``sections`` as an A4 document and return the PDF bytes."""
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        author=settings.report_brand_name,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=HEADER_BAND_HEIGHT + 10 * mm,
        bottomMargin=20 * mm,
    )
    styles = getSampleStyleSheet()
    story: List[Any] = [
        Paragraph(escape(title), styles["Title"]),
        Paragraph(f"Generated on {generated_at:%Y-%m-%d %H:%M}", styles["Normal"]),
        Spacer(1, 6 * mm),
    ]
    for section in sections:
        story.append(_section_table(section))
        story.append(Spacer(1, 8 * mm))

    doc.build(story, onFirstPage=_draw_page, onLaterPages=_draw_page)
    return buffer.getvalue()


class ReportService:
    """Builds export documents from the same services the JSON endpoints use."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def transactions_csv(self, date_range: DateRange) -> str:
        transactions = await TransactionService(self.db).list_transactions(date_range=date_range)
        logger.info("csv_export", rows=len(transactions))
        return transactions_to_csv(transactions)

    async def sections_for(
        self,
        kind: ReportKind,
        date_range: DateRange,
        now: Optional[datetime] = None,
    ) -> List[ReportSection]:
        if kind == ReportKind.OVERVIEW:
            overview = await OverviewService(self.db).get_overview(date_range, now)
            return overview_sections(overview)
        if kind == ReportKind.INCOME:
            income = IncomeService(self.db)
            return income_sections(
                await income.get_order_income(date_range),
                await income.get_delivery_fee_income(date_range),
            )
        payouts = PayoutService(self.db)
        return expenses_sections(
            await payouts.get_driver_payouts(date_range),
            await payouts.get_farmer_payouts(date_range),
        )

    async def render(
        self,
        kind: ReportKind,
        date_range: DateRange,
        now: Optional[datetime] = None,
    ) -> bytes:
        now = now or datetime.now()
        sections = await self.sections_for(kind, date_range, now)
        content = render_pdf(REPORT_TITLES[kind], sections, now)
        logger.info("pdf_export", kind=kind.value, sections=len(sections), size=len(content))
        return content
