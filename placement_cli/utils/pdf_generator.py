import os
from pathlib import Path
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from placement_cli.models import Report
from placement_cli.utils.logging_config import get_logger

logger = get_logger(__name__)


class ReportPDFGenerator:
    """Render a placement report as a landscape A4 table."""

    BRAND_PRIMARY = colors.HexColor("#212121")
    BRAND_GRAY = colors.HexColor("#333333")
    HEADER_FILL = colors.HexColor("#366092")

    COLUMNS = [
        "ID",
        "Title",
        "Company",
        "Level",
        "Major",
        "Apps",
        "Filled",
        "Remaining",
        "Slots",
    ]

    @staticmethod
    def generate_report_pdf(report: Report, output_dir: Path) -> str:
        """Build the PDF and return its path.

        Args:
            report: The generated report
            output_dir: Directory the file is written to

        Returns:
            str: Path to the generated PDF file
        """
        os.makedirs(output_dir, exist_ok=True)
        timestamp = report.generated_at.strftime("%Y%m%d_%H%M%S")
        pdf_path = os.path.join(output_dir, f"placement_report_{timestamp}.pdf")

        styles = ReportPDFGenerator._create_styles()
        doc = SimpleDocTemplate(
            pdf_path,
            pagesize=landscape(A4),
            rightMargin=0.5 * inch,
            leftMargin=0.5 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title="Internship Placement Report",
        )

        elements: List[Any] = []
        elements.append(Paragraph("Internship Placement Report", styles["title"]))
        elements.append(
            Paragraph(
                f"Generated {report.generated_at.strftime('%d %B %Y %H:%M')} | "
                f"{report.total_opportunities} opportunit"
                f"{'y' if report.total_opportunities == 1 else 'ies'}",
                styles["small"],
            )
        )
        elements.append(
            HRFlowable(
                width="100%",
                thickness=2,
                color=ReportPDFGenerator.BRAND_PRIMARY,
                spaceBefore=8,
                spaceAfter=12,
            )
        )
        elements.append(ReportPDFGenerator._build_rows_table(report, styles))
        elements.append(Spacer(1, 0.3 * inch))

        doc.build(elements)
        logger.info(f"Generated report PDF: {pdf_path}")
        return pdf_path

    @staticmethod
    def _create_styles() -> Dict[str, ParagraphStyle]:
        return {
            "title": ParagraphStyle(
                "Title",
                fontSize=15,
                fontName="Helvetica-Bold",
                textColor=ReportPDFGenerator.BRAND_PRIMARY,
                leading=17,
                spaceAfter=6,
            ),
            "small": ParagraphStyle(
                "Small",
                fontSize=8,
                fontName="Helvetica",
                leading=10,
                textColor=ReportPDFGenerator.BRAND_GRAY,
            ),
            "cell": ParagraphStyle(
                "Cell",
                fontSize=8,
                fontName="Helvetica",
                leading=10,
            ),
        }

    @staticmethod
    def _build_rows_table(report: Report, styles: Dict[str, ParagraphStyle]) -> Table:
        data: List[List[Any]] = [ReportPDFGenerator.COLUMNS]
        for row in report.rows:
            data.append(
                [
                    row.opportunity_id,
                    Paragraph(escape(row.title), styles["cell"]),
                    Paragraph(escape(row.company_name), styles["cell"]),
                    row.level.value,
                    row.preferred_major or "-",
                    str(row.total_applications),
                    str(row.filled_slots),
                    str(row.remaining_slots),
                    str(row.total_slots),
                ]
            )
        if not report.rows:
            data.append(["No opportunities matched"] + [""] * 8)

        table = Table(
            data,
            colWidths=[
                0.7 * inch,
                2.6 * inch,
                1.9 * inch,
                1.1 * inch,
                1.3 * inch,
                0.6 * inch,
                0.6 * inch,
                0.8 * inch,
                0.6 * inch,
            ],
            repeatRows=1,
        )
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), ReportPDFGenerator.HEADER_FILL),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 8),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("ALIGN", (5, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return table
