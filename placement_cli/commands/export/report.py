import os
from pathlib import Path
from typing import Optional

import click
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from placement_cli import config
from placement_cli.context import AppContext
from placement_cli.models import Report, ReportFilter
from placement_cli.utils.pdf_generator import ReportPDFGenerator

HEADERS = [
    "Opportunity ID",
    "Title",
    "Company",
    "Level",
    "Status",
    "Preferred Major",
    "Applications",
    "Filled Slots",
    "Remaining Slots",
    "Total Slots",
]


def report_values(report: Report):
    for row in report.rows:
        yield [
            row.opportunity_id,
            row.title,
            row.company_name,
            row.level.value,
            row.status.value,
            row.preferred_major or "",
            row.total_applications,
            row.filled_slots,
            row.remaining_slots,
            row.total_slots,
        ]


def export_report_xlsx(report: Report, output_dir: Path) -> str:
    """Write the report to a timestamped workbook and return its path."""
    os.makedirs(output_dir, exist_ok=True)

    timestamp = report.generated_at.strftime("%Y%m%d_%H%M%S")
    excel_path = os.path.join(output_dir, f"placement_report_{timestamp}.xlsx")

    wb = Workbook()
    ws = wb.active
    ws.title = "Opportunities"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(
        start_color="366092", end_color="366092", fill_type="solid"
    )

    for col, header in enumerate(HEADERS, 1):
        cell = ws.cell(row=1, column=col)
        cell.value = header
        cell.font = header_font
        cell.fill = header_fill

    for row, values in enumerate(report_values(report), 2):
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)

    for col in range(1, len(HEADERS) + 1):
        column_letter = get_column_letter(col)
        max_length = max(len(str(cell.value or "")) for cell in ws[column_letter])
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    summary = wb.create_sheet(title="Summary")
    summary.append(["Generated At", report.generated_at.strftime("%Y-%m-%d %H:%M:%S")])
    summary.append(["Opportunities", report.total_opportunities])
    summary.append(
        ["Applications", sum(r.total_applications for r in report.rows)]
    )
    summary.append(["Filled Slots", sum(r.filled_slots for r in report.rows)])
    summary.append(["Remaining Slots", sum(r.remaining_slots for r in report.rows)])
    for row in summary.iter_rows(min_col=1, max_col=1):
        row[0].font = Font(bold=True)
    summary.column_dimensions["A"].width = 18

    wb.save(excel_path)

    click.secho(f"Successfully exported report to: {excel_path}", fg="green")
    return excel_path


def generate_report(
    app: AppContext, report_filter: ReportFilter, export: Optional[str] = None
) -> Report:
    report = app.reports.generate(report_filter)

    if not report.rows:
        click.secho("No approved, visible opportunities match the filter.", fg="yellow")
    for values in report_values(report):
        click.echo(
            f"{values[0]} | {values[1]} | {values[2]} | {values[3]} | "
            f"applications={values[6]} filled={values[7]} "
            f"remaining={values[8]} slots={values[9]}"
        )

    click.echo(f"\nSummary:")
    click.echo(f"- Opportunities: {report.total_opportunities}")
    click.echo(f"- Applications: {sum(r.total_applications for r in report.rows)}")
    click.echo(f"- Remaining slots: {sum(r.remaining_slots for r in report.rows)}")

    output_dir = app.settings.export_dir if app.settings else Path(config.EXPORT_DIR)
    if export == "xlsx":
        export_report_xlsx(report, output_dir)
    elif export == "pdf":
        path = ReportPDFGenerator.generate_report_pdf(report, output_dir)
        click.secho(f"Successfully exported report to: {path}", fg="green")
    return report
