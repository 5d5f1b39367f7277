# touristlog/services/visitor_export.py
import re
from datetime import datetime
from io import BytesIO

import openpyxl
from flask import has_request_context, render_template, request
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from touristlog.services.statistics import distinct_days
from touristlog.utils.pdf_render import html_to_pdf_bytes

HEADERS = ["Control Number", "Full Name", "Contact Info", "Purpose", "Date", "Time"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_row(visitor) -> list[str]:
    ts = visitor.created_at
    return [
        visitor.control_number,
        visitor.name,
        visitor.contact,
        visitor.purpose_label.upper(),
        ts.strftime("%Y-%m-%d") if ts else "",
        ts.strftime("%H:%M:%S") if ts else "",
    ]


def report_context(visitors: list, now: datetime | None = None) -> dict:
    now = now or datetime.now()
    today = now.date()
    return {
        "visitors": visitors,
        "rows": [export_row(v) for v in visitors],
        "headers": HEADERS,
        "generated_at": now,
        "total": len(visitors),
        "today_count": sum(1 for v in visitors if v.created_at and v.created_at.date() == today),
        "days_count": distinct_days(visitors),
    }


def render_report_html(visitors: list, now: datetime | None = None) -> str:
    return render_template("admin/report_pdf.html", **report_context(visitors, now))


def visitors_pdf(visitors: list, now: datetime | None = None) -> bytes:
    html = render_report_html(visitors, now)
    return html_to_pdf_bytes(html, base_url=request.host_url if has_request_context() else None)


def visitors_xlsx(visitors: list) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Visitors"

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill("solid", fgColor="16A34A")

    for v in visitors:
        ws.append(export_row(v))

    # fit column widths to content
    for i, col in enumerate(ws.columns, 1):
        longest = max((len(str(c.value)) for c in col if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(i)].width = longest + 2

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_filename(stem: str, ext: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_]+", "-", stem).strip("-")
    return f"{safe or 'visitor-log'}.{ext}"
