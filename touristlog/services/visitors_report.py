# touristlog/services/visitors_report.py
from collections import Counter
from datetime import date, datetime

from flask import current_app

from touristlog.mailer import send_mail
from touristlog.services.statistics import compute_statistics
from touristlog.services.visitor_export import XLSX_MIMETYPE, visitors_xlsx
from touristlog.services.visitor_store import get_store


def build_daily_report(day: date | None = None, now: datetime | None = None) -> tuple[str, str, list]:
    """Returns (subject, body, visitors) for the registrations of `day`."""
    now = now or datetime.now()
    day = day or now.date()
    store = get_store()

    visitors = store.by_date(day)
    stats = compute_statistics(store.all(), now=now)
    purposes = Counter(v.purpose_label for v in visitors)

    lines = [f"Visitors for {day.isoformat()}",
             f"Registrations: {len(visitors)}",
             f"Past 7 days:   {stats['weekVisitors']}",
             f"All time:      {stats['totalVisitors']}",
             f"Avg per day:   {stats['avgDaily']}",
             "",
             "By purpose:"]
    for label, n in purposes.most_common():
        lines.append(f"  {n:>4}  {label}")
    if visitors:
        lines += ["", "Registrations:"]
        for v in sorted(visitors, key=lambda v: v.created_at):
            lines.append(f"  {v.created_at:%H:%M}  {v.control_number}  {v.name}")

    return f"[Tourist Log Book] Visitors {day.isoformat()}", "\n".join(lines), visitors


def send_daily_visitors_report(day: date | None = None, to_addr: str | None = None) -> int:
    to_addr = to_addr or current_app.config.get("REPORT_TO_EMAIL")
    if not to_addr:
        raise RuntimeError("No recipient: set REPORT_TO_EMAIL or pass --to.")

    day = day or datetime.now().date()
    subject, body, visitors = build_daily_report(day)
    attachments = []
    if visitors:
        attachments.append((f"visitors-{day.isoformat()}.xlsx", XLSX_MIMETYPE, visitors_xlsx(visitors)))

    send_mail(subject=subject, recipients=[to_addr], body=body, attachments=attachments)
    current_app.logger.info("daily visitors report sent to %s (%d rows)", to_addr, len(visitors))
    return len(visitors)
