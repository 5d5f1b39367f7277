# touristlog/utils/pdf_render.py
import os
import sys

import pdfkit
from flask import current_app

CANDIDATES = [
    "/usr/bin/wkhtmltopdf",
    "/usr/local/bin/wkhtmltopdf",
    r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe",
]


def _find_wkhtml() -> str | None:
    configured = current_app.config.get("WKHTMLTOPDF_EXE") or os.getenv("WKHTMLTOPDF_EXE", "")
    for p in [configured, *CANDIDATES]:
        if p and os.path.isfile(p):
            return p
    return None


def html_to_pdf_bytes(html: str, base_url: str | None = None) -> bytes:
    # WeasyPrint first (no external binary); wkhtmltopdf as the fallback
    if sys.platform != "win32":
        try:
            from weasyprint import HTML  # lazy import, optional extra
            return HTML(string=html, base_url=base_url).write_pdf()
        except ImportError:
            current_app.logger.info("weasyprint not installed; using wkhtmltopdf")
        except OSError as e:
            # missing pango/cairo system libraries
            current_app.logger.warning("weasyprint unavailable (%s); using wkhtmltopdf", e)

    exe = _find_wkhtml()
    if not exe:
        raise RuntimeError("No PDF renderer: install weasyprint or set WKHTMLTOPDF_EXE.")
    cfg = pdfkit.configuration(wkhtmltopdf=exe)
    options = {
        "encoding": "UTF-8",
        "enable-local-file-access": None,
        "print-media-type": None,
        "quiet": None,
        "page-size": "A4",
    }
    return pdfkit.from_string(html, False, configuration=cfg, options=options)
