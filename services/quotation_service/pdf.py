"""
Quotation document rendering: a Jinja2 HTML template turned into PDF bytes by
wkhtmltopdf through pdfkit.
"""
from datetime import datetime, timezone
from pathlib import Path

import pdfkit
import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from shared.config.settings import COMPANY_NAME, WKHTMLTOPDF_PATH
from shared.errors import InternalFailure

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

PDF_OPTIONS = {
    "page-size": "A4",
    "encoding": "UTF-8",
    "margin-top": "15mm",
    "margin-bottom": "15mm",
    "margin-left": "12mm",
    "margin-right": "12mm",
    "quiet": "",
}


def format_money(amount) -> str:
    return f"{amount or 0:,.2f}"


def format_long_date(value) -> str:
    if not value:
        return ""
    return f"{value:%B} {value.day}, {value:%Y}"


def discount_percent(quantity, unit_price, discount) -> str:
    gross = (quantity or 0) * (unit_price or 0)
    if not discount or discount <= 0 or gross <= 0:
        return "-"
    percent = discount / gross * 100
    return f"{percent:.4f}%" if percent < 0.1 else f"{percent:.1f}%"


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
_env.filters["money"] = format_money
_env.filters["long_date"] = format_long_date
_env.globals["discount_percent"] = discount_percent


def render_quotation_html(quotation, customer, items: list[dict]) -> str:
    template = _env.get_template("quotation.html")
    return template.render(
        company_name=COMPANY_NAME,
        quotation=quotation,
        customer=customer,
        items=items,
        generated_on=datetime.now(timezone.utc),
    )


def html_to_pdf(html: str) -> bytes:
    config = pdfkit.configuration(wkhtmltopdf=WKHTMLTOPDF_PATH) if WKHTMLTOPDF_PATH else None
    try:
        return pdfkit.from_string(html, False, options=PDF_OPTIONS, configuration=config)
    except OSError as exc:
        logger.error("pdf_render_failed", error=str(exc))
        raise InternalFailure("failed to generate PDF", exc) from exc
