# core/quotation.py: quotation document for a project + PDF rendering

import io
from datetime import datetime, timedelta, timezone

from PIL import Image, ImageDraw, ImageFont

from core.catalog import MaterialCatalog
from core.config import settings
from core.errors import DataIntegrityError
from core.pricing import effective_rate, project_totals
from schemas.quotation_schema import (
    BillTo,
    BusinessInfo,
    Quotation,
    QuotationExtraCost,
    QuotationLine,
)

TERMS = [
    "50% advance payment required to commence work",
    "Balance payment due upon completion",
    "Installation included in the quoted price",
    "Warranty: 2 years on workmanship, 1 year on materials",
    "Free delivery within city limits",
]

# The bundled default font has no rupee glyph
PDF_CURRENCY = "Rs"


def quotation_number(project_id: str) -> str:
    return f"Q{project_id[-6:].upper()}"


def quotation_filename(project) -> str:
    customer = (project.customer_name or "Client").strip() or "Client"
    raw = f"{customer}_{project.name}_quotation.pdf"
    return "".join(c if c.isalnum() or c in "._-" else "_" for c in raw)


def _dim(value) -> str:
    return f"{float(value or 0):g}"


def format_dimensions(item) -> str:
    """Width x Length x Depth, in inches."""
    return f'{_dim(item.width)}" x {_dim(item.length)}" x {_dim(item.depth)}"'


def build_quotation(project, project_type, catalog: MaterialCatalog,
                    issued_at: datetime | None = None) -> Quotation:
    """
    Single pass over the project. ``project`` exposes id/name/customer fields
    and typed ``items``/``extra_costs`` (e.g. a ProjectResponse).

    Raises DataIntegrityError when an item points at a material that is no
    longer in the catalog.
    """
    issued_at = issued_at or datetime.now(timezone.utc)

    orphaned = [item for item in project.items if catalog.get(item.material_id) is None]
    if orphaned:
        ids = ", ".join(sorted({item.material_id for item in orphaned}))
        raise DataIntegrityError(
            f"Project {project.id} references materials missing from the catalog: {ids}"
        )

    lines = []
    for item in project.items:
        material = catalog.get(item.material_id)
        lines.append(QuotationLine(
            name=item.name or "Unnamed Item",
            dimensions=format_dimensions(item),
            material_name=material.name,
            rate=effective_rate(item, material),
            quantity=item.quantity,
            sqft=item.sqft,
            amount=item.amount,
        ))

    extras = [
        QuotationExtraCost(name=cost.name or "Unnamed Cost", note=cost.note or "", amount=cost.amount)
        for cost in project.extra_costs
    ]

    bill_to = None
    if project.customer_name or project.customer_mobile or project.customer_address:
        bill_to = BillTo(
            customer_name=project.customer_name,
            customer_mobile=project.customer_mobile,
            customer_address=project.customer_address,
        )

    totals = project_totals(project.items, project.extra_costs)
    valid_days = settings.QUOTE_VALID_DAYS
    return Quotation(
        number=quotation_number(project.id),
        project_id=project.id,
        project_name=project.name,
        project_type_name=project_type.name if project_type is not None else "Custom Furniture",
        issued_on=issued_at.date(),
        valid_until=(issued_at + timedelta(days=valid_days)).date(),
        business=BusinessInfo(
            name=settings.BUSINESS_NAME,
            tagline=settings.BUSINESS_TAGLINE,
            phone=settings.BUSINESS_PHONE,
            email=settings.BUSINESS_EMAIL,
            website=settings.BUSINESS_WEBSITE,
        ),
        bill_to=bill_to,
        lines=lines,
        extra_costs=extras,
        items_total=totals.items_total,
        extra_costs_total=totals.extra_costs_total,
        final_total=totals.final_total,
        terms=[*TERMS, f"Quote valid for {valid_days} days from issue date"],
    )


# ---------------------------------------------------------------------
# PDF rendering (A4 @ 96 dpi, drawn with Pillow)
# ---------------------------------------------------------------------

PAGE_W, PAGE_H = 794, 1123
MARGIN = 40
PRIMARY = (217, 119, 6)
TEXT = (33, 33, 33)
WHITE = (255, 255, 255)
ROW_H = 22

# (header, x position, max width)
ITEM_COLUMNS = [
    ("Item Description", MARGIN, 180),
    ("Dimensions (WxLxD)", 230, 125),
    ("Material", 360, 105),
    (f"Rate ({PDF_CURRENCY}/Sq Ft)", 470, 85),
    ("Qty", 560, 40),
]
EXTRA_COLUMNS = [
    ("Additional Service", MARGIN, 220),
    ("Description", 270, 330),
]


def _font(size: int):
    return ImageFont.load_default(size=size)


def _money(value: float) -> str:
    return f"{PDF_CURRENCY} {value:,.2f}"


class _PdfCanvas:
    def __init__(self):
        self.pages: list[Image.Image] = []
        self.fonts = {size: _font(size) for size in (8, 10, 12, 18, 24)}
        self._new_page()

    def _new_page(self):
        page = Image.new("RGB", (PAGE_W, PAGE_H), WHITE)
        self.pages.append(page)
        self.draw = ImageDraw.Draw(page)
        self.y = MARGIN

    def ensure(self, height: int):
        if self.y + height > PAGE_H - MARGIN:
            self._new_page()

    def text(self, x, text, size=10, fill=TEXT, y=None):
        self.draw.text((x, self.y if y is None else y), text, font=self.fonts[size], fill=fill)

    def text_right(self, right_x, text, size=10, fill=TEXT, y=None):
        width = self.draw.textlength(text, font=self.fonts[size])
        self.text(right_x - width, text, size=size, fill=fill, y=y)

    def fit(self, text, max_width, size=10) -> str:
        font = self.fonts[size]
        if self.draw.textlength(text, font=font) <= max_width:
            return text
        while text and self.draw.textlength(text + "..", font=font) > max_width:
            text = text[:-1]
        return text + ".."

    def band(self, height, fill):
        self.draw.rectangle([0, self.y, PAGE_W, self.y + height], fill=fill)

    def table(self, columns, rows, amount_header):
        self.ensure(ROW_H * 2)
        self.draw.rectangle([MARGIN, self.y, PAGE_W - MARGIN, self.y + ROW_H], fill=PRIMARY)
        for header, x, width in columns:
            self.text(x + 4, self.fit(header, width, 10), size=10, y=self.y + 5)
        self.text_right(PAGE_W - MARGIN - 4, amount_header, size=10, y=self.y + 5)
        self.y += ROW_H
        for cells, amount in rows:
            self.ensure(ROW_H)
            for (_, x, width), cell in zip(columns, cells):
                self.text(x + 4, self.fit(cell, width - 6, 10), size=10, y=self.y + 5)
            self.text_right(PAGE_W - MARGIN - 4, amount, size=10, y=self.y + 5)
            self.y += ROW_H
            self.draw.line([MARGIN, self.y, PAGE_W - MARGIN, self.y], fill=(220, 220, 220))
        self.y += 15


def render_quotation_pdf(quotation: Quotation) -> bytes:
    c = _PdfCanvas()
    biz = quotation.business

    # Header band
    c.y = 0
    c.band(70, PRIMARY)
    c.text(MARGIN, biz.name, size=24, fill=WHITE, y=14)
    c.text(MARGIN, biz.tagline, size=10, fill=WHITE, y=48)
    c.text_right(PAGE_W - MARGIN, f"Phone: {biz.phone} | Email: {biz.email}", size=10, fill=WHITE, y=48)
    c.y = 80
    c.band(30, (240, 240, 240))
    title_w = c.draw.textlength("QUOTATION", font=c.fonts[18])
    c.text((PAGE_W - title_w) / 2, "QUOTATION", size=18, y=c.y + 5)
    c.y += 50

    # Quotation info (left) / bill-to (right)
    top = c.y
    c.text(MARGIN, f"Quotation #: {quotation.number}")
    c.text(MARGIN, f"Date: {quotation.issued_on.strftime('%d/%m/%Y')}", y=top + 16)
    c.text(MARGIN, f"Valid Until: {quotation.valid_until.strftime('%d/%m/%Y')}", y=top + 32)
    bill_y = top
    if quotation.bill_to is not None:
        half = PAGE_W // 2
        c.text(half, "Bill To:", size=12, y=bill_y)
        bill_y += 18
        for label, value in (
            ("Customer", quotation.bill_to.customer_name),
            ("Phone", quotation.bill_to.customer_mobile),
            ("Address", quotation.bill_to.customer_address),
        ):
            if value:
                c.text(half, c.fit(f"{label}: {value}", PAGE_W - MARGIN - half), y=bill_y)
                bill_y += 16
    c.y = max(top + 56, bill_y + 10)

    c.text(MARGIN, f"Project: {quotation.project_name}", size=12)
    c.y += 18
    c.text(MARGIN, f"Type: {quotation.project_type_name}")
    c.y += 30

    if quotation.lines:
        rows = [
            ([line.name, line.dimensions, line.material_name, f"{line.rate:,.2f}", str(line.quantity)],
             f"{line.amount:,.2f}")
            for line in quotation.lines
        ]
        c.table(ITEM_COLUMNS, rows, f"Amount ({PDF_CURRENCY})")

    if quotation.extra_costs:
        rows = [
            ([cost.name, cost.note], f"{'-' if cost.amount < 0 else '+'}{abs(cost.amount):,.2f}")
            for cost in quotation.extra_costs
        ]
        c.table(EXTRA_COLUMNS, rows, "Amount")

    # Totals
    c.ensure(90)
    right = PAGE_W - MARGIN
    c.text_right(right, f"Subtotal: {_money(quotation.items_total)}")
    c.y += 18
    if quotation.extra_costs_total != 0:
        c.text_right(right, f"Additional Costs: {_money(quotation.extra_costs_total)}")
        c.y += 18
    c.draw.line([MARGIN, c.y, right, c.y], fill=TEXT, width=1)
    c.y += 8
    c.text_right(right, f"GRAND TOTAL: {_money(quotation.final_total)}", size=12, fill=PRIMARY)
    c.y += 40

    # Terms
    c.ensure(20 + 14 * len(quotation.terms))
    c.text(MARGIN, "Terms & Conditions:", size=10)
    c.y += 18
    for term in quotation.terms:
        c.text(MARGIN + 10, f"- {term}", size=8)
        c.y += 14

    # Footer
    c.y += 10
    c.ensure(50)
    c.band(50, PRIMARY)
    thanks = "Thank you for your business!"
    contact = f"{biz.website} | {biz.phone} | {biz.email}"
    for offset, line in ((8, thanks), (22, contact)):
        w = c.draw.textlength(line, font=c.fonts[8])
        c.text((PAGE_W - w) / 2, line, size=8, fill=WHITE, y=c.y + offset)

    buf = io.BytesIO()
    first, rest = c.pages[0], c.pages[1:]
    first.save(buf, format="PDF", save_all=True, append_images=rest, resolution=96.0)
    return buf.getvalue()
