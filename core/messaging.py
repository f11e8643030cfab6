"""Pre-filled messaging deep links (booking a project, asking about a collection).

The service only builds the link; opening it and delivering the message is
left to the client and the messaging provider.
"""

from urllib.parse import quote

from core.config import settings
from core.pricing import project_totals
from core.quotation import format_dimensions


def _money(value: float) -> str:
    return f"{settings.CURRENCY_SYMBOL}{value:.2f}"


def _signed(value: float) -> str:
    return f"{'+' if value >= 0 else '-'}{_money(abs(value))}"


def build_booking_message(project, project_type_name: str | None) -> str:
    totals = project_totals(project.items, project.extra_costs)

    lines = [
        "Hi! I'd like to book the following project:",
        "",
        f"*Project:* {project.name}",
        f"*Type:* {project_type_name or 'Custom Furniture'}",
    ]
    if project.customer_name:
        lines.append(f"*Customer:* {project.customer_name}")
    if project.customer_mobile:
        lines.append(f"*Mobile:* {project.customer_mobile}")
    if project.customer_address:
        lines.append(f"*Address:* {project.customer_address}")

    lines += [
        "",
        f"*Project Items Total:* {_money(totals.items_total)}",
        f"*Additional Costs:* {_signed(totals.extra_costs_total)}",
        f"*Final Total:* {_money(totals.final_total)}",
        "",
        f"*Items ({len(project.items)}):*",
    ]
    for item in project.items:
        lines.append(
            f"• {item.name or 'Unnamed Item'} - {format_dimensions(item)} "
            f"({item.quantity}x) - {_money(item.amount)}"
        )

    if project.extra_costs:
        lines += ["", f"*Extra Costs ({len(project.extra_costs)}):*"]
        for cost in project.extra_costs:
            lines.append(f"• {cost.name or 'Unnamed Cost'} - {_signed(cost.amount)}")

    lines += ["", "Please confirm the booking and next steps."]
    return "\n".join(lines)


def build_consultation_message(collection_title: str) -> str:
    return (
        f"Hi! I'm interested in your {collection_title} collection. I'd like to schedule "
        "a consultation to discuss my requirements and get a personalized quote. "
        "Please let me know your available slots."
    )


def messaging_link(message: str, phone: str | None = None) -> str:
    phone = phone or settings.WHATSAPP_NUMBER
    return f"https://wa.me/{phone}?text={quote(message, safe='')}"
