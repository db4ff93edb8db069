import io
from xml.sax.saxutils import escape
from typing import Dict

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from kitchen.domain.MealPlan import MealPlan
from kitchen.domain.Recipe import Recipe
from kitchen.domain.ShoppingList import ShoppingList
from kitchen.utilities.constants import SHOPPING_CATEGORIES

HEADER_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, 0), 12),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
])


def _build(elements, pagesize) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=pagesize,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )
    doc.build(elements)
    return buf.getvalue()


def generate_pdf_for_meal_plan(plan: MealPlan, recipes: Dict[str, Recipe]) -> bytes:
    """Table per day: Date / Breakfast / Lunch / Dinner / Snacks, slots showing recipe titles."""
    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"{escape(plan.name)} ({plan.start_date.isoformat()} - {plan.end_date.isoformat()})", styles["Title"]),
        Spacer(1, 16),
    ]

    def title(recipe_id):
        recipe = recipes.get(recipe_id) if recipe_id else None
        return recipe.title if recipe else "-"

    data = [["Date", "Breakfast", "Lunch", "Dinner", "Snacks"]]
    for entry in plan.entries():
        data.append([
            entry.date.strftime("%a %d.%m.%Y"),
            title(entry.breakfast),
            title(entry.lunch),
            title(entry.dinner),
            ", ".join(title(s) for s in entry.snacks) or "-",
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(HEADER_STYLE)
    elements.append(table)
    if plan.notes:
        elements.extend([Spacer(1, 12), Paragraph(escape(plan.notes), styles["Normal"])])
    return _build(elements, landscape(A4))


def generate_pdf_for_shopping_list(shopping_list: ShoppingList) -> bytes:
    """Checklist grouped by category, followed by the estimated total."""
    styles = getSampleStyleSheet()
    elements = [Paragraph(escape(shopping_list.name), styles["Title"]), Spacer(1, 16)]

    data = [["", "Item", "Quantity", "Category", "Price"]]
    order = {c: i for i, c in enumerate(SHOPPING_CATEGORIES)}
    for item in sorted(shopping_list.items, key=lambda i: order.get(i.category, len(order))):
        data.append([
            "[x]" if item.is_completed else "[ ]",
            item.name,
            f"{item.quantity} {item.unit}".strip(),
            item.category,
            f"{item.estimated_price:.2f}",
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(HEADER_STYLE)
    elements.append(table)
    elements.extend([
        Spacer(1, 12),
        Paragraph(f"Estimated total: {shopping_list.total_estimated_cost:.2f}", styles["Heading3"]),
    ])
    return _build(elements, A4)
