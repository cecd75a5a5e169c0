"""
PerkHub — Text Rendering of the All Perks Page
================================================

Layout, top to bottom:
    All Perks                      Showing N perks
    Search: "<query>"  Merchant: <filter or All Merchants>
    [Search Now] [Reset Filters]   Searching...        (while loading)
    Error: <message>  [Try Again]                      (when error is set)
    one card per perk, or the empty / loading placeholder
"""

from typing import TYPE_CHECKING, List

from perkhub.schemas.perk import PerkRead

if TYPE_CHECKING:
    from perkhub.client.view import PerkSearchView

DESCRIPTION_PREVIEW_CHARS = 120


def perk_detail_path(perk: PerkRead) -> str:
    """Client-side route of a perk's detail page."""
    return f"/perks/{perk.id}/view"


def _preview(text: str, limit: int = DESCRIPTION_PREVIEW_CHARS) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def render_perk_card(perk: PerkRead) -> List[str]:
    """Lines of one perk card; optional parts are left out when empty."""
    lines = [perk.title]
    if perk.merchant:
        lines.append(f"  Merchant: {perk.merchant}")
    lines.append(f"  Category: {perk.category.capitalize()}")
    if perk.discount_percent > 0:
        lines.append(f"  {perk.discount_percent}% OFF")
    if perk.description:
        lines.append(f"  {_preview(perk.description)}")
    if perk.created_by and perk.created_by.display_name:
        lines.append(f"  Created by: {perk.created_by.display_name}")
    lines.append(f"  -> {perk_detail_path(perk)}")
    return lines


def render_view(view: "PerkSearchView") -> str:
    count = len(view.perks)
    lines = [
        f"All Perks    Showing {count} perk{'' if count == 1 else 's'}",
        f'Search: "{view.query}"  Merchant: {view.merchant_filter or "All Merchants"}',
        "Merchants: " + (", ".join(view.merchant_options) or "-"),
    ]

    controls = "[Search Now] [Reset Filters]"
    if view.loading:
        controls += "  Searching..."
    lines.append(controls)

    if view.error:
        lines.append(f"Error: {view.error}  [Try Again]")

    lines.append("")
    for perk in view.perks:
        lines.extend(render_perk_card(perk))
        lines.append("")

    if not view.perks:
        if view.loading:
            lines.append("Loading perks...")
        else:
            lines.append("No perks found.")
            lines.append("Try adjusting your search or filters.")

    return "\n".join(lines).rstrip() + "\n"
