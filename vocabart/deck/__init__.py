"""Print page layout."""

from vocabart.deck.layout import PAGE_SIZE, ROW_SIZE, Page, back_order, page_count, paginate

__all__ = ["PAGE_SIZE", "ROW_SIZE", "Page", "back_order", "page_count", "paginate"]
