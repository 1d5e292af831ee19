"""Bill history query helpers."""

from billsplitter.queries.history import HistorySort, search_bills, sort_bills

__all__ = ["HistorySort", "search_bills", "sort_bills"]
