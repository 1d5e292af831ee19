"""
Splitting Package

Per-person allocation of a bill, the summary built on top of it, and
the copy-on-write editing helpers used while a bill is being entered.
"""

from billsplitter.splitting.allocator import PersonAllocation, SplitAllocator
from billsplitter.splitting.custom_splits import (
    InvalidSplitError,
    SplitMode,
    amount_splits,
    apply_split,
    equal_custom_splits,
    percentage_splits,
)
from billsplitter.splitting.summary import BillSummaryBuilder, summarize

__all__ = [
    "BillSummaryBuilder",
    "InvalidSplitError",
    "PersonAllocation",
    "SplitAllocator",
    "SplitMode",
    "amount_splits",
    "apply_split",
    "equal_custom_splits",
    "percentage_splits",
    "summarize",
]
