"""Page-subset selection for each extraction stage.

Every selector is a pure function of the total page count and returns a
slice into the page list. There is no adaptive re-selection when a stage
yields little.
"""

import math

IDENTIFY_PAGE_LIMIT = 5
POLICY_INFO_PAGE_LIMIT = 4
PROJECTIONS_PAGE_LIMIT = 12
EXPENSES_PAGE_LIMIT = 6

# Expense tables usually sit in the middle of an illustration.
EXPENSES_START_FRACTION = 0.3
EXPENSES_END_FRACTION = 0.7
EXPENSES_END_PADDING = 5


def identify_pages(page_count: int) -> slice:
    return slice(0, min(IDENTIFY_PAGE_LIMIT, page_count))


def policy_info_pages(page_count: int) -> slice:
    return slice(0, min(POLICY_INFO_PAGE_LIMIT, page_count))


def projection_pages(page_count: int) -> slice:
    return slice(0, min(PROJECTIONS_PAGE_LIMIT, page_count))


def expense_pages(page_count: int) -> slice:
    """Middle band of the document, capped at six pages.

    For 20 pages the band is 6..19, trimmed to 6..12.
    """
    start = math.floor(page_count * EXPENSES_START_FRACTION)
    end = min(page_count, math.floor(page_count * EXPENSES_END_FRACTION) + EXPENSES_END_PADDING)
    return slice(start, min(end, start + EXPENSES_PAGE_LIMIT))
