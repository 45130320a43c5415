"""
Invoice aggregation pipeline behind the vendor/customer dashboard charts.

    invoices -> filter_by_window -> aggregate_by           (chart)
                                 -> monthly_breakdown      (drill-down)

Every function is pure: inputs are never mutated and results only depend on
the arguments. Invoices whose issue date cannot be parsed are left out of the
result, logged, and handed to ``on_invalid_date`` when a callback is given.
"""

import logging
from decimal import Decimal
from operator import attrgetter
from typing import Any, Callable, List, Optional, Sequence

import pandas as pd

from invoice_analytics.schemas.dashboard import EntityTotal, MonthlyBreakdown

logger = logging.getLogger(__name__)

# Fixed English names; strftime("%B") follows LC_TIME
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

KeySelector = Callable[[Any], str]
InvalidDateHook = Optional[Callable[[List[Any]], None]]

vendor_name: KeySelector = attrgetter("vendorName")
customer_name: KeySelector = attrgetter("customerName")

KEY_SELECTORS = {
    "vendor": vendor_name,
    "customer": customer_name,
}


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _sum_amounts(amounts) -> Decimal:
    return sum((_to_decimal(amount) for amount in amounts), Decimal("0"))


def parse_issue_date(value) -> Optional[pd.Timestamp]:
    """
    Parse an ISO 8601 date string, returning None when it is not a usable date.

    Other layouts such as ``01/05/2024`` are rejected rather than guessed.
    """
    if value is None:
        return None
    try:
        parsed = pd.to_datetime(value, format="ISO8601", errors="coerce")
    except (TypeError, ValueError):
        return None
    if pd.isna(parsed):
        return None
    # Keep the wall-clock date of offset-qualified timestamps
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed


def month_label(timestamp: pd.Timestamp) -> str:
    return f"{MONTH_NAMES[timestamp.month - 1]} {timestamp.year}"


def _window_start(today: pd.Timestamp, days: int) -> Optional[pd.Timestamp]:
    try:
        return today - pd.Timedelta(days=days)
    except (OverflowError, pd.errors.OutOfBoundsTimedelta, pd.errors.OutOfBoundsDatetime):
        # Reaches past the earliest representable timestamp: no lower bound
        return None


def _issue_dates(invoices: Sequence[Any]) -> pd.Series:
    parsed = [parse_issue_date(invoice.issueDate) for invoice in invoices]
    return pd.to_datetime(pd.Series(parsed, dtype="object"))


def _report_invalid_dates(invoices: Sequence[Any], invalid: pd.Series, on_invalid_date: InvalidDateHook) -> None:
    if not invalid.any():
        return
    dropped = [invoice for invoice, bad in zip(invoices, invalid) if bad]
    logger.warning(
        f"Skipped {len(dropped)} invoice(s) with unparsable issue dates: "
        f"{[getattr(invoice, 'invoiceNumber', None) for invoice in dropped]}"
    )
    if on_invalid_date is not None:
        on_invalid_date(dropped)


def filter_by_window(
    invoices: Sequence[Any],
    days: int,
    now=None,
    on_invalid_date: InvalidDateHook = None,
) -> List[Any]:
    """
    Keep the invoices issued within the trailing ``days``-day window.

    The window is ``[today - days, today]`` on calendar dates, inclusive at
    both ends. Input order is preserved.
    """
    if not invoices:
        return []

    today = (pd.Timestamp(now) if now is not None else pd.Timestamp.now()).normalize()
    if today.tzinfo is not None:
        today = today.tz_localize(None)
    cutoff = _window_start(today, days)

    issued = _issue_dates(invoices)
    invalid = issued.isna()
    _report_invalid_dates(invoices, invalid, on_invalid_date)

    issued_day = issued.dt.normalize()
    in_window = (~invalid) & (issued_day <= today)
    if cutoff is not None:
        in_window &= issued_day >= cutoff
    return [invoice for invoice, keep in zip(invoices, in_window) if keep]


def aggregate_by(invoices: Sequence[Any], key_of: KeySelector) -> List[EntityTotal]:
    """
    Sum ``totalAmount`` per distinct name, largest total first.

    Names are compared exactly. Equal totals keep the order in which their
    names first appeared.
    """
    if not invoices:
        return []

    frame = pd.DataFrame(
        {
            "name": [key_of(invoice) for invoice in invoices],
            "totalAmount": [_to_decimal(invoice.totalAmount) for invoice in invoices],
        }
    )
    totals = frame.groupby("name", sort=False, dropna=False)["totalAmount"].agg(_sum_amounts)

    rows = [EntityTotal(name=name, totalAmount=total) for name, total in totals.items()]
    # sorted() stays stable with reverse=True
    return sorted(rows, key=lambda row: row.totalAmount, reverse=True)


def sort_month_labels_lexicographically(rows: List[MonthlyBreakdown]) -> List[MonthlyBreakdown]:
    """
    Order breakdown rows by their rendered label, descending, as plain strings.

    This is alphabetical rather than chronological ("May 2024" sorts before
    "January 2025"). Switching the key to the parsed month would make it
    calendar order.
    """
    return sorted(rows, key=lambda row: row.monthLabel, reverse=True)


def monthly_breakdown(
    invoices: Sequence[Any],
    target_name: str,
    key_of: KeySelector,
    on_invalid_date: InvalidDateHook = None,
) -> List[MonthlyBreakdown]:
    """Group one vendor's or customer's invoices by issue month."""
    selected = [invoice for invoice in invoices if key_of(invoice) == target_name]
    if not selected:
        return []

    issued = _issue_dates(selected)
    invalid = issued.isna()
    _report_invalid_dates(selected, invalid, on_invalid_date)

    frame = pd.DataFrame(
        {
            "issueDate": [invoice.issueDate for invoice in selected],
            "totalAmount": [_to_decimal(invoice.totalAmount) for invoice in selected],
        }
    )
    frame = frame.loc[~invalid].copy()
    if frame.empty:
        return []
    frame["monthLabel"] = issued.loc[~invalid].map(month_label)

    rows = [
        MonthlyBreakdown(
            monthLabel=label,
            totalAmount=_sum_amounts(group["totalAmount"]),
            invoiceDates=sorted(str(value) for value in group["issueDate"]),
        )
        for label, group in frame.groupby("monthLabel", sort=False)
    ]
    return sort_month_labels_lexicographically(rows)
