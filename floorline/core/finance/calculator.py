"""Deposit and balance reconciliation across accepted quotes and change orders.

Every accepted quote contributes its full materials amount to the deposit.
Managed installations additionally collect ``labor_deposit_percentage`` of
labor up front; the same percentage applies to labor change orders linked to
that quote, while materials change orders are always collected in full.

Change orders that are not linked to a currently accepted quote (either
unassigned or pointing at a quote that was since rejected) are part of the
grand total but never part of any deposit.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from floorline.common.enums import ChangeOrderType, InstallationType, QuoteStatus
from floorline.common.logging import get_logger
from floorline.common.money import ZERO, format_currency, quantize, to_money
from floorline.core.finance.schemas import (
    FinancialSummary,
    FinancialSummaryDisplay,
    QuoteFinancials,
)

logger = get_logger("finance.calculator")

HUNDRED = Decimal("100")


def accepted_quotes(quotes: Iterable[Any]) -> list[Any]:
    return [q for q in quotes if _status(q) == QuoteStatus.ACCEPTED.value]


def deposit_percent(quote: Any) -> Decimal:
    if _installation_type(quote) != InstallationType.MANAGED.value:
        return ZERO
    return to_money(quote.labor_deposit_percentage) / HUNDRED


def change_order_deposit(change_order: Any, percent: Decimal) -> Decimal:
    amount = to_money(change_order.amount)
    if _value(change_order.type) == ChangeOrderType.MATERIALS.value:
        return amount
    return amount * percent


def quote_financials(quote: Any, change_orders: Iterable[Any]) -> QuoteFinancials:
    materials = to_money(quote.materials_amount)
    labor = to_money(quote.labor_amount)
    associated = [co for co in change_orders if co.quote_id == quote.id]

    percent = deposit_percent(quote)
    base_total = materials + labor
    co_total = sum((to_money(co.amount) for co in associated), ZERO)
    quote_deposit = materials + labor * percent
    co_deposit = sum((change_order_deposit(co, percent) for co in associated), ZERO)

    return QuoteFinancials(
        quote_id=quote.id,
        installation_type=_installation_type(quote),
        base_total=base_total,
        change_orders_total=co_total,
        subtotal=base_total + co_total,
        deposit_percent=percent,
        quote_deposit=quote_deposit,
        change_order_deposit=co_deposit,
        deposit=quote_deposit + co_deposit,
    )


def calculate_financial_summary(
    quotes: Iterable[Any], change_orders: Iterable[Any]
) -> FinancialSummary:
    """Compute grand total, deposit and balance due.

    ``quotes`` must already be limited to accepted quotes; ``change_orders``
    is every change order of the project.
    """
    quotes = list(quotes)
    change_orders = list(change_orders)
    accepted_ids = {q.id for q in quotes}

    breakdown = [quote_financials(q, change_orders) for q in quotes]
    unassigned = [co for co in change_orders if co.quote_id not in accepted_ids]
    orphaned = [co for co in unassigned if co.quote_id is not None]
    if orphaned:
        logger.debug(
            "%d change order(s) linked to non-accepted quotes counted as unassigned",
            len(orphaned),
        )

    unassigned_total = sum((to_money(co.amount) for co in unassigned), ZERO)
    grand_total = sum((item.subtotal for item in breakdown), ZERO) + unassigned_total
    total_deposit = sum((item.deposit for item in breakdown), ZERO)

    total_materials = sum((to_money(q.materials_amount) for q in quotes), ZERO)
    total_labor = sum((to_money(q.labor_amount) for q in quotes), ZERO)
    for co in change_orders:
        if _value(co.type) == ChangeOrderType.MATERIALS.value:
            total_materials += to_money(co.amount)
        else:
            total_labor += to_money(co.amount)

    return FinancialSummary(
        grand_total=quantize(grand_total),
        total_deposit=quantize(total_deposit),
        balance_due=quantize(grand_total - total_deposit),
        total_materials=quantize(total_materials),
        total_labor=quantize(total_labor),
        unassigned_change_orders_total=quantize(unassigned_total),
        quotes=breakdown,
    )


def format_summary(summary: FinancialSummary) -> FinancialSummaryDisplay:
    return FinancialSummaryDisplay(
        grand_total=format_currency(summary.grand_total),
        total_deposit=format_currency(summary.total_deposit),
        balance_due=format_currency(summary.balance_due),
    )


def _value(field: Any) -> Any:
    return getattr(field, "value", field)


def _status(quote: Any) -> Any:
    return _value(quote.status)


def _installation_type(quote: Any) -> str:
    return _value(quote.installation_type) or InstallationType.MANAGED.value
