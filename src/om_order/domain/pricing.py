"""Server-side pricing of line items.

line total  = sum(action.price) * quantity
grand total = sum(line totals)

Client-supplied totals are claims: accepted only when they match.
"""
from decimal import Decimal, InvalidOperation

from src.om_common.errors import InvalidOrderError
from src.om_common.money import to_money
from src.om_order.domain.models import LineItem

# Largest value the orders.grand_total NUMERIC(12, 2) column holds
MAX_ORDER_TOTAL = Decimal("9999999999.99")


def _money(value: Decimal | int | float | str, what: str) -> Decimal:
    try:
        return to_money(value)
    except InvalidOperation as exc:
        raise InvalidOrderError(f"{what} is out of range") from exc


def price_line(line: LineItem) -> Decimal:
    if not line.item:
        raise InvalidOrderError("line item name is required")
    if line.quantity <= 0:
        raise InvalidOrderError(f"quantity must be positive for {line.item!r}")
    if not line.actions:
        raise InvalidOrderError(f"at least one action is required for {line.item!r}")
    unit = Decimal(0)
    for action in line.actions:
        price = _money(action.price, f"price for {line.item!r}/{action.type!r}")
        if price < 0:
            raise InvalidOrderError(f"negative price for {line.item!r}/{action.type!r}")
        unit += price
    total = _money(unit * line.quantity, f"line total for {line.item!r}")
    if total > MAX_ORDER_TOTAL:
        raise InvalidOrderError(f"line total for {line.item!r} is out of range")
    return total


def price_line_items(
    lines: list[LineItem], claimed_grand_total: Decimal | None = None
) -> tuple[list[LineItem], Decimal]:
    """Return (priced lines, grand total). Raises InvalidOrderError on any inconsistency."""
    if not lines:
        raise InvalidOrderError("order has no line items")

    priced: list[LineItem] = []
    grand_total = Decimal(0)
    for line in lines:
        total = price_line(line)
        if line.total is not None and _money(line.total, "line total") != total:
            raise InvalidOrderError(
                f"line total for {line.item!r} is {line.total}, expected {total}"
            )
        priced.append(LineItem(item=line.item, actions=line.actions, quantity=line.quantity, total=total))
        grand_total += total

    grand_total = to_money(grand_total)
    if grand_total > MAX_ORDER_TOTAL:
        raise InvalidOrderError("grand total is out of range")
    if (
        claimed_grand_total is not None
        and _money(claimed_grand_total, "grand total") != grand_total
    ):
        raise InvalidOrderError(
            f"grand total is {claimed_grand_total}, expected {grand_total}"
        )
    if grand_total <= 0:
        raise InvalidOrderError("grand total must be positive")
    return priced, grand_total
