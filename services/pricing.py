from core.imports import Decimal, InvalidOperation
from core.errors import ValidationError

# column limits: Numeric(10, 2) prices, Numeric(12, 2) order totals, 32-bit INTEGER counts
PRICE_PLACES = 2
MAX_PRICE = Decimal("99999999.99")
MAX_ORDER_TOTAL = Decimal("9999999999.99")
MAX_COUNT = 2**31 - 1


def parse_price(value, field="price_per_item"):
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field=field)
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field, value=value)
    if not price.is_finite() or price < 0:
        raise ValidationError(f"{field} must be zero or greater", field=field, value=value)
    if price.as_tuple().exponent < -PRICE_PLACES:
        raise ValidationError(
            f"{field} must have at most {PRICE_PLACES} decimal places", field=field, value=value
        )
    if price > MAX_PRICE:
        raise ValidationError(f"{field} must be at most {MAX_PRICE}", field=field, value=value)
    return price


def parse_count(value, field, minimum=0, default=None, maximum=MAX_COUNT):
    """Parse a whole-number quantity within [minimum, maximum]."""
    if value is None:
        if default is None:
            raise ValidationError(f"{field} is required", field=field)
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number", field=field, value=value)
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a whole number", field=field, value=value)
    if count != value and str(count) != str(value).strip():
        raise ValidationError(f"{field} must be a whole number", field=field, value=value)
    if count < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field=field, value=value)
    if count > maximum:
        raise ValidationError(f"{field} must be at most {maximum}", field=field, value=value)
    return count


def line_total(unit_price, quantity):
    return Decimal(unit_price) * quantity


def order_total(lines):
    """Sum of (unit_price, quantity) pairs, bounded by the order total column."""
    total = sum((line_total(price, quantity) for price, quantity in lines), Decimal("0"))
    if total > MAX_ORDER_TOTAL:
        raise ValidationError(
            f"Order total must be at most {MAX_ORDER_TOTAL}", field="total_price", value=str(total)
        )
    return total


def reorder_quantity(product):
    """Enough to clear the threshold deficit, never under the supplier's minimum."""
    deficit = product.minimum_stock_threshold - product.current_stock
    return max(product.minimum_purchase_quantity, deficit)
