"""
Point-of-sale depletion and automatic replenishment orders.

``record_purchase`` is the entry point used by the cash-register feed: it
applies the stock decrements and creates the resulting auto-orders in one
transaction, so a failed auto-order leaves stock untouched as well.
"""
from collections import OrderedDict, namedtuple

from core.extensions import db
from core.errors import NoOrderingPartyError, ValidationError
from core.logger import get_logger
from models.productModels import Products
from models.userModel import Users, ROLE_STORE_OWNER
from services import orderLedger
from services.pricing import parse_count, reorder_quantity

logger = get_logger("grocery.replenishment")

PurchaseResult = namedtuple("PurchaseResult", ["updated_products", "low_stock_products", "auto_orders"])


def process_purchase(items):
    """
    Decrement stock for each sold item and return (updated, low_stock).

    Unknown product ids are skipped. Stock never drops below zero. Changes
    are flushed, not committed.
    """
    if not items or not isinstance(items, list):
        raise ValidationError("Invalid purchase data")

    updated = []
    low_stock = OrderedDict()

    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Invalid purchase data", item=item)
        product_id = item.get("product_id")
        quantity = parse_count(item.get("quantity"), "quantity", minimum=1)

        try:
            product_id = int(product_id)
        except (TypeError, ValueError):
            logger.warning("Skipping purchase line with unusable product id %r", product_id)
            continue

        product = db.session.get(Products, product_id, with_for_update=True)
        if not product:
            logger.warning("Skipping unknown product %s in purchase", product_id)
            continue

        product.current_stock = max(0, product.current_stock - quantity)
        if product.is_low_stock:
            low_stock[product.id] = product
        if product not in updated:
            updated.append(product)

    db.session.flush()
    return updated, list(low_stock.values())


def resolve_ordering_party(ordering_party_id):
    """Load the store owner account bound to place auto-orders."""
    if ordering_party_id is None:
        raise NoOrderingPartyError("No store owner is configured to place automatic orders")

    user = db.session.get(Users, ordering_party_id)
    if not user or user.role != ROLE_STORE_OWNER:
        raise NoOrderingPartyError(
            f"Configured auto-order account {ordering_party_id} is not a store owner",
            ordering_party_id=ordering_party_id,
        )
    return user


def generate_auto_orders(low_stock_products, ordering_party_id):
    """Create one pending order per supplier covering its low-stock products."""
    if not low_stock_products:
        return []

    store_owner = resolve_ordering_party(ordering_party_id)

    by_supplier = OrderedDict()
    for product in low_stock_products:
        by_supplier.setdefault(product.supplier_id, []).append({
            "product_id": product.id,
            "quantity": reorder_quantity(product),
        })

    auto_orders = []
    for supplier_id, items in by_supplier.items():
        order = orderLedger.create_order(store_owner.id, supplier_id, items, commit=False)
        auto_orders.append(order)

    logger.info(
        "Generated %d auto-order(s) for store owner %s covering %d product(s)",
        len(auto_orders), store_owner.id, len(low_stock_products),
    )
    return auto_orders


def record_purchase(items, ordering_party_id):
    try:
        updated, low_stock = process_purchase(items)
        auto_orders = generate_auto_orders(low_stock, ordering_party_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return PurchaseResult(updated, low_stock, auto_orders)
