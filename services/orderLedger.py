"""
Order ledger: order creation, the status machine and the completion stock credit.

Orders are only ever changed through ``transition_status``; every change
appends a history entry so the last entry always mirrors ``Order.status``.
"""
from core.extensions import db
from core.imports import datetime
from core.errors import (
    NotFoundError, InvalidRelationError, BelowMinimumQuantityError, ValidationError,
)
from core.logger import get_logger
from models.orderModels import (
    Order, OrderItem, ORDER_STATUSES, STATUS_PENDING, STATUS_COMPLETED,
)
from models.productModels import Products
from models.userModel import Users, ROLES, ROLE_SUPPLIER, ROLE_STORE_OWNER
from services import accessPolicy
from services.pricing import parse_count, order_total, MAX_COUNT

logger = get_logger("grocery.orders")


def _find_user(user_id, role, entity):
    user = db.session.get(Users, user_id)
    if not user or user.role != role:
        raise NotFoundError(entity, user_id)
    return user


def _finish(commit):
    if commit:
        db.session.commit()
    else:
        db.session.flush()


def create_order(store_owner_id, supplier_id, items, commit=True):
    """
    Validate the requested lines and persist a new pending order.

    Each line captures the product's current unit price. Nothing is written
    unless every line passes validation. With ``commit=False`` the order is
    only flushed so the caller controls the transaction.
    """
    if not items:
        raise ValidationError("Order must contain at least one item")

    _find_user(store_owner_id, ROLE_STORE_OWNER, "Store owner")
    _find_user(supplier_id, ROLE_SUPPLIER, "Supplier")

    lines = []
    for item in items:
        product_id = parse_count(item.get("product_id"), "product_id", minimum=1)
        quantity = parse_count(item.get("quantity"), "quantity", minimum=1)

        product = db.session.get(Products, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        if product.supplier_id != supplier_id:
            raise InvalidRelationError(product, supplier_id)
        if quantity < product.minimum_purchase_quantity:
            raise BelowMinimumQuantityError(product, quantity)

        lines.append((product, quantity, product.price_per_item))

    order = Order(
        store_owner_id=store_owner_id,
        supplier_id=supplier_id,
        total_price=order_total((price, quantity) for _, quantity, price in lines),
        order_items=[
            OrderItem(product_id=product.id, quantity=quantity, price_at_order=price)
            for product, quantity, price in lines
        ],
    )
    now = datetime.utcnow()
    order.created_at = now
    order.record_status(STATUS_PENDING, at=now)

    db.session.add(order)
    _finish(commit)

    logger.info(
        "Order %s created for store owner %s with supplier %s: %d line(s), total %s",
        order.id, store_owner_id, supplier_id, len(lines), order.total_price,
    )
    return order


def find_order(order_id, lock=False):
    order = db.session.get(Order, order_id, with_for_update=lock or None)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


def transition_status(order_id, acting_user_id, acting_role, target_status):
    if target_status not in ORDER_STATUSES:
        raise ValidationError(
            f"Invalid status '{target_status}'", status=target_status, allowed=list(ORDER_STATUSES)
        )

    order = find_order(order_id, lock=True)
    accessPolicy.check_transition(order, acting_user_id, acting_role, target_status)

    previous = order.status
    order.record_status(target_status)

    if target_status == STATUS_COMPLETED:
        _credit_received_stock(order)

    db.session.commit()
    logger.info(
        "Order %s moved from %s to %s by %s %s",
        order.id, previous, target_status, acting_role, acting_user_id,
    )
    return order


def _credit_received_stock(order):
    """Received goods go back into the ordered products' saleable stock."""
    for item in order.order_items:
        product = db.session.get(Products, item.product_id, with_for_update=True)
        if not product:
            logger.warning("Order %s references missing product %s; no stock credited", order.id, item.product_id)
            continue
        if product.current_stock + item.quantity > MAX_COUNT:
            raise ValidationError(
                f"Completing order {order.id} would push stock of '{product.name}' past {MAX_COUNT}",
                product_id=product.id, current_stock=product.current_stock, quantity=item.quantity,
            )
        product.current_stock += item.quantity
        logger.debug("Credited %s unit(s) to product %s", item.quantity, product.id)


def get_order(order_id, requesting_user_id):
    order = find_order(order_id)
    accessPolicy.check_can_view(order, requesting_user_id)
    return order


def list_orders_for(user_id, role):
    if role not in ROLES:
        raise ValidationError(f"Unknown role '{role}'", role=role)
    column = Order.supplier_id if role == ROLE_SUPPLIER else Order.store_owner_id
    return Order.query.filter(column == user_id).order_by(Order.created_at.desc(), Order.id.desc()).all()

