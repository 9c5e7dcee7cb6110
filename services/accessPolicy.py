"""
Who may move an order from one status to another.

``can_transition`` is the whole rule table and touches no state. The other
helpers add the order-level ownership checks on top of it.
"""
from core.errors import ForbiddenError, IllegalTransitionError
from models.userModel import ROLE_SUPPLIER, ROLE_STORE_OWNER
from models.orderModels import STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED

ALLOWED_TRANSITIONS = {
    ROLE_SUPPLIER: frozenset({(STATUS_PENDING, STATUS_IN_PROGRESS)}),
    ROLE_STORE_OWNER: frozenset({(STATUS_IN_PROGRESS, STATUS_COMPLETED)}),
}


def can_transition(current_status, requested_status, role):
    return (current_status, requested_status) in ALLOWED_TRANSITIONS.get(role, frozenset())


def is_party(order, user_id, role):
    """True when ``user_id`` is the order's own party for ``role``."""
    if role == ROLE_SUPPLIER:
        return order.supplier_id == user_id
    if role == ROLE_STORE_OWNER:
        return order.store_owner_id == user_id
    return False


def check_transition(order, user_id, role, requested_status):
    if not is_party(order, user_id, role):
        raise ForbiddenError(
            "Not authorized to update this order", order_id=order.id, user_id=user_id, role=role
        )
    if not can_transition(order.status, requested_status, role):
        raise IllegalTransitionError(order.id, order.status, requested_status, role)


def check_can_view(order, user_id):
    if user_id not in (order.supplier_id, order.store_owner_id):
        raise ForbiddenError("Not authorized to view this order", order_id=order.id, user_id=user_id)
