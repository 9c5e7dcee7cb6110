"""
Typed errors raised by the catalog, order ledger and replenishment services.

Every error carries a machine-readable ``code``, the HTTP status it maps to
and a ``details`` dict naming the entity or constraint that was violated.
Routes never build error responses for these by hand; the handler
registered in ``register_error_handlers`` renders them.
"""
from core.imports import jsonify, SQLAlchemyError
from core.extensions import db
from core.logger import get_logger

logger = get_logger("grocery.errors")


class SupplyError(Exception):
    code = "SUPPLY_ERROR"
    status_code = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class ValidationError(SupplyError):
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(SupplyError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} with id {entity_id} not found", entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InvalidRelationError(SupplyError):
    code = "INVALID_RELATION"
    status_code = 400

    def __init__(self, product, supplier_id):
        super().__init__(
            f"Product {product.name} does not belong to the specified supplier",
            product_id=product.id,
            supplier_id=supplier_id,
        )


class BelowMinimumQuantityError(SupplyError):
    code = "BELOW_MINIMUM_QUANTITY"
    status_code = 400

    def __init__(self, product, quantity):
        super().__init__(
            f"Quantity for {product.name} is less than minimum purchase quantity "
            f"({product.minimum_purchase_quantity})",
            product_id=product.id,
            minimum=product.minimum_purchase_quantity,
            requested=quantity,
        )
        self.minimum = product.minimum_purchase_quantity


class IllegalTransitionError(SupplyError):
    code = "ILLEGAL_TRANSITION"
    status_code = 400

    def __init__(self, order_id, current_status, requested_status, role):
        super().__init__(
            f"Order {order_id} cannot move from '{current_status}' to '{requested_status}' as {role}",
            order_id=order_id,
            current_status=current_status,
            requested_status=requested_status,
            role=role,
        )
        self.current_status = current_status
        self.requested_status = requested_status


class ForbiddenError(SupplyError):
    code = "FORBIDDEN"
    status_code = 403


class NoOrderingPartyError(SupplyError):
    code = "NO_ORDERING_PARTY"
    status_code = 409


class ImmutableRecordError(SupplyError):
    code = "IMMUTABLE_RECORD"
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(SupplyError)
    def handle_supply_error(error):
        db.session.rollback()
        logger.info("Request rejected: %s (%s)", error.message, error.code)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Database error")
        return jsonify({"message": "Database error", "code": "DATABASE_ERROR"}), 500
