from core.extensions import db
from core.imports import datetime, event
from core.errors import ImmutableRecordError
from sqlalchemy.orm import validates

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
# enumerated but not reachable through any transition yet
STATUS_CANCELLED = "cancelled"

ORDER_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("total_price >= 0", name="ck_orders_total_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    store_owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)  # pending, in-progress, completed, cancelled
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    order_items = db.relationship(
        "OrderItem", backref="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )
    status_history = db.relationship(
        "OrderStatusHistory", backref="order", cascade="all", order_by="OrderStatusHistory.id"
    )
    store_owner = db.relationship("Users", foreign_keys=[store_owner_id])
    supplier = db.relationship("Users", foreign_keys=[supplier_id])

    @validates("total_price")
    def validate_total_price(self, key, value):
        if self.total_price is not None and value != self.total_price:
            raise ImmutableRecordError(
                f"Total price of order {self.id} cannot change once computed",
                order_id=self.id,
            )
        return value

    def record_status(self, status, at=None):
        """Set the current status and append the matching history entry."""
        at = at or datetime.utcnow()
        self.status = status
        self.updated_at = at
        self.status_history.append(OrderStatusHistory(status=status, timestamp=at))


class OrderItem(db.Model):
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price_at_order = db.Column(db.Numeric(10, 2), nullable=False)  # unit price snapshot

    product = db.relationship("Products")

    @property
    def line_total(self):
        return self.price_at_order * self.quantity


class OrderStatusHistory(db.Model):
    __tablename__ = "order_status_history"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


@event.listens_for(OrderStatusHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise ImmutableRecordError(
        f"Status history entry {target.id} is append-only", history_id=target.id
    )


@event.listens_for(OrderStatusHistory, "before_delete")
def _reject_history_delete(mapper, connection, target):
    raise ImmutableRecordError(
        f"Status history entry {target.id} is append-only", history_id=target.id
    )
