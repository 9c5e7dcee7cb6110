from core.extensions import db
from core.imports import datetime


class Products(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("price_per_item >= 0", name="ck_products_price_non_negative"),
        db.CheckConstraint("minimum_purchase_quantity >= 1", name="ck_products_min_qty_positive"),
        db.CheckConstraint("current_stock >= 0", name="ck_products_stock_non_negative"),
        db.CheckConstraint("minimum_stock_threshold >= 0", name="ck_products_threshold_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    price_per_item = db.Column(db.Numeric(10, 2), nullable=False)
    minimum_purchase_quantity = db.Column(db.Integer, nullable=False, default=1)

    supplier_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    supplier = db.relationship('Users', backref='products_offered')

    current_stock = db.Column(db.Integer, nullable=False, default=0)
    minimum_stock_threshold = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_low_stock(self):
        return self.current_stock < self.minimum_stock_threshold
