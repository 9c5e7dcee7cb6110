from core.extensions import db
from core.imports import datetime

ROLE_SUPPLIER = "supplier"
ROLE_STORE_OWNER = "storeOwner"
ROLES = (ROLE_SUPPLIER, ROLE_STORE_OWNER)


class Users(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(100), unique=True, nullable=False, index=True)
    password = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(20), nullable=False, index=True)  # 'supplier', 'storeOwner'

    # supplier-only fields
    company_name = db.Column(db.String(150), nullable=True)
    phone_number = db.Column(db.String(20), nullable=True)
    representative_name = db.Column(db.String(150), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_supplier(self):
        return self.role == ROLE_SUPPLIER

    @property
    def is_store_owner(self):
        return self.role == ROLE_STORE_OWNER
