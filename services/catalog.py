"""
Catalog store: product lookups, supplier-initiated edits and stock corrections.
"""
from core.extensions import db
from core.errors import NotFoundError, ForbiddenError, ValidationError
from core.logger import get_logger
from models.productModels import Products
from models.userModel import Users, ROLE_SUPPLIER, ROLE_STORE_OWNER
from services.pricing import parse_price, parse_count

logger = get_logger("grocery.catalog")

EDITABLE_FIELDS = ("name", "price_per_item", "minimum_purchase_quantity", "minimum_stock_threshold")


def find_product(product_id, lock=False):
    product = db.session.get(Products, product_id, with_for_update=lock or None)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def save_product(product, commit=True):
    db.session.add(product)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return product


def find_products_by_supplier(supplier_id):
    return Products.query.filter_by(supplier_id=supplier_id).order_by(Products.id).all()


def list_products():
    return Products.query.order_by(Products.id).all()


def _clean_name(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required", field="name")
    return name.strip()


def create_product(supplier_id, data):
    supplier = db.session.get(Users, supplier_id)
    if not supplier or supplier.role != ROLE_SUPPLIER:
        raise NotFoundError("Supplier", supplier_id)

    product = Products(
        name=_clean_name(data.get("name")),
        price_per_item=parse_price(data.get("price_per_item")),
        minimum_purchase_quantity=parse_count(
            data.get("minimum_purchase_quantity"), "minimum_purchase_quantity", minimum=1, default=1
        ),
        supplier_id=supplier.id,
        current_stock=parse_count(data.get("current_stock"), "current_stock", default=0),
        minimum_stock_threshold=parse_count(
            data.get("minimum_stock_threshold"), "minimum_stock_threshold", default=0
        ),
    )
    save_product(product)
    logger.info("Supplier %s added product %s (%s)", supplier.id, product.id, product.name)
    return product


def update_product(product_id, supplier_id, data):
    """
    Apply a supplier's edit to one of their products.

    Orders already placed keep the unit price they captured; only new
    orders see the edited price.
    """
    product = find_product(product_id)
    if product.supplier_id != supplier_id:
        raise ForbiddenError(
            "Not authorized to update this product", product_id=product_id, user_id=supplier_id
        )

    unknown = set(data) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(
            f"Fields cannot be edited: {', '.join(sorted(unknown))}", fields=sorted(unknown)
        )

    if "name" in data:
        product.name = _clean_name(data["name"])
    if "price_per_item" in data:
        product.price_per_item = parse_price(data["price_per_item"])
    if "minimum_purchase_quantity" in data:
        product.minimum_purchase_quantity = parse_count(
            data["minimum_purchase_quantity"], "minimum_purchase_quantity", minimum=1
        )
    if "minimum_stock_threshold" in data:
        product.minimum_stock_threshold = parse_count(
            data["minimum_stock_threshold"], "minimum_stock_threshold"
        )

    save_product(product)
    logger.info("Supplier %s edited product %s", supplier_id, product.id)
    return product


def set_stock(product_id, user_id, role, stock):
    """Manual stock correction: suppliers for their own products, store owners for any."""
    if role not in (ROLE_SUPPLIER, ROLE_STORE_OWNER):
        raise ForbiddenError("Unknown role", role=role)

    product = find_product(product_id, lock=True)
    if role == ROLE_SUPPLIER and product.supplier_id != user_id:
        raise ForbiddenError(
            "Not authorized to update this product", product_id=product_id, user_id=user_id
        )

    product.current_stock = parse_count(stock, "current_stock")
    save_product(product)
    logger.info("Stock of product %s set to %s by %s %s", product.id, product.current_stock, role, user_id)
    return product


def inventory_status():
    products = list_products()
    low_stock = [p for p in products if p.is_low_stock]
    in_stock = [p for p in products if not p.is_low_stock]
    return {
        "total_products": len(products),
        "low_stock": low_stock,
        "in_stock": in_stock,
    }
