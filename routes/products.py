from core.imports import Blueprint, request, jsonify, jwt_required
from core.logger import get_logger
from models.productModels import Products
from models.userModel import Users, ROLE_SUPPLIER
from routes.auth import current_actor
from services import catalog

products_bp = Blueprint('products', __name__)

logger = get_logger("grocery.routes.products")


def serialize_product(product):
    supplier = product.supplier
    return {
        "product_id": product.id,
        "name": product.name,
        "price_per_item": float(product.price_per_item),
        "minimum_purchase_quantity": product.minimum_purchase_quantity,
        "current_stock": product.current_stock,
        "minimum_stock_threshold": product.minimum_stock_threshold,
        "supplier": {
            "id": supplier.id,
            "company_name": supplier.company_name,
            "email": supplier.email,
            "phone_number": supplier.phone_number,
        } if supplier else None,
        "created_at": product.created_at.isoformat() if product.created_at else None,
    }


def seed_products():
    supplier = Users.query.filter_by(email="demo@supplier.com").first()
    if not supplier:
        logger.warning("No demo supplier found. Run seed_demo_supplier() first.")
        return

    sample_products = [
        {"name": "Whole Milk 1L", "price_per_item": "5.90", "minimum_purchase_quantity": 12,
         "current_stock": 40, "minimum_stock_threshold": 20},
        {"name": "Sourdough Bread", "price_per_item": "12.50", "minimum_purchase_quantity": 5,
         "current_stock": 15, "minimum_stock_threshold": 10},
        {"name": "Free Range Eggs (12)", "price_per_item": "18.00", "minimum_purchase_quantity": 6,
         "current_stock": 8, "minimum_stock_threshold": 12},
    ]

    for data in sample_products:
        if Products.query.filter_by(supplier_id=supplier.id, name=data["name"]).first():
            logger.info("Product already exists: %s", data["name"])
            continue
        catalog.create_product(supplier.id, data)


@products_bp.route('/api/supplier/products', methods=['POST'])
@jwt_required()
def add_product():
    """
    Supplier: add a product to the catalog
    ---
    tags:
      - Products
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, price_per_item]
          properties:
            name: { type: string, example: "Whole Milk 1L" }
            price_per_item: { type: number, example: 5.9 }
            minimum_purchase_quantity: { type: integer, example: 12 }
            current_stock: { type: integer, example: 40 }
            minimum_stock_threshold: { type: integer, example: 20 }
    responses:
      201:
        description: Product added
      400:
        description: Missing or negative fields
      403:
        description: Caller is not a supplier
    """
    user_id, role = current_actor()
    if role != ROLE_SUPPLIER:
        return jsonify({"message": "Unauthorized"}), 403

    product = catalog.create_product(user_id, request.get_json(silent=True) or {})
    return jsonify({
        "message": "Product added successfully",
        "product": serialize_product(product)
    }), 201


@products_bp.route('/api/supplier/products', methods=['GET'])
@jwt_required()
def get_my_products():
    user_id, role = current_actor()
    if role != ROLE_SUPPLIER:
        return jsonify({"message": "Unauthorized"}), 403

    products = catalog.find_products_by_supplier(user_id)
    return jsonify({
        "products": [serialize_product(p) for p in products],
        "count": len(products)
    }), 200


@products_bp.route('/api/supplier/products/<int:product_id>', methods=['PATCH'])
@jwt_required()
def edit_product(product_id):
    """
    Supplier: edit one of their products
    ---
    tags:
      - Products
    description: >
      Price edits only affect orders created afterwards; existing orders keep
      the unit price captured when they were placed.
    parameters:
      - name: product_id
        in: path
        required: true
        type: integer
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
            price_per_item: { type: number }
            minimum_purchase_quantity: { type: integer }
            minimum_stock_threshold: { type: integer }
    responses:
      200:
        description: Product updated
      403:
        description: Product belongs to another supplier
      404:
        description: Product not found
    """
    user_id, role = current_actor()
    if role != ROLE_SUPPLIER:
        return jsonify({"message": "Unauthorized"}), 403

    product = catalog.update_product(product_id, user_id, request.get_json(silent=True) or {})
    return jsonify({
        "message": "Product updated successfully",
        "product": serialize_product(product)
    }), 200


@products_bp.route('/api/products', methods=['GET'])
@jwt_required()
def get_all_products():
    products = catalog.list_products()
    return jsonify({"products": [serialize_product(p) for p in products]}), 200


@products_bp.route('/api/products/<int:product_id>', methods=['GET'])
@jwt_required()
def get_product(product_id):
    product = catalog.find_product(product_id)
    return jsonify({"product": serialize_product(product)}), 200


@products_bp.route('/api/suppliers/<int:supplier_id>/products', methods=['GET'])
@jwt_required()
def get_supplier_products(supplier_id):
    products = catalog.find_products_by_supplier(supplier_id)
    return jsonify({"products": [serialize_product(p) for p in products]}), 200


@products_bp.route('/api/products/<int:product_id>/stock', methods=['PATCH'])
@jwt_required()
def update_product_stock(product_id):
    user_id, role = current_actor()
    data = request.get_json(silent=True) or {}

    product = catalog.set_stock(product_id, user_id, role, data.get("current_stock"))
    return jsonify({
        "message": "Product stock updated successfully",
        "product": serialize_product(product)
    }), 200
