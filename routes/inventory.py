from core.imports import Blueprint, jsonify, request, jwt_required, current_app
from models.userModel import ROLE_STORE_OWNER
from routes.auth import current_actor
from routes.orders import serialize_order
from routes.products import serialize_product
from services import catalog, replenishment

inventory_bp = Blueprint('inventory', __name__)


@inventory_bp.route('/api/inventory/purchase', methods=['POST'])
def process_purchase():
    """
    Cash register feed
    ---
    tags:
      - Inventory
    summary: Record sold items and trigger automatic reorders
    description: >
      Decrements stock for each sold product (never below zero; unknown
      products are skipped). Products that fall under their reorder threshold
      are reordered automatically, one pending order per supplier, placed by
      the configured auto-order store owner.
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            items:
              type: array
              items:
                type: object
                properties:
                  product_id:
                    type: integer
                    example: 3
                  quantity:
                    type: integer
                    example: 2
    responses:
      200:
        description: Purchase processed
      400:
        description: Invalid purchase data
      409:
        description: No store owner configured to place automatic orders
    """
    data = request.get_json(silent=True) or {}
    result = replenishment.record_purchase(
        data.get("items"),
        current_app.config.get("AUTO_ORDER_STORE_OWNER_ID"),
    )

    return jsonify({
        "message": "Purchase processed successfully",
        "updated_products": [serialize_product(p) for p in result.updated_products],
        "auto_orders": [serialize_order(o) for o in result.auto_orders]
    }), 200


@inventory_bp.route('/api/inventory/status', methods=['GET'])
@jwt_required()
def get_inventory_status():
    _, role = current_actor()
    if role != ROLE_STORE_OWNER:
        return jsonify({"message": "Unauthorized"}), 403

    status = catalog.inventory_status()
    return jsonify({
        "total_products": status["total_products"],
        "low_stock": [serialize_product(p) for p in status["low_stock"]],
        "in_stock": [serialize_product(p) for p in status["in_stock"]]
    }), 200
