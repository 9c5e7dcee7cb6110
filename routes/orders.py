from core.imports import Blueprint, jwt_required, jsonify, request
from models.userModel import ROLE_STORE_OWNER
from routes.auth import current_actor
from services import orderLedger

orders_bp = Blueprint('orders', __name__)


def serialize_order(order):
    return {
        "order_id": order.id,
        "store_owner_id": order.store_owner_id,
        "supplier_id": order.supplier_id,
        "supplier": {
            "company_name": order.supplier.company_name,
            "email": order.supplier.email,
            "phone_number": order.supplier.phone_number,
        } if order.supplier else None,
        "store_owner": {"email": order.store_owner.email} if order.store_owner else None,
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product.name if item.product else None,
                "quantity": item.quantity,
                "price_at_order": float(item.price_at_order),
                "line_total": float(item.line_total),
            }
            for item in order.order_items
        ],
        "total_price": float(order.total_price),
        "status": order.status,
        "status_history": [
            {"status": entry.status, "timestamp": entry.timestamp.isoformat()}
            for entry in order.status_history
        ],
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


@orders_bp.route('/api/orders', methods=['POST'])
@jwt_required()
def create_order():
    """
    Create an order with one supplier
    ---
    tags:
      - Orders
    summary: Store owner places a pending order
    description: >
      Every product must belong to the given supplier and each quantity must
      reach the product's minimum purchase quantity. Unit prices are captured
      at order time.
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - supplier_id
            - items
          properties:
            supplier_id:
              type: integer
              example: 2
            items:
              type: array
              items:
                type: object
                properties:
                  product_id:
                    type: integer
                    example: 5
                  quantity:
                    type: integer
                    example: 12
    responses:
      201:
        description: Order created
      400:
        description: Empty order, foreign product or quantity below minimum
      403:
        description: Caller is not a store owner
      404:
        description: Supplier or product not found
    """
    user_id, role = current_actor()
    if role != ROLE_STORE_OWNER:
        return jsonify({"message": "Unauthorized"}), 403

    data = request.get_json(silent=True) or {}
    supplier_id = data.get('supplier_id')
    items = data.get('items') or []

    if not isinstance(supplier_id, int) or isinstance(supplier_id, bool):
        return jsonify({"message": "supplier_id is required"}), 400
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        return jsonify({"message": "items must be a list of objects"}), 400

    order = orderLedger.create_order(user_id, supplier_id, items)

    return jsonify({
        "message": "Order created successfully",
        "order": serialize_order(order)
    }), 201


@orders_bp.route('/api/orders', methods=['GET'])
@jwt_required()
def get_my_orders():
    user_id, role = current_actor()
    orders = orderLedger.list_orders_for(user_id, role)
    return jsonify({"orders": [serialize_order(o) for o in orders]}), 200


@orders_bp.route('/api/orders/<int:order_id>', methods=['GET'])
@jwt_required()
def get_order_details(order_id):
    """
    Get Order Details
    ---
    tags:
      - Orders
    summary: Retrieve an order the caller is a party to
    parameters:
      - name: order_id
        in: path
        required: true
        type: integer
        example: 1
    responses:
      200:
        description: Order details including status history
      403:
        description: Caller is neither the supplier nor the store owner
      404:
        description: Order not found
    """
    user_id, _ = current_actor()
    order = orderLedger.get_order(order_id, user_id)
    return jsonify({"order": serialize_order(order)}), 200


@orders_bp.route('/api/orders/<int:order_id>/status', methods=['PATCH'])
@jwt_required()
def update_order_status(order_id):
    """
    Update Order Status
    ---
    tags:
      - Orders
    summary: Move an order along its lifecycle
    description: >
      Suppliers approve pending orders (pending -> in-progress). Store owners
      confirm receipt of in-progress orders (in-progress -> completed), which
      credits the ordered quantities back into product stock.
    parameters:
      - name: order_id
        in: path
        required: true
        type: integer
        example: 1
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            status:
              type: string
              example: in-progress
    responses:
      200:
        description: Status updated
      400:
        description: Invalid status or transition not allowed
      403:
        description: Caller is not a party to the order
      404:
        description: Order not found
    """
    data = request.get_json(silent=True) or {}
    new_status = data.get('status')

    user_id, role = current_actor()
    order = orderLedger.transition_status(order_id, user_id, role, new_status)

    return jsonify({
        "message": "Order status updated successfully",
        "order": serialize_order(order)
    }), 200
