from core.imports import Blueprint, jsonify, request, create_access_token, jwt_required, get_jwt_identity, get_jwt, func, IntegrityError
from core.extensions import db, bcrypt
from core.logger import get_logger
from models.userModel import Users, ROLE_SUPPLIER, ROLE_STORE_OWNER

auth_bp = Blueprint('auth', __name__)

logger = get_logger("grocery.auth")

SUPPLIER_FIELDS = ("company_name", "phone_number", "representative_name")


def current_actor():
    """(user id, role) of the authenticated caller, as issued at login."""
    return int(get_jwt_identity()), get_jwt().get("role")


def serialize_user(user):
    data = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }
    if user.is_supplier:
        data.update({field: getattr(user, field) for field in SUPPLIER_FIELDS})
    return data


def _seed_user(email, role, **fields):
    user = Users.query.filter_by(email=email).first()
    if user:
        logger.info("Demo %s already exists (%s)", role, email)
        return user

    raw_password = "password123"  # demo login password
    user = Users(
        email=email,
        password=bcrypt.generate_password_hash(raw_password).decode('utf-8'),
        role=role,
        **fields
    )
    db.session.add(user)
    db.session.commit()
    logger.info("Demo %s created (email=%s)", role, email)
    return user


def seed_demo_supplier():
    return _seed_user(
        "demo@supplier.com",
        ROLE_SUPPLIER,
        company_name="Demo Wholesale",
        phone_number="08012345678",
        representative_name="John Doe",
    )


def seed_demo_store_owner():
    return _seed_user("demo@storeowner.com", ROLE_STORE_OWNER)


def _register(role):
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or "").strip().lower()
    password = data.get('password')

    if not email or not password:
        return jsonify({"message": "Email and password are required"}), 400

    extra = {}
    if role == ROLE_SUPPLIER:
        extra = {field: (data.get(field) or "").strip() for field in SUPPLIER_FIELDS}
        missing = [field for field, value in extra.items() if not value]
        if missing:
            return jsonify({"message": f"Missing required fields: {', '.join(missing)}"}), 400

    if Users.query.filter(func.lower(Users.email) == email).first():
        return jsonify({"message": "Account with this email already exists"}), 409

    user = Users(
        email=email,
        password=bcrypt.generate_password_hash(password).decode('utf-8'),
        role=role,
        **extra
    )
    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": "Account with this email already exists"}), 409

    logger.info("Registered %s account %s", role, user.id)
    token = create_access_token(identity=str(user.id), additional_claims={"role": role})
    return jsonify({
        "message": "Registration successful",
        "access_token": token,
        "user": serialize_user(user)
    }), 201


@auth_bp.route('/api/auth/register/supplier', methods=['POST'])
def register_supplier():
    """
    Register a supplier account
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password, company_name, phone_number, representative_name]
          properties:
            email: { type: string, example: "sales@freshfarms.com" }
            password: { type: string, example: "secret123" }
            company_name: { type: string, example: "Fresh Farms Ltd" }
            phone_number: { type: string, example: "0501234567" }
            representative_name: { type: string, example: "Dana Levi" }
    responses:
      201:
        description: Supplier registered, token issued
      400:
        description: Missing fields
      409:
        description: Email already registered
    """
    return _register(ROLE_SUPPLIER)


@auth_bp.route('/api/auth/register/store-owner', methods=['POST'])
def register_store_owner():
    """
    Register a store owner account
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string, example: "owner@corner-grocery.com" }
            password: { type: string, example: "secret123" }
    responses:
      201:
        description: Store owner registered, token issued
      409:
        description: Email already registered
    """
    return _register(ROLE_STORE_OWNER)


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or "").strip().lower()
    password = data.get('password')

    if not email or not password:
        return jsonify({"message": "Email and password are required"}), 400

    user = Users.query.filter(func.lower(Users.email) == email).first()

    if not user or not bcrypt.check_password_hash(user.password, password):
        return jsonify({"message": "Invalid credentials"}), 401

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role}
    )

    return jsonify({
        "message": "Login successful",
        "access_token": access_token,
        "user": serialize_user(user)
    }), 200


@auth_bp.route('/api/auth/me', methods=['GET'])
@jwt_required()
def me():
    user_id, _ = current_actor()
    user = db.session.get(Users, user_id)
    if not user:
        return jsonify({"message": "User not found"}), 404
    return jsonify({"user": serialize_user(user)}), 200
