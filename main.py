from core.imports import Flask
from core.config import Config
from core.extensions import db, jwt, swagger, cors, bcrypt, migrate
from core.errors import register_error_handlers
from core.logger import configure_logging, get_logger
from routes.auth import auth_bp, seed_demo_supplier, seed_demo_store_owner
from routes.products import products_bp, seed_products
from routes.orders import orders_bp
from routes.inventory import inventory_bp

logger = get_logger("grocery.app")


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get("LOG_LEVEL"))

    db.init_app(app)
    jwt.init_app(app)
    swagger.init_app(app)
    cors.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(inventory_bp)

    register_error_handlers(app)

    @app.route('/ping')
    def ping():
        return "Ping received", 200

    return app


def seed_demo_data(app):
    """Seed demo accounts and products; the demo store owner places auto-orders unless one is configured."""
    seed_demo_supplier()
    store_owner = seed_demo_store_owner()
    seed_products()

    if app.config.get("AUTO_ORDER_STORE_OWNER_ID") is None:
        app.config["AUTO_ORDER_STORE_OWNER_ID"] = store_owner.id
        logger.info(
            "AUTO_ORDER_STORE_OWNER_ID not set; auto-orders will be placed by demo store owner %s",
            store_owner.id,
        )
    return store_owner


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_demo_data(app)

    app.run(debug=True)
