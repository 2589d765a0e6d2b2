from brewhub.routes import (
    public_bp,
    me_bp,
    customer_bp,
    vendor_bp,
    admin_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(public_bp)
    app.register_blueprint(me_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(vendor_bp)
    app.register_blueprint(admin_bp)
