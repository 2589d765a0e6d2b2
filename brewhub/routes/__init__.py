from .public import public_bp
from .me import me_bp
from .customer import customer_bp
from .vendor import vendor_bp
from .admin import admin_bp


__all__ = [
    'public_bp',
    'me_bp',
    'customer_bp',
    'vendor_bp',
    'admin_bp',
]
