from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .profile import Profile  # noqa: F401,E402
from .vendor import Vendor  # noqa: F401,E402
from .product import Product, Category  # noqa: F401,E402
from .order import Order, OrderItem, OrderStatusLog  # noqa: F401,E402
from .cart import CartSnapshot  # noqa: F401,E402
from .favorite import Favorite  # noqa: F401,E402
