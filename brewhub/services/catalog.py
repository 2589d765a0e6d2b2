from decimal import Decimal
import logging

from sqlalchemy import or_

from models import db
from models.favorite import Favorite
from models.product import Category, Product
from models.vendor import Vendor

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    status_code = 400


class CatalogNotFound(CatalogError):
    status_code = 404


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def active_vendors(category=None, query=None):
    q = Vendor.query.filter_by(is_active=True)
    if category:
        q = q.filter(Vendor.category == category)
    if query:
        pattern = _like(query)
        q = q.filter(or_(
            Vendor.name.ilike(pattern, escape="\\"),
            Vendor.description.ilike(pattern, escape="\\"),
            Vendor.category.ilike(pattern, escape="\\"),
        ))
    return q.order_by(Vendor.name).all()


def search_products(query):
    pattern = _like(query)
    return (
        Product.query.join(Vendor)
        .filter(Product.is_available.is_(True), Vendor.is_active.is_(True))
        .filter(or_(
            Product.name.ilike(pattern, escape="\\"),
            Product.description.ilike(pattern, escape="\\"),
            Product.category.ilike(pattern, escape="\\"),
        ))
        .order_by(Product.name)
        .limit(50)
        .all()
    )


def get_vendor(vendor_id) -> Vendor:
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None:
        raise CatalogNotFound("Vendor not found")
    return vendor


def available_products(vendor_id):
    return (
        Product.query.filter_by(vendor_id=vendor_id, is_available=True)
        .order_by(Product.name)
        .all()
    )


def vendor_for_owner(user_id) -> Vendor:
    vendor = Vendor.query.filter_by(owner_id=user_id).first()
    if vendor is None:
        raise CatalogNotFound("Vendor not found")
    return vendor


def add_product(vendor: Vendor, name, price, description=None, category=None, image_url=None) -> Product:
    product = Product(
        vendor_id=vendor.id,
        name=name,
        price=Decimal(str(price)),
        description=description,
        category=category,
        image_url=image_url,
        is_available=True,
    )
    db.session.add(product)
    db.session.flush()
    return product


def toggle_product_availability(vendor: Vendor, product_id) -> Product:
    product = db.session.get(Product, product_id)
    if product is None or product.vendor_id != vendor.id:
        raise CatalogNotFound("Product not found")
    product.is_available = not product.is_available
    return product


def set_vendor_online(vendor: Vendor, online: bool) -> Vendor:
    vendor.is_active = bool(online)
    logger.info("vendor %s is now %s", vendor.id, "online" if online else "offline")
    return vendor


def update_vendor_terms(vendor: Vendor, delivery_fee=None, min_order=None, delivery_time=None) -> Vendor:
    if delivery_fee is not None:
        vendor.delivery_fee = Decimal(str(delivery_fee))
    if min_order is not None:
        vendor.min_order = Decimal(str(min_order))
    if delivery_time is not None:
        vendor.delivery_time = delivery_time
    return vendor


def active_categories():
    return Category.query.filter_by(is_active=True).order_by(Category.name).all()


def all_categories():
    return Category.query.order_by(Category.name).all()


def create_category(name, description=None, image_url=None) -> Category:
    name = (name or "").strip()
    if not name:
        raise CatalogError("Category name is required")
    if Category.query.filter_by(name=name).first():
        raise CatalogError("Category already exists")
    category = Category(name=name, description=description, image_url=image_url, is_active=True)
    db.session.add(category)
    db.session.flush()
    return category


def toggle_category(category_id) -> Category:
    category = db.session.get(Category, category_id)
    if category is None:
        raise CatalogNotFound("Category not found")
    category.is_active = not category.is_active
    return category


def list_favorites(user_id):
    return (
        Favorite.query.filter_by(user_id=user_id)
        .order_by(Favorite.created_at.desc())
        .all()
    )


def add_favorite(user_id, vendor_id) -> Favorite:
    get_vendor(vendor_id)
    favorite = Favorite.query.filter_by(user_id=user_id, vendor_id=vendor_id).first()
    if favorite is None:
        favorite = Favorite(user_id=user_id, vendor_id=vendor_id)
        db.session.add(favorite)
    return favorite


def remove_favorite(user_id, vendor_id) -> bool:
    deleted = Favorite.query.filter_by(user_id=user_id, vendor_id=vendor_id).delete()
    return bool(deleted)
