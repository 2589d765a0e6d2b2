from models import db, BIGINT
from datetime import datetime


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "is_active": bool(self.is_active),
        }


class Product(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_vendor_available", "vendor_id", "is_available"),
    )

    id = db.Column(BIGINT, primary_key=True)
    vendor_id = db.Column(BIGINT, db.ForeignKey("vendors.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    is_available = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = db.relationship("Vendor", backref="products")

    def to_dict(self):
        return {
            "id": self.id,
            "vendor_id": self.vendor_id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "category": self.category,
            "image_url": self.image_url,
            "is_available": bool(self.is_available),
        }
