from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Numeric
from sqlalchemy.sql import func
from models import db, BIGINT


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_vendor_status", "vendor_id", "status"),
        db.Index("ix_orders_user_created", "user_id", "created_at"),
    )
    id = Column(BIGINT, primary_key=True)
    user_id = Column(String(64), ForeignKey("profiles.user_id"), nullable=False)
    vendor_id = Column(BIGINT, ForeignKey("vendors.id"), nullable=False)
    # items subtotal + delivery fee, fixed at checkout
    total_amount = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, preparing, ready, delivered, cancelled
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, paid, failed
    payment_method = Column(String(30), nullable=False, default="cash_on_delivery")
    payment_reference = Column(String(64), nullable=True)
    delivery_address = Column(Text, nullable=False)
    phone = Column(String(30), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    vendor = db.relationship("Vendor", backref="orders", lazy=True)
    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)

    def to_dict(self, include_items=True):
        data = {
            "order_id": self.id,
            "user_id": self.user_id,
            "vendor_id": self.vendor_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "payment_method": self.payment_method,
            "payment_reference": self.payment_reference,
            "total_amount": float(self.total_amount),
            "delivery_fee": float(self.delivery_fee),
            "delivery_address": self.delivery_address,
            "phone": self.phone,
            "notes": self.notes,
            "created_at": self.created_at,
        }
        if include_items:
            data["items"] = [oi.to_dict() for oi in self.items]
        return data


class OrderItem(db.Model):
    __tablename__ = "order_items"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(BIGINT, db.ForeignKey("orders.id"), nullable=False)
    product_id = db.Column(BIGINT, db.ForeignKey("products.id"), nullable=False)
    name = db.Column(db.String(100))
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": float(self.unit_price),
            "total_price": float(self.total_price),
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("orders.id"), nullable=False)
    field = Column(String(20), nullable=False, default="status")  # status or payment_status
    old_value = Column(String(20), nullable=True)
    new_value = Column(String(20), nullable=False)
    updated_by = Column(String(64), nullable=False)
    timestamp = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "updated_by": self.updated_by,
            "timestamp": self.timestamp,
        }
