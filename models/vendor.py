from models import db, BIGINT
from datetime import datetime


class Vendor(db.Model):
    __tablename__ = "vendors"

    id = db.Column(BIGINT, primary_key=True)
    owner_id = db.Column(db.String(64), db.ForeignKey("profiles.user_id"), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)

    # Checkout terms
    delivery_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    min_order = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    delivery_time = db.Column(db.String(50), nullable=True)       # e.g. "30-45 min"
    rating = db.Column(db.Float, nullable=True)
    is_active = db.Column(db.Boolean, default=True)               # online / offline

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship("Profile", backref=db.backref("vendor", uselist=False))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "image_url": self.image_url,
            "delivery_fee": float(self.delivery_fee or 0),
            "min_order": float(self.min_order or 0),
            "delivery_time": self.delivery_time,
            "rating": self.rating,
            "is_active": bool(self.is_active),
        }
