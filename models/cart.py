from models import db
from datetime import datetime


class CartSnapshot(db.Model):
    """Serialized cart, one row per storage key."""

    __tablename__ = "cart_snapshot"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False)
    payload = db.Column(db.Text, nullable=False, default="[]")
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
