from models import db, BIGINT
from datetime import datetime


class Favorite(db.Model):
    __tablename__ = "favorites"
    __table_args__ = (
        db.UniqueConstraint("user_id", "vendor_id", name="uq_favorite_user_vendor"),
    )

    id = db.Column(BIGINT, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey("profiles.user_id"), nullable=False)
    vendor_id = db.Column(BIGINT, db.ForeignKey("vendors.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    vendor = db.relationship("Vendor")
