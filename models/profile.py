from models import db
from datetime import datetime


class Profile(db.Model):
    __tablename__ = "profiles"

    # Subject of the external auth provider's token
    user_id = db.Column(db.String(64), primary_key=True)
    full_name = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="customer")

    # Vendor application (null until the user applies)
    vendor_application_status = db.Column(db.String(20), nullable=True)  # pending, approved, rejected
    business_name = db.Column(db.String(100), nullable=True)
    business_description = db.Column(db.Text, nullable=True)
    business_category = db.Column(db.String(50), nullable=True)
    applied_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Profile user_id={self.user_id} role={self.role}>"

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "vendor_application_status": self.vendor_application_status,
            "business_name": self.business_name,
            "business_category": self.business_category,
            "created_at": self.created_at,
        }

    def application_dict(self):
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "business_name": self.business_name,
            "business_description": self.business_description,
            "business_category": self.business_category,
            "status": self.vendor_application_status,
            "applied_at": self.applied_at,
        }
