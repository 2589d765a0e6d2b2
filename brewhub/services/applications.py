from datetime import datetime
import logging

from models import db
from models.profile import Profile
from models.vendor import Vendor
from brewhub.auth import Role

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    status_code = 400


class ProfileNotFound(ApplicationError):
    status_code = 404


PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


def submit_application(profile: Profile, business_name: str, description: str, category: str) -> Profile:
    if Role.parse(profile.role) is Role.VENDOR or profile.vendor_application_status:
        raise ApplicationError("You have already applied to become a vendor")
    if not (business_name or "").strip() or not (description or "").strip() or not (category or "").strip():
        raise ApplicationError("Business name, description and category are required")
    profile.business_name = business_name.strip()
    profile.business_description = description.strip()
    profile.business_category = category.strip()
    profile.vendor_application_status = PENDING
    profile.applied_at = datetime.utcnow()
    logger.info("vendor application submitted by %s", profile.user_id)
    return profile


def pending_applications():
    return (
        Profile.query.filter_by(vendor_application_status=PENDING)
        .order_by(Profile.applied_at.desc())
        .all()
    )


def _pending_profile(user_id) -> Profile:
    profile = db.session.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFound("Profile not found")
    if profile.vendor_application_status != PENDING:
        raise ApplicationError("Application is not pending")
    return profile


def approve_application(user_id) -> Vendor:
    """Promote the applicant to vendor and open their storefront (offline)."""
    profile = _pending_profile(user_id)
    profile.vendor_application_status = APPROVED
    profile.role = Role.VENDOR.value
    vendor = Vendor.query.filter_by(owner_id=profile.user_id).first()
    if vendor is None:
        vendor = Vendor(
            owner_id=profile.user_id,
            name=profile.business_name,
            description=profile.business_description,
            category=profile.business_category,
            is_active=False,
        )
        db.session.add(vendor)
    db.session.flush()
    logger.info("vendor application approved for %s (vendor %s)", profile.user_id, vendor.id)
    return vendor


def reject_application(user_id) -> Profile:
    profile = _pending_profile(user_id)
    profile.vendor_application_status = REJECTED
    profile.role = Role.CUSTOMER.value
    logger.info("vendor application rejected for %s", profile.user_id)
    return profile


def change_role(user_id, role) -> Profile:
    profile = db.session.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFound("Profile not found")
    profile.role = Role.parse(role).value
    return profile


__all__ = [
    "ApplicationError",
    "ProfileNotFound",
    "approve_application",
    "change_role",
    "pending_applications",
    "reject_application",
    "submit_application",
]
