import os
from decimal import Decimal
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("make-admin")
@click.argument("user_id")
@with_appcontext
def make_admin(user_id):
    """Grant the admin role to an existing profile."""
    from brewhub.services.applications import change_role
    from brewhub.utils.db import transactional

    with transactional("Failed to grant admin"):
        profile = change_role(user_id, "admin")
    click.echo(f"{profile.user_id} is now {profile.role}.")


@click.command("seed-demo")
@with_appcontext
def seed_demo():
    """Create a demo vendor with a small menu for local development."""
    from models import db
    from models.profile import Profile
    from models.vendor import Vendor
    from models.product import Category, Product
    from brewhub.utils.db import transactional

    with transactional("Failed to seed demo data"):
        owner = db.session.get(Profile, "demo-vendor") or Profile(
            user_id="demo-vendor", full_name="Demo Brewer", role="vendor"
        )
        db.session.add(owner)
        if not Category.query.filter_by(name="brewery").first():
            db.session.add(Category(name="brewery", description="Craft beer and pub food"))
        vendor = Vendor.query.filter_by(owner_id=owner.user_id).first()
        if vendor is None:
            vendor = Vendor(
                owner_id=owner.user_id,
                name="Demo Taproom",
                category="brewery",
                delivery_fee=Decimal("3.00"),
                min_order=Decimal("15.00"),
                delivery_time="30-45 min",
            )
            db.session.add(vendor)
            db.session.flush()
            db.session.add_all([
                Product(vendor_id=vendor.id, name="Pale Ale 4-pack", price=Decimal("12.00"), category="beer"),
                Product(vendor_id=vendor.id, name="Pretzel", price=Decimal("5.00"), category="snacks"),
            ])
    click.echo(f"Demo vendor {vendor.id} ready.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(make_admin)
    app.cli.add_command(seed_demo)
