"""SQLAlchemy base metadata and model registration utilities."""

from importlib import import_module

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


def import_orm_models() -> None:
    """Import ORM models so metadata is fully populated."""

    modules = (
        "mykahfi_portal.db.models.learner",
        "mykahfi_portal.db.models.payment_transaction",
        "mykahfi_portal.db.models.user_message",
        "mykahfi_portal.db.models.admin_contact",
        "mykahfi_portal.db.models.notification_log",
        "mykahfi_portal.db.models.user_device",
    )
    for module_name in modules:
        import_module(module_name)
