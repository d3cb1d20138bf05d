"""Base factory configuration for polyfactory."""

from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from src.taskflow.models.base import utc_now

__all__ = ["BaseFactory", "short_id", "utc_now"]


def short_id() -> str:
    """Eight hex characters for unique emails, slugs and keys."""
    return uuid4().hex[-8:]


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Relationships and foreign keys are never generated; tests set FK
    values explicitly.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False
