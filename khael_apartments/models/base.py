from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every table in the listing store inherits from this base so a single
    ``Base.metadata`` drives ``create_all`` at startup and Alembic autogenerate.
    """

    pass
