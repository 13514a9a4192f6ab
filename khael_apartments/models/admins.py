"""SQLAlchemy model for dashboard administrators."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from khael_apartments.models.base import Base


class AdminUser(Base):
    """
    ORM model for admin credentials.

    ``password`` holds a salted bcrypt hash, never the plain text. One admin is
    provisioned at first startup; there is no HTTP flow for creating more.
    """

    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
