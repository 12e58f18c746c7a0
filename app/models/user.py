"""
User Model
Accounts of people taking part in interventions
"""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


# Account roles as stored by the platform
ROLE_TENANT = "locataire"
ROLE_PROVIDER = "prestataire"
ROLE_MANAGER = "gestionnaire"
ROLE_ADMIN = "admin"


class User(Base):
    """
    Platform account.

    Only the fields the availability matcher needs are mapped here; the
    account itself is owned by the authentication layer.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    role = Column(String(20), nullable=False, index=True)  # locataire, prestataire, gestionnaire, admin

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def matching_role(self):
        """Role used by the matching engine: 'tenant', 'provider' or None."""
        if self.role == ROLE_TENANT:
            return "tenant"
        if self.role == ROLE_PROVIDER:
            return "provider"
        return None

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"
