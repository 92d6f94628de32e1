# usbest/models/profile.py
from sqlalchemy import Column, String, DateTime, Uuid, func

from usbest.db.base_class import Base


# profiles.id is the identity provider's user id (auth.users.id on Supabase)
class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
