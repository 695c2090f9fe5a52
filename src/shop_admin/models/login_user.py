"""Shop account model holding the loyalty points balance."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from ..core.database import Base


class LoginUser(Base):
    """Represents a signed-in shop customer."""

    __tablename__ = "login_users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="login_users_points_positive"),
    )

    user_id = Column(String, primary_key=True)
    username = Column(String)
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
