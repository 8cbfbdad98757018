from sqlalchemy import Column, DateTime, String, func

from database import Base


class EmailSubscription(Base):
    __tablename__ = "email_subscriptions"

    # Normalized (trimmed, lower-cased) address
    email = Column(String(320), primary_key=True, index=True)
    name = Column(String(120), nullable=True)
    subscribed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
