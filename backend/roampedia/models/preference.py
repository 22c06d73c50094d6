import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from roampedia.database import Base


class UserPreference(Base):
    __tablename__ = "user_preferences"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    preferred_vibes: Mapped[list] = mapped_column(JSONB, default=list)
    preferred_activities: Mapped[list] = mapped_column(JSONB, default=list)
    # [{"country_name", "timestamp"}]
    liked_countries: Mapped[list] = mapped_column(JSONB, default=list)
    disliked_countries: Mapped[list] = mapped_column(JSONB, default=list)
    # [{"country_name", "liked", "tags", "timestamp"}], most recent last
    feedback_history: Mapped[list] = mapped_column(JSONB, default=list)
    preferred_regions: Mapped[list] = mapped_column(JSONB, default=list)
    budget_preference: Mapped[str | None] = mapped_column(String(20))
    last_query: Mapped[dict | None] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
