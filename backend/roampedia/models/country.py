import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from roampedia.database import Base


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    country: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    code: Mapped[str | None] = mapped_column(String(3), index=True)
    capital: Mapped[str | None] = mapped_column(String(150))
    currency: Mapped[str | None] = mapped_column(String(100))
    vibe_tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), default=list)
    activity_tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), default=list)
    region: Mapped[str | None] = mapped_column(String(50), index=True)
    subregion: Mapped[str | None] = mapped_column(String(100))
    climate: Mapped[str | None] = mapped_column(String(50))
    best_season: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String(500))
    flag_url: Mapped[str | None] = mapped_column(String(500))
    popularity_score: Mapped[int] = mapped_column(Integer, default=0)
    budget_level: Mapped[str | None] = mapped_column(String(20))
    languages: Mapped[list[str] | None] = mapped_column(ARRAY(String(50)))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
