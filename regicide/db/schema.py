"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board_fen: Mapped[str]
    current_player: Mapped[str]
    status: Mapped[str]
    selected_square: Mapped[Optional[str]]
    captured_pieces: Mapped[dict[str, list[str]]] = mapped_column(JSON)
    move_history: Mapped[list[dict[str, Optional[str]]]] = mapped_column(
        JSON, default=list
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
