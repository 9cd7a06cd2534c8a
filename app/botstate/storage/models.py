from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserState(Base):
    __tablename__ = "user_states"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    current_state: Mapped[str] = mapped_column(String(255), default="", server_default="")
    state_with_callback: Mapped[str] = mapped_column(String(255), default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class UserField(Base):
    """Произвольное строковое поле пользователя (key -> value)."""
    __tablename__ = "user_fields"
    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_user_field_key"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("user_states.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
