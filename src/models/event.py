from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import AwareDateTime, Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[datetime] = mapped_column(AwareDateTime(), nullable=False)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    timezone: Mapped[str] = mapped_column(String(50), default="UTC")
    # short code printed on invitations, e.g. "RAO-WED-26"
    event_code: Mapped[str | None] = mapped_column(String(50), nullable=True, unique=True)

    def __repr__(self) -> str:
        return f"<Event {self.name} on {self.date}>"
