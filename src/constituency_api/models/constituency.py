"""Constituency model — an electoral district."""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from constituency_api.models.base import Base, IntegerIDMixin, TimestampMixin

if TYPE_CHECKING:
    from constituency_api.models.booth import Booth


class Constituency(Base, IntegerIDMixin, TimestampMixin):
    """An electoral district that booths belong to."""

    __tablename__ = "constituencies"

    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    booths: Mapped[list["Booth"]] = relationship(back_populates="constituency")
