"""ElectionYear model — reference year a set of booth results belongs to."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from constituency_api.models.base import Base, IntegerIDMixin


class ElectionYear(Base, IntegerIDMixin):
    """A reference year. Created by an admin; the result import only looks it up.

    Attributes:
        year: Calendar year of the election. Unique.
        created_at: When the record was created.
    """

    __tablename__ = "election_years"

    year: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
