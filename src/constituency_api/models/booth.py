"""Booth and BoothResult models.

Booths are created lazily by the result import the first time a
``(constituency_id, booth_no)`` pair is seen. Results are keyed on
``(booth_id, year_id)`` and overwritten in place on re-import.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from constituency_api.models.base import Base, IntegerIDMixin, TimestampMixin

if TYPE_CHECKING:
    from constituency_api.models.constituency import Constituency
    from constituency_api.models.election_year import ElectionYear


class Booth(Base, IntegerIDMixin, TimestampMixin):
    """A polling location inside a constituency."""

    __tablename__ = "booths"

    constituency_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("constituencies.id", ondelete="RESTRICT"), nullable=False
    )
    booth_no: Mapped[int] = mapped_column(Integer, nullable=False)
    village_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    constituency: Mapped["Constituency"] = relationship(back_populates="booths")
    results: Mapped[list["BoothResult"]] = relationship(back_populates="booth")

    __table_args__ = (UniqueConstraint("constituency_id", "booth_no", name="uq_booth_constituency_booth_no"),)


class BoothResult(Base, IntegerIDMixin, TimestampMixin):
    """Outcome for one booth in one election year."""

    __tablename__ = "booth_results"

    booth_id: Mapped[int] = mapped_column(Integer, ForeignKey("booths.id", ondelete="CASCADE"), nullable=False)
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("election_years.id", ondelete="RESTRICT"), nullable=False
    )
    # Stored as given; no range clamping.
    polling_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    party_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)

    booth: Mapped["Booth"] = relationship(back_populates="results")
    year: Mapped["ElectionYear"] = relationship()

    __table_args__ = (
        UniqueConstraint("booth_id", "year_id", name="uq_booth_result_booth_year"),
        Index("idx_booth_results_year_id", "year_id"),
    )
