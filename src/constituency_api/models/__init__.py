"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from constituency_api.models.booth import Booth, BoothResult
from constituency_api.models.constituency import Constituency
from constituency_api.models.election_year import ElectionYear

__all__ = [
    "Booth",
    "BoothResult",
    "Constituency",
    "ElectionYear",
]
