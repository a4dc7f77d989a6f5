"""Planner configuration: category catalogue and selection limits."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CategorySpec:
    """One backend table and how much of it ends up in the response."""
    key: str                    # response field and errors-map key
    table: str                  # Airtable table name
    seed_tag: str               # suffix of the per-request shuffle seed
    hard_limit: int             # max records fetched
    pool_size: int | None       # top-K kept after scoring; None = unbounded
    pick: int                   # records returned after shuffling


LODGING = CategorySpec(
    key="alojamientos", table="Alojamientos", seed_tag="alojamientos",
    hard_limit=800, pool_size=12, pick=3,
)
DINING = CategorySpec(
    key="restaurantes", table="Restaurantes", seed_tag="restaurantes",
    hard_limit=800, pool_size=15, pick=3,
)
EXPERIENCES = CategorySpec(
    key="experiencias", table="Experiencias", seed_tag="experiencias",
    hard_limit=1200, pool_size=30, pick=6,
)
BEACHES = CategorySpec(
    key="playas", table="Playas caninas", seed_tag="playas",
    hard_limit=400, pool_size=None, pick=9,
)


@dataclass(frozen=True)
class LodgingWeights:
    family_friendly: int = 3
    eco_certified: int = 2
    accessible: int = 1
    multi_pet: int = 1
    website: int = 1
    map_link: int = 1


@dataclass(frozen=True)
class DiningWeights:
    terrace: int = 2
    website: int = 1
    map_link: int = 1


@dataclass(frozen=True)
class ExperienceWeights:
    eco_certified: int = 2
    website: int = 1
    map_link: int = 1
    outdoor: int = 1
    outdoor_tags: frozenset = frozenset({"outdoor", "hiking", "nature"})
    family_trip_types: frozenset = frozenset({"familias", "familias_naturaleza"})
    family_audience: str = "familias"


@dataclass(frozen=True)
class PlannerConfig:
    """Top-level config aggregating the category catalogue and scoring weights."""
    categories: tuple[CategorySpec, ...] = (LODGING, DINING, EXPERIENCES, BEACHES)
    lodging: LodgingWeights = field(default_factory=LodgingWeights)
    dining: DiningWeights = field(default_factory=DiningWeights)
    experiences: ExperienceWeights = field(default_factory=ExperienceWeights)

    def category(self, key: str) -> CategorySpec:
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(key)


# Shared instance
planner_config = PlannerConfig()
