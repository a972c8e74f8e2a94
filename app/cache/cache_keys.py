"""Cache key construction for the cached entities.

Pattern: {prefix}:{entity}:{id} for single rows and {prefix}:{entity}:all for
the active-entity list of a type.
"""

from dataclasses import dataclass

ALL = "all"


@dataclass
class CacheKeys:
    prefix: str

    def entity(self, entity: str, entity_id: str) -> str:
        return f"{self.prefix}:{entity}:{entity_id}"

    def all(self, entity: str) -> str:
        return f"{self.prefix}:{entity}:{ALL}"
