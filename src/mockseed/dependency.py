"""Creation ordering over singular-reference dependencies."""

import logging
import random
from collections.abc import Sequence

from mockseed.models import EntityDescriptor

logger = logging.getLogger(__name__)


class DependencyOrderer:
    """
    Order entity types so that referenced types are created first.

    Cycles are tolerated: once no remaining type is dependency-free, the rest is
    appended in an order chosen by the injected random source.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    @staticmethod
    def dependencies(entities: Sequence[EntityDescriptor]) -> dict[str, set[str]]:
        """
        Map each entity name to the other input entities it references.

        Self-references and targets outside the input are ignored.
        """
        names = {e.name for e in entities}
        return {
            e.name: {t for t in e.singular_targets if t in names and t != e.name}
            for e in entities
        }

    def order(self, entities: Sequence[EntityDescriptor]) -> list[EntityDescriptor]:
        """
        Peel dependency-free types round by round (Kahn's algorithm).

        Args:
            entities: Entity types in catalog order

        Returns:
            Every input type exactly once; for acyclic dependencies a type comes
            after everything it references.
        """
        deps = self.dependencies(entities)
        remaining = list(entities)
        remaining_names = {e.name for e in remaining}
        result: list[EntityDescriptor] = []

        while remaining:
            free = [e for e in remaining if not (deps[e.name] & remaining_names)]

            if not free:
                cyclic = list(remaining)
                self.rng.shuffle(cyclic)
                logger.warning(
                    f"Dependency cycle among {sorted(remaining_names)}; "
                    f"appending in order {[e.name for e in cyclic]}"
                )
                result.extend(cyclic)
                break

            result.extend(free)
            for e in free:
                remaining_names.discard(e.name)
            remaining = [e for e in remaining if e.name in remaining_names]

        return result
