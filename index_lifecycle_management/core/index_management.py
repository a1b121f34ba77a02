"""Index listing extension point.

Other plugins add enrichers that decorate the index list with their own
data. Enrichers run in registration order; each receives the output of
the previous one.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .cluster import ClusterCaller

logger = logging.getLogger(__name__)

Index = Dict[str, Any]
Enricher = Callable[[List[Index], ClusterCaller], Awaitable[List[Index]]]


class IndexDataEnricher:
    """Registry of index data enrichers."""

    def __init__(self):
        self._enrichers: List[Enricher] = []

    def add(self, enricher: Enricher) -> None:
        """Register an enricher."""
        self._enrichers.append(enricher)
        logger.debug(f"Added index data enricher {getattr(enricher, '__name__', enricher)}")

    @property
    def enrichers(self) -> List[Enricher]:
        return list(self._enrichers)

    async def enrich_indices(self, indices: List[Index], caller: ClusterCaller) -> List[Index]:
        """
        Run every enricher over the index list.

        Args:
            indices: Index descriptors
            caller: Cluster caller scoped to the current user

        Returns:
            The enriched index list
        """
        for enricher in self._enrichers:
            indices = await enricher(indices, caller)
        return indices


@dataclass
class IndexManagementSetup:
    """What the index management plugin exposes to other plugins."""
    index_data_enricher: Optional[IndexDataEnricher] = field(default_factory=IndexDataEnricher)


def _to_index(row: dict) -> Index:
    """Map a ``_cat/indices`` row to an index descriptor."""
    return {
        "name": row.get("index"),
        "uuid": row.get("uuid"),
        "health": row.get("health"),
        "status": row.get("status"),
        "primary": row.get("pri"),
        "replica": row.get("rep"),
        "documents": row.get("docs.count"),
        "size": row.get("store.size"),
    }


async def fetch_indices(
    caller: ClusterCaller,
    index_data_enricher: Optional[IndexDataEnricher] = None,
) -> List[Index]:
    """
    List indices and run the registered enrichers over them.

    Args:
        caller: Cluster caller scoped to the current user
        index_data_enricher: Enricher registry, skipped when None

    Returns:
        Sorted list of (enriched) index descriptors
    """
    rows = await caller("GET", "/_cat/indices", params={"format": "json", "expand_wildcards": "all"})
    indices = sorted((_to_index(row) for row in rows), key=lambda index: index["name"] or "")

    if index_data_enricher is None:
        return indices
    return await index_data_enricher.enrich_indices(indices, caller)
