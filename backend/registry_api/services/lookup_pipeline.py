"""
Match stages for domain lookups.

Stages run in a fixed order (exact, wildcard, category) and share one
SearchBudget. A stage only runs while the budget still has room, so a
lookup whose exact mappings already fill ``max_results`` never queries
wildcard patterns.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Sequence

from registry_api.db.store import RegistryStore
from registry_api.schemas.lookup import LookupQuery
from registry_api.services.domain_matcher import EXACT_CONFIDENCE, matches_wildcard, wildcard_confidence

logger = logging.getLogger(__name__)

# Columns every stage hands to the enricher
_SERVER_COLUMNS = """
      s.server_id,
      s.name,
      s.description,
      s.version,
      s.deployment_type,
      s.trust_level,
      s.popularity_score,
      s.install_count,
      s.last_updated,
      s.categories,
      dm.priority,
      dm.auto_suggest"""

EXACT_MATCH_SQL = f"""
    SELECT{_SERVER_COLUMNS}
    FROM servers s
    JOIN domain_mappings dm ON s.server_id = dm.server_id
    WHERE
      dm.domain_pattern = :domain
      AND dm.match_type = 'exact'
      AND s.trust_level IN :trust_levels
      AND s.deployment_type IN :deployment_types
    ORDER BY
      dm.priority ASC,
      s.popularity_score DESC
"""

# Patterns are not filtered in SQL; the LIMIT applies to candidate rows before the glob test
WILDCARD_CANDIDATES_SQL = f"""
    SELECT{_SERVER_COLUMNS},
      dm.domain_pattern
    FROM servers s
    JOIN domain_mappings dm ON s.server_id = dm.server_id
    WHERE
      dm.match_type = 'wildcard'
      AND s.trust_level IN :trust_levels
      AND s.deployment_type IN :deployment_types
    ORDER BY
      dm.priority ASC,
      s.popularity_score DESC
    LIMIT :limit
"""


@dataclass
class MatchCandidate:
    """A server row that matched the requested domain, before enrichment."""
    row: Dict[str, Any]
    match_type: str
    confidence: int

    @property
    def server_id(self) -> str:
        return self.row["server_id"]


@dataclass
class SearchBudget:
    """Results collected so far, and how many more the lookup may take."""
    max_results: int
    collected: List[MatchCandidate] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return self.max_results - len(self.collected)


MatchStage = Callable[[RegistryStore, LookupQuery, SearchBudget], Awaitable[List[MatchCandidate]]]


def _filter_params(query: LookupQuery) -> Dict[str, Any]:
    return {
        "trust_levels": list(query.trust_levels),
        "deployment_types": list(query.deployment_types),
    }


async def exact_stage(store: RegistryStore, query: LookupQuery, budget: SearchBudget) -> List[MatchCandidate]:
    """Mappings whose pattern equals the domain. Always scored 100."""
    params = {"domain": query.domain, **_filter_params(query)}
    rows = await store.query_all(EXACT_MATCH_SQL, params)
    return [MatchCandidate(row=row, match_type="exact", confidence=EXACT_CONFIDENCE) for row in rows]


async def wildcard_stage(store: RegistryStore, query: LookupQuery, budget: SearchBudget) -> List[MatchCandidate]:
    """
    Wildcard mappings whose pattern globs the domain.

    Only ``budget.remaining`` candidate rows are fetched, and rows whose
    pattern does not match are dropped afterwards, so this stage can return
    fewer matches than the budget even when more matching patterns exist
    further down the ordering.
    """
    params = {**_filter_params(query), "limit": budget.remaining}
    rows = await store.query_all(WILDCARD_CANDIDATES_SQL, params)

    matches = []
    for row in rows:
        pattern = row["domain_pattern"]
        if not matches_wildcard(query.domain, pattern):
            continue
        matches.append(
            MatchCandidate(
                row=row,
                match_type="wildcard",
                confidence=wildcard_confidence(query.domain, pattern),
            )
        )

    logger.debug(
        f"Wildcard stage for {query.domain}: {len(matches)} of {len(rows)} candidate patterns matched"
    )
    return matches


async def category_stage(store: RegistryStore, query: LookupQuery, budget: SearchBudget) -> List[MatchCandidate]:
    """Category matches. There is no domain-to-category data yet, so this never matches."""
    return []


MATCH_STAGES: Sequence[MatchStage] = (exact_stage, wildcard_stage, category_stage)


async def run_match_stages(
    store: RegistryStore,
    query: LookupQuery,
    stages: Sequence[MatchStage] = MATCH_STAGES,
) -> List[MatchCandidate]:
    """
    Run each stage in order until the budget is exhausted.

    Returns candidates in stage order (exact before wildcard before category),
    truncated to ``query.max_results``.
    """
    budget = SearchBudget(max_results=query.max_results)

    for stage in stages:
        if budget.remaining <= 0:
            logger.debug(f"Budget exhausted, skipping {stage.__name__} for {query.domain}")
            continue
        budget.collected.extend(await stage(store, query, budget))

    return budget.collected[: query.max_results]
