"""One-call resolution session used by the CLI and the MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from typelink.core.dependencies.resolver import DependencyResolutionService
from typelink.core.dependencies.tracker import DependencyTracker
from typelink.core.models import ResolutionStats
from typelink.core.storage import DeclarationRepository
from typelink.documents.service import DocumentParsingService
from typelink.typesystem import ResolverSettings, TypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Repository contents and statistics of a finished session."""

    repository: DeclarationRepository
    stats: ResolutionStats
    circular_references: set[str]
    namespace_enums: int = 0

    def to_dict(self) -> dict[str, object]:
        declarations = self.repository.get_all_declarations()
        return {
            "stats": self.stats.to_dict(),
            "repository": self.repository.get_stats(),
            "declarations": sorted(declarations),
            "circular_references": sorted(self.circular_references),
            "global_enums": sorted(self.repository.get_global_enums()),
            "namespace_enums_added": self.namespace_enums,
        }


async def resolve_document(
    document: str,
    settings: ResolverSettings | None = None,
    registry: TypeRegistry | None = None,
    collect_enums: bool = True,
    fetcher: DocumentParsingService | None = None,
) -> SessionResult:
    """Parse ``document``, follow its type links, and optionally gather namespace enums.

    Fetch and parse failures of the seed document propagate; failures of
    followed documents are counted in the returned statistics.
    """
    settings = settings or ResolverSettings()
    repository = DeclarationRepository()
    tracker = DependencyTracker(
        registry=registry,
        primary_namespace=settings.primary_namespace,
        max_depth=settings.max_iterations,
    )

    async with fetcher or DocumentParsingService() as service:
        resolver = DependencyResolutionService(
            tracker,
            service,
            max_iterations=settings.max_iterations,
            document_root=settings.document_root,
        )
        seed = await service.fetch_and_parse(document)
        resolver.seed_from_document(seed, repository)
        stats = await resolver.resolve_all(repository)

        namespace_enums = 0
        if collect_enums:
            namespace_enums = await resolver.collect_namespace_enums(repository)

    return SessionResult(
        repository=repository,
        stats=stats,
        circular_references=resolver.circular_references,
        namespace_enums=namespace_enums,
    )
