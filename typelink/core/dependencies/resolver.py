"""Round-based resolution of type dependencies across reference documents."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from typelink.core.dependencies.tracker import DependencyTracker
from typelink.core.exceptions import (
    CircularReferenceError,
    DocumentParseError,
    FetchError,
    TypelinkError,
)
from typelink.core.models import Declaration, ResolutionStats, TypeDependency
from typelink.core.storage import DeclarationRepository
from typelink.documents.base import DocumentFetcher
from typelink.documents.models import ParsedDocument, SourceDocument, is_namespace_location
from typelink.typesystem.config import DEFAULT_MAX_ITERATIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledDependency:
    """A dependency queued for a round, with its document and discovery path."""

    dependency: TypeDependency
    uri: str
    path: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.dependency.full_name


@dataclass(frozen=True)
class ResolutionRound:
    """Snapshot of the work settled together in one round."""

    number: int
    pending: tuple[ScheduledDependency, ...]


@dataclass
class _Outcome:
    scheduled: ScheduledDependency
    parsed: ParsedDocument | None = None
    deferred: bool = False
    skipped: bool = False


class DependencyResolutionService:
    """Follows links from known declarations to the documents of the types they use.

    Work proceeds in rounds: every scheduled dependency of a round is fetched
    concurrently, results are merged into the repository, and the merged
    declarations are scanned for the next round's dependencies. Resolution
    stops when a round schedules nothing new or after ``max_iterations``
    rounds.

    Args:
        tracker: Extracts dependencies and holds the session context.
        fetcher: Loads and parses documents.
        max_iterations: Round limit.
        document_root: Directory or URL used to guess the page of a
            declaration whose source document is unknown.
    """

    def __init__(
        self,
        tracker: DependencyTracker,
        fetcher: DocumentFetcher,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        document_root: str | None = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.tracker = tracker
        self.fetcher = fetcher
        self.max_iterations = max_iterations
        self.document_root = document_root

        self.rounds: list[ResolutionRound] = []
        self._pending: dict[str, ScheduledDependency] = {}
        self._processed: set[str] = set()
        self._circular: set[str] = set()
        self._source_documents: dict[str, SourceDocument] = {}
        self._stats = ResolutionStats()

    @property
    def circular_references(self) -> set[str]:
        return set(self._circular)

    def seed_from_document(self, parsed: ParsedDocument, repository: DeclarationRepository) -> bool:
        """Start a session from an already parsed document.

        Returns:
            True if the document held a declaration.
        """
        repository.mark_visited(parsed.source)
        declaration = parsed.declaration
        if declaration is None:
            if parsed.is_namespace:
                repository.add_discovered_document_link(parsed.source)
            logger.warning("No declaration found in seed document %s", parsed.source)
            return False

        self._merge_declaration(declaration, parsed.source_document, path=())
        repository.add_declaration(declaration.full_name, declaration)
        logger.info("Seeded resolution from %s (%s)", parsed.source, declaration.full_name)
        return True

    async def resolve_all(self, repository: DeclarationRepository) -> ResolutionStats:
        """Resolve dependencies of every repository declaration until nothing new is found."""
        logger.info("Starting type dependency resolution")
        await self._discover(repository)

        while self._pending:
            if self._stats.iterations >= self.max_iterations:
                self._stats.cap_reached = True
                logger.warning(
                    "Maximum iterations (%d) reached with %d dependencies pending",
                    self.max_iterations,
                    len(self._pending),
                )
                break

            current = ResolutionRound(
                number=self._stats.iterations + 1, pending=tuple(self._pending.values())
            )
            self._pending = {}
            self.rounds.append(current)
            logger.info("Round %d: %d pending resolutions", current.number, len(current.pending))

            await self._run_round(current, repository)
            self._stats.iterations = current.number
            self._stats.max_depth = max(self._stats.max_depth, current.number)
            self.tracker.context.current_depth = current.number

            await self._discover(repository)

        logger.info("Type dependency resolution completed: %r", self._stats)
        if self._circular:
            logger.warning("Circular references detected: %s", ", ".join(sorted(self._circular)))
        return self._stats

    async def _run_round(self, current: ResolutionRound, repository: DeclarationRepository) -> None:
        results = await asyncio.gather(
            *(self._resolve(item) for item in current.pending), return_exceptions=True
        )

        for item, result in zip(current.pending, results):
            self.tracker.context.pending_types.discard(item.name)

            if isinstance(result, CircularReferenceError):
                self._record_circular(result)
            elif isinstance(result, TypelinkError):
                self._stats.unresolved_types += 1
                logger.warning("Failed to resolve %s: %s", item.name, result)
            elif isinstance(result, Exception):
                self._stats.unresolved_types += 1
                logger.warning(
                    "Unexpected error resolving %s from %s", item.name, item.uri, exc_info=result
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                self._merge_outcome(result, repository)

    async def _resolve(self, item: ScheduledDependency) -> _Outcome:
        if item.name in self._circular:
            return _Outcome(item, skipped=True)
        if item.name in item.path:
            raise CircularReferenceError(item.name, item.path)
        if is_namespace_location(item.uri):
            return _Outcome(item, deferred=True)

        logger.debug("Resolving %s from %s", item.name, item.uri)
        return _Outcome(item, parsed=await self.fetcher.fetch_and_parse(item.uri))

    def _merge_outcome(self, outcome: _Outcome, repository: DeclarationRepository) -> None:
        item = outcome.scheduled
        if outcome.skipped:
            logger.debug("Skipping circular dependency %s", item.name)
            return

        if outcome.deferred:
            repository.add_discovered_document_link(item.uri)
            self._stats.deferred_namespaces += 1
            logger.debug("Deferred namespace document %s", item.uri)
            return

        parsed = outcome.parsed
        if parsed is None or parsed.declaration is None:
            self._stats.unresolved_types += 1
            logger.warning("No declaration found in %s for %s", item.uri, item.name)
            return

        declaration = parsed.declaration
        repository.add_declaration(declaration.full_name, declaration)
        self._merge_declaration(declaration, parsed.source_document, item.path)
        self.tracker.context.visited_types.add(item.name)
        self._stats.resolved_types += 1
        logger.info("Resolved %s -> %s", item.name, declaration.full_name)

    def _merge_declaration(
        self,
        declaration: Declaration,
        document: SourceDocument | None,
        path: tuple[str, ...],
    ) -> None:
        name = declaration.full_name
        self.tracker.add_resolved_declaration(name, declaration)
        self.tracker.record_ancestry(name, path)
        if document is not None:
            self._source_documents.setdefault(name, document)

    def _record_circular(self, error: CircularReferenceError) -> None:
        if error.full_name not in self._circular:
            self._circular.add(error.full_name)
            self._stats.circular_references += 1
        logger.warning("%s", error)

    async def _discover(self, repository: DeclarationRepository) -> None:
        """Scan declarations not scanned before and schedule their dependencies."""
        for name, declaration in repository.get_all_declarations().items():
            if name in self._processed:
                continue
            self._processed.add(name)

            document = self._source_documents.get(name)
            if document is None:
                document = await self._recover_document(name)
            location = document.source if document is not None else name

            for dependency in self.tracker.extract_dependencies(declaration, document, location):
                self._schedule(dependency, name, repository)

    def _schedule(
        self, dependency: TypeDependency, parent: str, repository: DeclarationRepository
    ) -> None:
        name = dependency.full_name
        if (
            not dependency.linked_href
            or name == parent
            or name in self._circular
            or name in self._pending
            or self.tracker.is_circular(name)
        ):
            return

        path = (*self.tracker.ancestry_of(parent), parent)
        on_cycle = name in path
        if not on_cycle and (
            name in self.tracker.context.visited_types or repository.has_declaration(name)
        ):
            return

        uri = self.fetcher.resolve_uri(dependency.linked_href, dependency.source_location)
        if not on_cycle:
            if repository.is_visited(uri):
                return
            repository.mark_visited(uri)

        logger.debug("Scheduling %s (%s) from %s", name, dependency.usage_type.value, uri)
        self._pending[name] = ScheduledDependency(dependency=dependency, uri=uri, path=path)
        self.tracker.context.pending_types.add(name)

    async def _recover_document(self, name: str) -> SourceDocument | None:
        """Best-effort reload of a declaration's page so its links can be read."""
        if self.document_root is None:
            return None

        path = self.fetcher.guess_document_path(name, self.document_root)
        try:
            parsed = await self.fetcher.fetch_and_parse(path)
        except (FetchError, DocumentParseError) as e:
            logger.debug("Could not re-read %s from %s: %s", name, path, e)
            return None

        if parsed.source_document is not None:
            self._source_documents[name] = parsed.source_document
        return parsed.source_document

    async def collect_namespace_enums(self, repository: DeclarationRepository) -> int:
        """Fetch every deferred namespace document and store its enums globally.

        Returns:
            Number of enums added.
        """
        added = 0
        for path in repository.documents.discovered_in_order():
            try:
                parsed = await self.fetcher.fetch_and_parse(path)
            except (FetchError, DocumentParseError) as e:
                logger.warning("Skipping namespace document %s: %s", path, e)
                continue

            if parsed.namespace is None:
                logger.debug("No namespace found in %s", path)
                continue
            for enum in parsed.namespace.enums:
                if repository.add_global_enum(enum):
                    added += 1

        logger.info("Collected %d namespace enums", added)
        return added

    def stats(self) -> ResolutionStats:
        return self._stats

    def reset(self) -> None:
        self.rounds.clear()
        self._pending.clear()
        self._processed.clear()
        self._circular.clear()
        self._source_documents.clear()
        self._stats = ResolutionStats()
        self.tracker.reset()
