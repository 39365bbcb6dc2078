"""
Request/response entry point: ``analyze(owner, repo) -> AnalysisReport``.

Fatal problems (bad input, unauthorized or failed corpus fetch) raise a
``FatalInputError`` before any document is analyzed. Per-document problems
never escape the engines.
"""

import logging
import re
from typing import Optional

from ..adjudication.duplicate import DuplicateAdjudicator
from ..adjudication.quality import QualityAdjudicator
from ..config.settings import Settings, get_settings
from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..errors import CorpusFetchError, FatalInputError, TriageError
from ..observability.tracing import get_tracer
from ..providers.base import ClassifierClient, CorpusLoader, EmbeddingProvider
from ..schemas.document import Document, DocumentKind
from ..schemas.report import AnalysisReport, EngineKind
from ..utils.parallel import Deadline
from .base import BaseEngine
from .duplicate import DuplicateEngine
from .quality import QualityEngine

logger = logging.getLogger(__name__)


# GitHub owner and repository names
NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_repository(owner: Optional[str], repo: Optional[str]) -> tuple[str, str]:
    """
    Check owner/repo before any I/O.

    Raises:
        FatalInputError: Missing or malformed owner or repo
    """
    if not owner or not repo:
        raise FatalInputError("Missing required fields: owner, repo", status_code=400)

    owner, repo = owner.strip(), repo.strip()
    for label, value in (("owner", owner), ("repo", repo)):
        if not NAME_PATTERN.match(value) or value in (".", ".."):
            raise FatalInputError(f"Invalid {label}: {value!r}", status_code=400)
    return owner, repo


class TriageService:
    """
    Wires the corpus loader to the duplicate and quality engines.

    The duplicate engine analyzes issues only unless
    ``duplicates_include_pull_requests`` is set; the quality engine
    analyzes issues and pull requests.
    """

    def __init__(
        self,
        loader: CorpusLoader,
        duplicate_engine: DuplicateEngine,
        quality_engine: QualityEngine,
        deadline_seconds: Optional[float] = None,
        duplicates_include_pull_requests: bool = False,
    ):
        self.loader = loader
        self.engines: dict[EngineKind, BaseEngine] = {
            EngineKind.DUPLICATE: duplicate_engine,
            EngineKind.QUALITY: quality_engine,
        }
        self.deadline_seconds = deadline_seconds
        self.duplicates_include_pull_requests = duplicates_include_pull_requests

    async def _load(self, owner: str, repo: str) -> list[Document]:
        try:
            return list(await self.loader.list_open_items(owner, repo))
        except TriageError:
            raise
        except Exception as e:
            raise CorpusFetchError(f"Failed to load {owner}/{repo}: {e}") from e

    def _select(self, engine: EngineKind, documents: list[Document]) -> list[Document]:
        if engine == EngineKind.DUPLICATE and not self.duplicates_include_pull_requests:
            return [doc for doc in documents if doc.kind == DocumentKind.ISSUE]
        return documents

    async def analyze(
        self,
        owner: str,
        repo: str,
        engine: EngineKind = EngineKind.DUPLICATE,
        deadline_seconds: Optional[float] = None,
    ) -> AnalysisReport:
        """
        Run one analysis over the open items of ``owner/repo``.

        Args:
            owner: Repository owner
            repo: Repository name
            engine: Which analysis to run
            deadline_seconds: Overrides the service deadline for this run

        Returns:
            AnalysisReport with ranked results, action records and summary

        Raises:
            FatalInputError: Bad input, unauthorized, or corpus fetch failure
        """
        tracer = get_tracer()
        owner, repo = validate_repository(owner, repo)

        with tracer.span(f"{engine.value}_analysis", owner=owner, repo=repo):
            try:
                documents = self._select(engine, await self._load(owner, repo))
            except FatalInputError as e:
                tracer.log_error(e, {"owner": owner, "repo": repo, "engine": engine.value})
                raise

            logger.info(
                f"Starting {engine.value} analysis on {owner}/{repo} "
                f"({len(documents)} documents)"
            )

            seconds = deadline_seconds if deadline_seconds is not None else self.deadline_seconds
            run = await self.engines[engine].run(documents, Deadline(seconds))

        report = AnalysisReport(
            engine=engine,
            owner=owner,
            repo=repo,
            results=run.results,
            actions=run.actions,
            summary=run.summary,
        )
        tracer.log_run_summary(engine.value, owner, repo, run.summary.model_dump())
        logger.info(report.message)
        return report

    async def analyze_duplicates(self, owner: str, repo: str, **kwargs) -> AnalysisReport:
        return await self.analyze(owner, repo, EngineKind.DUPLICATE, **kwargs)

    async def analyze_quality(self, owner: str, repo: str, **kwargs) -> AnalysisReport:
        return await self.analyze(owner, repo, EngineKind.QUALITY, **kwargs)


def build_service(
    settings: Optional[Settings] = None,
    loader: Optional[CorpusLoader] = None,
    embedder: Optional[EmbeddingProvider] = None,
    classifier: Optional[ClassifierClient] = None,
    thresholds: Optional[TriageThresholds] = None,
) -> TriageService:
    """
    Build a TriageService from settings, defaulting to the GitHub, OpenAI and
    LangChain providers for any collaborator not supplied.
    """
    from ..providers.classifier import LangChainClassifier
    from ..providers.embeddings import OpenAIEmbeddingProvider
    from ..providers.github import GitHubCorpusLoader

    settings = settings or get_settings()
    thresholds = thresholds or DEFAULT_THRESHOLDS
    loader = loader or GitHubCorpusLoader(
        token=settings.github_token,
        base_url=settings.github_api_url,
    )
    embedder = embedder or OpenAIEmbeddingProvider(model=settings.embedding_model())
    classifier = classifier or LangChainClassifier()

    duplicate_engine = DuplicateEngine(
        adjudicator=DuplicateAdjudicator(classifier, thresholds),
        embedder=embedder,
        thresholds=thresholds,
        embedding_max_concurrent=settings.embedding_max_concurrent,
        adjudication_max_concurrent=settings.adjudication_max_concurrent,
        min_interval=settings.duplicate_min_interval,
    )
    quality_engine = QualityEngine(
        adjudicator=QualityAdjudicator(classifier, thresholds),
        thresholds=thresholds,
        adjudication_max_concurrent=settings.adjudication_max_concurrent,
        min_interval=settings.quality_min_interval,
    )
    return TriageService(
        loader=loader,
        duplicate_engine=duplicate_engine,
        quality_engine=quality_engine,
        deadline_seconds=settings.analysis_deadline_seconds,
    )
