"""
Base adjudicator: remote classifier call with a deterministic fallback.

Every adjudicator follows the same pattern:
1. Build a prompt from the target document and its top candidates
2. Call the classifier (bounded by an optional timeout)
3. Validate the JSON verdict into an ``Ok`` or an ``Err``
4. Resolve the result into a Verdict, using the fallback for ``Err``

``adjudicate`` never raises for provider, parsing or validation failures.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..errors import AdjudicationValidationError, ProviderError
from ..providers.base import ClassifierClient
from ..schemas.document import Document
from ..schemas.verdict import SimilarityCandidate, Verdict
from .parsing import extract_json_object
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)


class BaseAdjudicator(ABC):
    """
    Abstract base class for engine-specific adjudicators.

    Subclasses implement:
    - get_system_prompt(): Classifier instructions
    - build_prompt(): User prompt for one document
    - to_verdict(): Validate decoded JSON into a Verdict
    - fallback(): Deterministic verdict used when the classifier fails
    """

    name = "adjudicator"

    def __init__(
        self,
        client: ClassifierClient,
        thresholds: Optional[TriageThresholds] = None,
    ):
        self.client = client
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    @abstractmethod
    def get_system_prompt(self) -> str:
        pass

    @abstractmethod
    def build_prompt(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> str:
        pass

    @abstractmethod
    def to_verdict(self, data: dict) -> Verdict:
        """
        Validate a decoded classifier response.

        Raises:
            AdjudicationValidationError: Missing fields, wrong types or
                out-of-enum actions
        """
        pass

    @abstractmethod
    def fallback(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> Verdict:
        pass

    def parse_output(self, raw_response: str) -> Verdict:
        """Decode and validate a raw classifier response."""
        try:
            data = extract_json_object(raw_response)
        except ValueError as e:
            raise ProviderError(f"Malformed classifier response: {e}", provider=self.name) from e
        return self.to_verdict(data)

    async def request(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
        timeout: Optional[float] = None,
    ) -> Result[Verdict]:
        """Call the classifier once and capture the outcome as a Result."""
        if timeout is not None and timeout <= 0:
            return Err(ProviderError("Deadline reached before adjudication", provider=self.name))

        system_prompt = self.get_system_prompt()
        user_prompt = self.build_prompt(target, candidates)

        try:
            call = self.client.complete(system_prompt, user_prompt)
            if timeout is None:
                raw_response = await call
            else:
                raw_response = await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError:
            return Err(ProviderError("Classifier call timed out", provider=self.name))
        except Exception as e:
            return Err(ProviderError(f"Classifier call failed: {e}", provider=self.name))

        try:
            return Ok(self.parse_output(raw_response))
        except ProviderError as e:
            return Err(e)
        except ValueError as e:
            return Err(AdjudicationValidationError(str(e)))

    def resolve(
        self,
        outcome: Result[Verdict],
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> Verdict:
        """Turn a Result into a Verdict. The only place fallback is applied."""
        if isinstance(outcome, Ok):
            return outcome.value

        logger.warning(
            f"{self.name}: falling back for #{target.id} "
            f"({outcome.error.error_kind}: {outcome.error.message})"
        )
        return self.fallback(target, candidates)

    async def adjudicate(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
        timeout: Optional[float] = None,
    ) -> Verdict:
        """
        Produce exactly one Verdict for ``target``.

        Args:
            target: Document being classified
            candidates: Ranked similarity candidates (may be empty)
            timeout: Seconds allowed for the classifier call

        Returns:
            The classifier's validated verdict, or the fallback verdict
        """
        outcome = await self.request(target, candidates, timeout)
        return self.resolve(outcome, target, candidates)
