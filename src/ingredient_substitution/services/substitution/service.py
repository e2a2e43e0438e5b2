"""Substitution service: catalog-first lookup with LLM fallback generation.

Provides methods for:
- Resolving substitutes for an ingredient in a recipe
- Rewriting a recipe step after a swap
- Explaining why a substitute fits

Every public method returns a usable result. Store and model failures are
logged (and counted, for generation) and degrade to an empty list, the
unchanged step, or a fixed sentinel string.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from ingredient_substitution.core.config import Settings, get_settings
from ingredient_substitution.llm.exceptions import LLMError
from ingredient_substitution.llm.parsing import (
    extract_string_field,
    parse_json_object,
    parse_substitute_candidates,
)
from ingredient_substitution.llm.prompts import (
    StepRewritePrompt,
    SubstituteGenerationPrompt,
    SubstitutionExplanationPrompt,
    build_few_shot_examples,
)
from ingredient_substitution.llm.selection import ModelSelector
from ingredient_substitution.observability.logging import (
    bind_context,
    get_logger,
    unbind_context,
)
from ingredient_substitution.observability.metrics import SubstitutionMetrics
from ingredient_substitution.schemas import (
    ResolvedSubstitute,
    StepRewrite,
    SubstitutionCandidate,
    SubstitutionLogEntry,
    SubstitutionResult,
    SubstitutionSource,
)
from ingredient_substitution.services.substitution.constants import (
    EXPLANATION_UNAVAILABLE,
)
from ingredient_substitution.services.substitution.exceptions import (
    CatalogUnavailableError,
)
from ingredient_substitution.vocabulary.matcher import FuzzyMatcher, strip_parentheticals


if TYPE_CHECKING:
    from ingredient_substitution.database.repositories.protocol import (
        IngredientCatalog,
        SubstitutionLogStore,
    )
    from ingredient_substitution.llm.client.protocol import LLMClientProtocol
    from ingredient_substitution.vocabulary.cache import VocabularyCache

logger = get_logger(__name__)


class SubstitutionService:
    """Service resolving ingredient substitutes.

    Orchestrates:
    1. Vocabulary snapshot and fuzzy matching of the requested ingredient
    2. Stored substitute lists from the catalog (always preferred)
    3. LLM generation when the catalog has no list, reconciled against
       the vocabulary
    4. Enrichment with per-ingredient metadata
    """

    def __init__(
        self,
        vocabulary: VocabularyCache,
        catalog: IngredientCatalog,
        llm_client: LLMClientProtocol,
        *,
        log_store: SubstitutionLogStore | None = None,
        metrics: SubstitutionMetrics | None = None,
        model_selector: ModelSelector | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            vocabulary: Cached ingredient vocabulary.
            catalog: Store holding per-ingredient substitute lists.
            llm_client: Client for the generative model endpoint.
            log_store: Optional store of accepted substitutions for few-shot
                examples.
            metrics: Optional metrics sink; a private one is created if omitted.
            model_selector: Optional generation model selector; built from
                settings if omitted.
            settings: Optional settings; the cached global settings otherwise.
        """
        self._settings = settings or get_settings()
        self._vocabulary = vocabulary
        self._catalog = catalog
        self._llm_client = llm_client
        self._log_store = log_store
        self._metrics = metrics or SubstitutionMetrics(
            enabled=self._settings.observability.metrics.enabled
        )
        self._model_selector = model_selector or ModelSelector(
            self._settings.llm.generation.models
        )
        self.matcher = FuzzyMatcher(
            vocabulary,
            threshold=self._settings.matching.threshold,
            max_substitutes=self._settings.matching.max_substitutes,
        )
        self._generation_prompt = SubstituteGenerationPrompt()
        self._rewrite_prompt = StepRewritePrompt()
        self._explanation_prompt = SubstitutionExplanationPrompt()

    @property
    def metrics(self) -> SubstitutionMetrics:
        return self._metrics

    async def initialize(self) -> None:
        """Warm the vocabulary so the first request does not pay for it."""
        await self._vocabulary.ensure_loaded()
        logger.info(
            "SubstitutionService initialized",
            vocabulary_size=len(self._vocabulary),
            generation_models=self._model_selector.model_ids,
        )

    async def shutdown(self) -> None:
        """Cleanup service resources."""
        logger.info("SubstitutionService shutdown")

    # =========================================================================
    # Substitute Resolution
    # =========================================================================

    async def get_substitutes(
        self,
        ingredient: str,
        recipe_context: str,
    ) -> SubstitutionResult:
        """Resolve substitutes for an ingredient used in a recipe.

        Args:
            ingredient: Free-text ingredient name.
            recipe_context: Recipe text the ingredient appears in.

        Returns:
            SubstitutionResult. ``ingredient`` is None when the input matches
            nothing in the vocabulary; ``substitutes`` may be empty.
        """
        await self._vocabulary.ensure_loaded()

        matched = self.matcher.find_closest_match(ingredient)
        if matched is None:
            logger.info("Ingredient not in vocabulary", ingredient=ingredient)
            return SubstitutionResult.unknown()

        try:
            stored = await self._fetch_stored_substitutes(matched)
        except CatalogUnavailableError:
            logger.exception(
                "Catalog lookup failed, falling back to generation",
                ingredient=matched,
            )
            stored = []

        if stored:
            substitutes = [
                ResolvedSubstitute.from_entry(name, self._vocabulary.get_entry(name))
                for name in stored[: self._settings.matching.max_substitutes]
            ]
            logger.debug(
                "Using catalog substitutes", ingredient=matched, count=len(substitutes)
            )
            return SubstitutionResult(
                ingredient=matched,
                substitutes=substitutes,
                source=SubstitutionSource.CATALOG,
            )

        candidates = await self.generate_substitutes(matched, recipe_context)
        substitutes = self._reconcile_generated(matched, candidates)

        logger.info(
            "Resolved generated substitutes",
            ingredient=matched,
            generated=len(candidates),
            matched=len(substitutes),
        )
        return SubstitutionResult(
            ingredient=matched,
            substitutes=substitutes,
            source=SubstitutionSource.GENERATED,
        )

    def _reconcile_generated(
        self,
        original: str,
        candidates: list[SubstitutionCandidate],
    ) -> list[ResolvedSubstitute]:
        """Map generated names onto the vocabulary and attach their ratios."""
        cleaned = [(strip_parentheticals(c.name), c.ratio) for c in candidates]

        ratio_by_name: dict[str, float] = {}
        for name, ratio in cleaned:
            ratio_by_name[name.lower()] = ratio

        matches = self.matcher.match_substitutes(name for name, _ in cleaned)

        resolved: list[ResolvedSubstitute] = []
        for name in matches:
            if name.lower() == original.lower():
                continue

            ratio = ratio_by_name.get(name.lower())
            if ratio is None:
                # Matched via a differently spelled candidate
                ratio = next(
                    (
                        r
                        for candidate, r in cleaned
                        if self.matcher.find_closest_match(candidate) == name
                    ),
                    None,
                )

            resolved.append(
                ResolvedSubstitute.from_entry(
                    name, self._vocabulary.get_entry(name), quantity=ratio
                )
            )

        return resolved

    async def _fetch_stored_substitutes(self, canonical_name: str) -> list[str]:
        try:
            return await self._catalog.get_substitutes(canonical_name)
        except Exception as e:
            msg = f"Catalog lookup failed: {e}"
            raise CatalogUnavailableError(msg, ingredient=canonical_name, cause=e) from e

    async def _fetch_few_shot_logs(self) -> list[SubstitutionLogEntry]:
        if self._log_store is None:
            return []
        try:
            return await self._log_store.get_picked_logs()
        except Exception as e:
            msg = f"Substitution log lookup failed: {e}"
            raise CatalogUnavailableError(msg, cause=e) from e

    # =========================================================================
    # Generation
    # =========================================================================

    async def generate_substitutes(
        self,
        ingredient: str,
        recipe_context: str,
    ) -> list[SubstitutionCandidate]:
        """Ask the model for substitutes, retrying failed attempts.

        Network errors, empty or unparseable replies and unexpected client
        errors all count as a failed attempt. The ingredient and model are
        bound to the logging context for the duration of the call.

        After the last attempt, or when the overall deadline passes, an empty
        list is returned and the error counter is bumped once for the request.

        Args:
            ingredient: Canonical ingredient name.
            recipe_context: Recipe text the ingredient appears in.

        Returns:
            Candidates with a name and a positive ratio; empty on failure.
        """
        model = self._model_selector.select()
        bind_context(ingredient=ingredient, model=model)
        try:
            return await self._generate_with_retries(ingredient, recipe_context, model)
        finally:
            unbind_context("ingredient", "model")

    async def _generate_with_retries(
        self,
        ingredient: str,
        recipe_context: str,
        model: str,
    ) -> list[SubstitutionCandidate]:
        policy = self._settings.llm.generation
        started = time.perf_counter()

        try:
            logs = await self._fetch_few_shot_logs()
        except CatalogUnavailableError:
            logger.exception("Few-shot examples unavailable", ingredient=ingredient)
            logs = []

        prompt = self._generation_prompt.format(
            ingredient=ingredient,
            recipe=recipe_context,
            few_shot=build_few_shot_examples(
                logs,
                max_examples=self._settings.prompts.few_shot_examples,
                recipe_chars=self._settings.prompts.recipe_context_chars,
            ),
        )

        try:
            async with asyncio.timeout(policy.deadline_seconds):
                for attempt in range(1, policy.max_attempts + 1):
                    attempt_started = time.perf_counter()
                    try:
                        candidates = await self._attempt_generation(prompt, model)
                    except LLMError as e:
                        logger.warning(
                            "Substitute generation attempt failed",
                            ingredient=ingredient,
                            model=model,
                            attempt=attempt,
                            max_attempts=policy.max_attempts,
                            error_type=type(e).__name__,
                            error=str(e),
                        )
                        if attempt < policy.max_attempts:
                            await asyncio.sleep(policy.retry_delay_seconds)
                        continue
                    except Exception:
                        logger.exception(
                            "Unexpected error during substitute generation attempt",
                            ingredient=ingredient,
                            model=model,
                            attempt=attempt,
                            max_attempts=policy.max_attempts,
                        )
                        if attempt < policy.max_attempts:
                            await asyncio.sleep(policy.retry_delay_seconds)
                        continue

                    finished = time.perf_counter()
                    self._metrics.set_request_latency(
                        model, (finished - attempt_started) * 1000
                    )
                    self._metrics.observe_generation(model, finished - started)
                    logger.info(
                        "Generated substitutes",
                        ingredient=ingredient,
                        model=model,
                        attempt=attempt,
                        count=len(candidates),
                    )
                    return candidates
        except TimeoutError:
            logger.warning(
                "Substitute generation deadline exceeded",
                ingredient=ingredient,
                model=model,
                deadline_seconds=policy.deadline_seconds,
            )

        self._metrics.observe_generation(model, time.perf_counter() - started)
        self._metrics.record_failure(model)
        logger.error(
            "Substitute generation gave up",
            ingredient=ingredient,
            model=model,
        )
        return []

    async def _attempt_generation(
        self,
        prompt: str,
        model: str,
    ) -> list[SubstitutionCandidate]:
        """One model call plus parsing; raises LLMError on any failure."""
        result = await self._llm_client.complete(
            prompt,
            model=model,
            temperature=self._settings.llm.generation.temperature,
        )

        parsed = parse_json_object(result.raw_response)
        if parsed.ok:
            logger.debug("Parsed generation response", model=model, stage=parsed.stage)
        else:
            logger.debug(
                "Unparseable generation response",
                model=model,
                reason=parsed.reason,
                raw_response=result.raw_response[:500],
            )

        return parse_substitute_candidates(parsed.unwrap())

    # =========================================================================
    # Step Rewrite
    # =========================================================================

    async def rewrite_step(
        self,
        original_step: str,
        original_ingredient: str,
        substitute_ingredient: str,
        locale: str = "en",
    ) -> StepRewrite:
        """Rewrite an instruction step for a substituted ingredient.

        Single attempt. Any failure yields an empty title and the original
        step as description.
        """
        fallback = StepRewrite(title="", description=original_step)

        prompt = self._rewrite_prompt.format(
            original_step=original_step,
            original_ingredient=original_ingredient,
            substitute_ingredient=substitute_ingredient,
            locale=locale,
        )

        try:
            result = await self._llm_client.complete(
                prompt,
                model=self._settings.llm.rewrite_model,
                temperature=self._rewrite_prompt.temperature,
            )
        except LLMError as e:
            logger.warning(
                "Step rewrite failed",
                original=original_ingredient,
                substitute=substitute_ingredient,
                error_type=type(e).__name__,
                error=str(e),
            )
            return fallback
        except Exception:
            logger.exception(
                "Unexpected error during step rewrite",
                original=original_ingredient,
                substitute=substitute_ingredient,
            )
            return fallback

        raw = result.raw_response
        parsed = parse_json_object(raw)
        if parsed.ok:
            title = parsed.data.get("title")
            description = parsed.data.get("description")
        else:
            logger.warning(
                "Step rewrite response is not JSON, recovering fields",
                reason=parsed.reason,
                raw_response=raw[:500],
            )
            title = extract_string_field(raw, "title")
            description = extract_string_field(raw, "description")

        title = title.strip() if isinstance(title, str) else ""
        description = description.strip() if isinstance(description, str) else ""

        return StepRewrite(title=title, description=description or original_step)

    # =========================================================================
    # Explanation
    # =========================================================================

    async def explain_substitution(
        self,
        original: str,
        substitute: str,
        recipe_context: str,
    ) -> str:
        """Generate a short explanation of why substitute replaces original.

        Single attempt; returns a fixed sentinel on any failure.
        """
        prompt = self._explanation_prompt.format(
            original=original,
            substitute=substitute,
            recipe_context=recipe_context,
        )

        try:
            result = await self._llm_client.complete(
                prompt,
                model=self._settings.llm.explanation_model,
                temperature=self._explanation_prompt.temperature,
            )
        except LLMError as e:
            logger.warning(
                "Explanation generation failed",
                original=original,
                substitute=substitute,
                error_type=type(e).__name__,
                error=str(e),
            )
            return EXPLANATION_UNAVAILABLE
        except Exception:
            logger.exception(
                "Unexpected error during explanation generation",
                original=original,
                substitute=substitute,
            )
            return EXPLANATION_UNAVAILABLE

        return result.raw_response.strip() or EXPLANATION_UNAVAILABLE
