from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from famtime.core.config import settings
from famtime.services.llm_provider import RefinementTransport
from famtime.services.providers.errors import MissingCredentialsError, RefinementTransportError
from famtime.services.suggestions.composer import ComposedSuggestion, compose_suggestion
from famtime.services.suggestions.examples import pick_mood_examples
from famtime.services.suggestions.moods import MoodOption, resolve_mood
from famtime.services.suggestions.profile import (
    SuggestionProfile,
    build_seed,
    normalize_profile,
    profile_seed_hash,
)
from famtime.services.suggestions.refinement import (
    ADVISORY_DIRECT_FAILED,
    ADVISORY_NOT_CONFIGURED,
    ADVISORY_PROXY_FAILED,
    ADVISORY_SIGN_IN,
    build_direct_request,
    build_proxy_request,
    extract_suggestion_text,
    resolve_suggestion,
)

logger = logging.getLogger(__name__)

EXAMPLE_COUNT = 3


class RefinementStatus(str, Enum):
    REFINED = "refined"
    FALLBACK = "fallback"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class RequestToken:
    generation: int
    request: int
    mood_key: str
    seed: str


@dataclass(frozen=True, slots=True)
class RefinementOutcome:
    status: RefinementStatus
    token: RequestToken
    fallback: str
    suggestion: str | None = None
    message: str | None = None


class RefinementSession:
    """State of one suggestion widget: profile, mood and the last applied text.

    Every state change bumps ``generation`` and every ``generate()`` call bumps
    the request counter. A remote response is applied only when the token
    captured at request time still matches both.
    """

    def __init__(
        self,
        transport: RefinementTransport,
        *,
        profile: Any = None,
        mood_key: object = None,
        variant_seed: str | None = None,
        target_date: date | None = None,
        model: str | None = None,
        on_suggestion: Callable[[str], None] | None = None,
    ) -> None:
        self.transport = transport
        self.model = model or getattr(transport, "model", None) or settings.openai_model
        self.on_suggestion = on_suggestion
        self._profile = normalize_profile(profile)
        self._mood = resolve_mood(mood_key)
        self._variant_seed = variant_seed or None
        self._target_date = target_date
        self._generation = 0
        self._requests = 0
        self.suggestion: str | None = None
        self.message: str | None = None
        self.loading = False

    @property
    def profile(self) -> SuggestionProfile:
        return self._profile

    @property
    def mood(self) -> MoodOption:
        return self._mood

    @property
    def variant_seed(self) -> str | None:
        return self._variant_seed

    @property
    def target_date(self) -> date | None:
        return self._target_date

    @property
    def generation(self) -> int:
        return self._generation

    def _invalidate(self) -> None:
        self._generation += 1
        self.suggestion = None
        self.message = None

    def select_mood(self, mood_key: object) -> None:
        mood = resolve_mood(mood_key)
        if mood.key != self._mood.key:
            self._mood = mood
            self._invalidate()

    def update_profile(self, profile: Any) -> None:
        normalized = normalize_profile(profile)
        if normalized != self._profile:
            self._profile = normalized
            self._invalidate()

    def set_variant_seed(self, variant_seed: str | None) -> None:
        variant_seed = variant_seed or None
        if variant_seed != self._variant_seed:
            self._variant_seed = variant_seed
            self._invalidate()

    def set_target_date(self, target_date: date | None) -> None:
        if target_date != self._target_date:
            self._target_date = target_date
            self._invalidate()

    def current_token(self) -> RequestToken:
        return RequestToken(
            generation=self._generation,
            request=self._requests,
            mood_key=self._mood.key,
            seed=build_seed(self._profile, self._mood.key, self._variant_seed),
        )

    def is_current(self, token: RequestToken) -> bool:
        return token == self.current_token()

    def compose(self) -> ComposedSuggestion:
        return compose_suggestion(
            self._profile,
            self._mood.key,
            variant_seed=self._variant_seed,
            target_date=self._target_date,
        )

    def fallback_suggestion(self) -> str:
        return self.compose().text

    def build_payload(self, composed: ComposedSuggestion) -> dict[str, Any]:
        if self.transport.kind == "proxy":
            return build_proxy_request(self._profile, self._mood.key, composed.text)
        examples = pick_mood_examples(
            self._mood.key,
            is_weekend=composed.is_weekend,
            count=EXAMPLE_COUNT,
            seed=self._variant_seed or profile_seed_hash(self._profile) or "seed",
        )
        return build_direct_request(
            self._profile,
            self._mood.key,
            model=self.model,
            examples=examples,
            target_date=self._target_date,
        )

    def _failure_message(self) -> str:
        return ADVISORY_PROXY_FAILED if self.transport.kind == "proxy" else ADVISORY_DIRECT_FAILED

    def _apply(
        self,
        token: RequestToken,
        fallback: str,
        status: RefinementStatus,
        text: str | None,
        message: str | None,
    ) -> RefinementOutcome:
        suggestion = resolve_suggestion(text, fallback)
        self.suggestion = suggestion
        self.message = message
        if self.on_suggestion is not None:
            self.on_suggestion(suggestion)
        logger.info(
            "refinement.applied",
            extra={
                "mood": token.mood_key,
                "generation": token.generation,
                "transport": self.transport.kind,
                "refinement_status": status.value,
            },
        )
        return RefinementOutcome(status=status, token=token, fallback=fallback, suggestion=suggestion, message=message)

    async def generate(self) -> RefinementOutcome:
        self._requests += 1
        token = self.current_token()
        composed = self.compose()
        fallback = composed.text
        self.suggestion = None
        self.message = None

        if self.transport.kind == "noop":
            return self._apply(token, fallback, RefinementStatus.FALLBACK, None, ADVISORY_NOT_CONFIGURED)

        log_extra = {
            "mood": token.mood_key,
            "generation": token.generation,
            "request_seq": token.request,
            "transport": self.transport.kind,
        }
        text: str | None = None
        message: str | None = None
        self.loading = True
        try:
            data = await self.transport.complete(self.build_payload(composed))
            text = extract_suggestion_text(data)
            if not text:
                raise RefinementTransportError("Empty response from refinement transport")
        except MissingCredentialsError:
            logger.warning("refinement.missing_credentials", extra=log_extra)
            message = ADVISORY_SIGN_IN
        except RefinementTransportError as exc:
            logger.warning("refinement.failed: %s", exc, extra=log_extra)
            message = self._failure_message()
        except Exception:
            logger.warning("refinement.unexpected_error", extra=log_extra, exc_info=True)
            message = self._failure_message()
        finally:
            # Only the latest request owns the loading flag.
            if token.request == self._requests:
                self.loading = False

        if not self.is_current(token):
            logger.info("refinement.stale", extra={**log_extra, "refinement_status": RefinementStatus.STALE.value})
            return RefinementOutcome(status=RefinementStatus.STALE, token=token, fallback=fallback)

        if message is not None:
            return self._apply(token, fallback, RefinementStatus.FALLBACK, None, message)
        return self._apply(token, fallback, RefinementStatus.REFINED, text, None)
