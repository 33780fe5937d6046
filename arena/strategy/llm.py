"""
LLM-backed decision provider.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint (OpenRouter by
default) over ``httpx``. Responses are expected to be a small JSON object and
are validated with pydantic; anything else resolves to the documented
fallbacks (minimum bet, Stand) with the raw text kept in the rationale.
"""

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from arena.errors import ProviderError
from arena.strategy.base import Action, ActionDecision, BetDecision, DecisionProvider
from arena.strategy.prompts import SYSTEM_PROMPT, build_action_prompt, build_bet_prompt
from arena.usage import UsageTracker

if TYPE_CHECKING:
    from arena.context import ActionContext, BetContext

logger = logging.getLogger(__name__)

NO_REASONING = "No reasoning provided."

ACTION_SYNONYMS: dict[str, Action] = {
    "hit": Action.HIT,
    "h": Action.HIT,
    "stand": Action.STAND,
    "s": Action.STAND,
    "doubledown": Action.DOUBLE_DOWN,
    "double": Action.DOUBLE_DOWN,
    "dd": Action.DOUBLE_DOWN,
}


class BetResponse(BaseModel):
    """Expected shape of a bet reply."""

    model_config = ConfigDict(extra="ignore")

    amount: int
    reasoning: str | None = None


class ActionResponse(BaseModel):
    """Expected shape of an action reply."""

    model_config = ConfigDict(extra="ignore")

    action: str
    reasoning: str | None = None


def clean_json_response(text: str) -> str:
    """Strip surrounding whitespace and Markdown code fences."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_action(value: str) -> Action | None:
    """Map a free-form action string to an Action, or None if unrecognised."""
    key = value.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    return ACTION_SYNONYMS.get(key)


class LLMStrategy(DecisionProvider):
    """
    Blackjack player controlled by a chat-completion model.

    - Builds one prompt per decision from the context snapshot.
    - Retries transport failures ``max_retries`` times before falling back.
    - Reports token usage per call to the injected ``UsageTracker``.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str = "https://openrouter.ai/api/v1",
        temperature: float = 0.7,
        max_retries: int = 2,
        timeout: float = 60.0,
        retry_delay: float = 0.2,
        usage: UsageTracker | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initializes the LLM-backed provider.

        Args:
            model: Model id sent with every request (e.g. "minimax/minimax-m2.1").
            api_key: Bearer token for the endpoint.
            base_url: Root of the OpenAI-compatible API.
            temperature: Sampling temperature.
            max_retries: Extra attempts after a transport failure.
            timeout: Per-request timeout in seconds.
            retry_delay: Pause between attempts in seconds.
            usage: Aggregator for token counts; a private one is created if omitted.
            client: Pre-configured ``httpx.Client`` (tests inject a mock transport).
        """
        self.model = model
        self.name = model
        self.temperature = temperature
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.usage = usage if usage is not None else UsageTracker()

        if client is None:
            headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
            client = httpx.Client(base_url=base_url, headers=headers, timeout=timeout)
        self._client = client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    # --------
    # Public API
    # --------

    def decide_bet(self, context: "BetContext") -> BetDecision:
        """Ask the model for a wager, clamped to ``[min_bet, balance]``."""
        try:
            response = self._call_llm(build_bet_prompt(context))
        except ProviderError as exc:
            return BetDecision(
                amount=context.min_bet,
                rationale=f"[Provider error, defaulting to min bet] {exc}",
            )
        return self._parse_bet(response, context)

    def decide_action(self, context: "ActionContext") -> ActionDecision:
        """Ask the model for the next action."""
        try:
            response = self._call_llm(build_action_prompt(context))
        except ProviderError as exc:
            return ActionDecision(
                action=Action.STAND,
                rationale=f"[Provider error, defaulting to stand] {exc}",
            )
        return self._parse_action(response, context)

    # ---------
    # LLM calls
    # ---------

    def _call_llm(self, prompt: str) -> str:
        """
        POST one chat completion and return the first choice's text.

        Raises:
            ProviderError: If every attempt failed at the transport level.
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
        }

        last_err: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = self._client.post("/chat/completions", json=payload)
                resp.raise_for_status()
            except httpx.HTTPError as exc:
                last_err = exc
                logger.warning(
                    "%s call failed (attempt %d/%d): %s",
                    self.model,
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )
                if attempt < self.max_retries and self.retry_delay:
                    time.sleep(self.retry_delay)
                continue
            return self._extract_content(resp)

        raise ProviderError(f"{self.model} call failed after retries: {last_err}")

    def _extract_content(self, resp: httpx.Response) -> str:
        """Pull the message text out of a completion body; fall back to the raw body."""
        try:
            body: Any = resp.json()
        except ValueError:
            logger.warning("%s returned a non-JSON body", self.model)
            return resp.text
        if not isinstance(body, dict):
            logger.warning("%s returned a non-object JSON body", self.model)
            return resp.text

        self._record_usage(body.get("usage"))
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.warning("%s returned an unexpected completion shape", self.model)
            return resp.text
        return content or ""

    def _record_usage(self, usage: Any) -> None:
        if not isinstance(usage, dict):
            return
        try:
            counts = [
                int(usage.get(key) or 0)
                for key in ("prompt_tokens", "completion_tokens", "total_tokens")
            ]
        except (TypeError, ValueError, OverflowError):
            logger.warning("%s reported unusable token usage: %r", self.model, usage)
            return
        self.usage.add_usage(self.model, *counts)

    # --------
    # Parsing
    # --------

    def _parse_bet(self, text: str, ctx: "BetContext") -> BetDecision:
        """Validate a bet reply; malformed replies bet the minimum."""
        try:
            parsed = BetResponse.model_validate_json(clean_json_response(text))
        except ValidationError:
            logger.warning("%s: unparseable bet response: %r", self.model, text)
            return BetDecision(
                amount=ctx.min_bet,
                rationale=f"[Parse error, defaulting to min bet] Raw: {text}",
            )

        amount = min(max(parsed.amount, ctx.min_bet), ctx.balance)
        return BetDecision(amount=amount, rationale=parsed.reasoning or NO_REASONING)

    def _parse_action(self, text: str, ctx: "ActionContext") -> ActionDecision:
        """Validate an action reply; malformed replies stand."""
        try:
            parsed = ActionResponse.model_validate_json(clean_json_response(text))
        except ValidationError:
            logger.warning("%s: unparseable action response: %r", self.model, text)
            return ActionDecision(
                action=Action.STAND,
                rationale=f"[Parse error, defaulting to stand] Raw: {text}",
            )

        reasoning = parsed.reasoning or NO_REASONING
        action = parse_action(parsed.action)
        if action is None:
            return ActionDecision(
                action=Action.STAND,
                rationale=f"[Unknown action {parsed.action!r}, defaulting to stand] {reasoning}",
            )

        if action == Action.DOUBLE_DOWN and not ctx.can_double_down:
            return ActionDecision(
                action=Action.HIT,
                rationale=f"[DoubleDown not allowed, downgraded to hit] {reasoning}",
            )

        return ActionDecision(action=action, rationale=reasoning)
