"""Tests for the chat-completion decision provider."""

import json

import httpx
import pytest

from arena.cards import Card
from arena.context import ActionContext, BetContext
from arena.game import EventType, Round
from arena.player import Dealer, Player
from arena.strategy import Action, LLMStrategy
from arena.strategy.llm import clean_json_response, parse_action
from arena.usage import UsageTracker

BASE_URL = "https://llm.test/api/v1"


def _completion(content, usage=None):
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


def _strategy(handler, **kwargs):
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    kwargs.setdefault("retry_delay", 0)
    return LLMStrategy("test/model", client=client, **kwargs)


def _reply(content, usage=None):
    def handler(request):
        return httpx.Response(200, json=_completion(content, usage))

    return handler


@pytest.fixture
def bet_context():
    """Bet snapshot with 100 chips and min bet 5."""
    return BetContext(player_name="Mimo", balance=100, min_bet=5)


@pytest.fixture
def action_context():
    """Two-card 11 against a dealer 6."""
    return ActionContext(
        player_name="Mimo",
        hand_description="5♠ 6♥ (11)",
        hand_value=11,
        is_soft=False,
        dealer_up_card=Card.from_string("6D"),
        current_bet=10,
        balance=90,
        can_double_down=True,
    )


class TestHelpers:
    """Tests for response normalisation."""

    def test_clean_code_fence(self):
        """Test Markdown fences are stripped."""
        assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert clean_json_response('```\n{"a": 1}```') == '{"a": 1}'
        assert clean_json_response('  {"a": 1} ') == '{"a": 1}'

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hit", Action.HIT),
            ("h", Action.HIT),
            ("STAND", Action.STAND),
            ("double_down", Action.DOUBLE_DOWN),
            ("Double Down", Action.DOUBLE_DOWN),
            ("dd", Action.DOUBLE_DOWN),
            ("split", None),
        ],
    )
    def test_parse_action(self, text, expected):
        """Test action synonyms."""
        assert parse_action(text) == expected


class TestRequests:
    """Tests for the outgoing request."""

    def test_payload(self, bet_context):
        """Test model, messages and temperature are sent."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=_completion('{"amount": 5, "reasoning": "ok"}'))

        _strategy(handler, temperature=0.3).decide_bet(bet_context)

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/chat/completions"
        payload = json.loads(request.content)
        assert payload["model"] == "test/model"
        assert payload["temperature"] == 0.3
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert "Mimo" in payload["messages"][1]["content"]

    def test_bearer_header(self):
        """Test the API key is sent as a bearer token."""
        strategy = LLMStrategy("test/model", api_key="secret")
        try:
            assert strategy._client.headers["Authorization"] == "Bearer secret"
        finally:
            strategy.close()

    def test_name_is_model(self):
        """Test the provider label is the model id."""
        strategy = _strategy(_reply("{}"))
        assert strategy.name == "test/model"


class TestBetDecisions:
    """Tests for bet replies."""

    def test_valid_bet(self, bet_context):
        """Test a well-formed reply."""
        strategy = _strategy(_reply('{"amount": 40, "reasoning": "Feeling lucky"}'))
        decision = strategy.decide_bet(bet_context)
        assert decision.amount == 40
        assert decision.rationale == "Feeling lucky"

    def test_fenced_bet(self, bet_context):
        """Test a fenced JSON reply is accepted."""
        strategy = _strategy(_reply('```json\n{"amount": 15, "reasoning": "fine"}\n```'))
        assert strategy.decide_bet(bet_context).amount == 15

    @pytest.mark.parametrize("amount,expected", [(5000, 100), (1, 5)])
    def test_bet_clamped(self, bet_context, amount, expected):
        """Test amounts outside the legal range are clamped."""
        strategy = _strategy(_reply(json.dumps({"amount": amount})))
        decision = strategy.decide_bet(bet_context)
        assert decision.amount == expected
        assert decision.rationale == "No reasoning provided."

    def test_malformed_bet(self, bet_context):
        """Test prose instead of JSON bets the minimum and keeps the raw text."""
        strategy = _strategy(_reply("I'll bet big this time!"))
        decision = strategy.decide_bet(bet_context)
        assert decision.amount == 5
        assert decision.rationale == (
            "[Parse error, defaulting to min bet] Raw: I'll bet big this time!"
        )


class TestActionDecisions:
    """Tests for action replies."""

    def test_valid_action(self, action_context):
        """Test a well-formed reply."""
        strategy = _strategy(_reply('{"action": "DoubleDown", "reasoning": "11 vs 6"}'))
        decision = strategy.decide_action(action_context)
        assert decision.action == Action.DOUBLE_DOWN
        assert decision.rationale == "11 vs 6"

    def test_double_downgraded_when_not_allowed(self, action_context):
        """Test an ineligible double becomes a hit."""
        from dataclasses import replace

        context = replace(action_context, can_double_down=False)
        strategy = _strategy(_reply('{"action": "double", "reasoning": "greedy"}'))
        decision = strategy.decide_action(context)
        assert decision.action == Action.HIT
        assert decision.rationale == "[DoubleDown not allowed, downgraded to hit] greedy"

    def test_unknown_action(self, action_context):
        """Test an unrecognised action stands."""
        strategy = _strategy(_reply('{"action": "Split", "reasoning": "pair"}'))
        decision = strategy.decide_action(action_context)
        assert decision.action == Action.STAND
        assert decision.rationale.startswith("[Unknown action 'Split', defaulting to stand]")

    def test_malformed_action(self, action_context):
        """Test prose stands with the raw text."""
        strategy = _strategy(_reply("Hmm, I think I should hit."))
        decision = strategy.decide_action(action_context)
        assert decision.action == Action.STAND
        assert decision.rationale == (
            "[Parse error, defaulting to stand] Raw: Hmm, I think I should hit."
        )

    def test_missing_action_field(self, action_context):
        """Test JSON without an action stands."""
        strategy = _strategy(_reply('{"reasoning": "no idea"}'))
        assert strategy.decide_action(action_context).action == Action.STAND


class TestFailures:
    """Tests for transport failures and retries."""

    def test_connection_error_retries_then_stands(self, action_context):
        """Test every attempt is used before falling back."""
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        strategy = _strategy(handler, max_retries=2)
        decision = strategy.decide_action(action_context)
        assert len(attempts) == 3
        assert decision.action == Action.STAND
        assert decision.rationale.startswith("[Provider error, defaulting to stand]")

    def test_server_error_bets_minimum(self, bet_context):
        """Test HTTP errors fall back to the minimum bet."""
        strategy = _strategy(lambda request: httpx.Response(503, text="busy"), max_retries=0)
        decision = strategy.decide_bet(bet_context)
        assert decision.amount == 5
        assert decision.rationale.startswith("[Provider error, defaulting to min bet]")

    def test_recovers_after_transient_error(self, bet_context):
        """Test a later attempt can still succeed."""
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(502)
            return httpx.Response(200, json=_completion('{"amount": 20, "reasoning": "ok"}'))

        decision = _strategy(handler, max_retries=1).decide_bet(bet_context)
        assert decision.amount == 20
        assert len(calls) == 2

    def test_unexpected_body_is_treated_as_text(self, bet_context):
        """Test a body without choices goes through the parse fallback."""
        strategy = _strategy(lambda request: httpx.Response(200, json={"error": "quota"}))
        decision = strategy.decide_bet(bet_context)
        assert decision.amount == 5
        assert decision.rationale.startswith("[Parse error, defaulting to min bet] Raw: ")

    def test_non_object_body_keeps_raw_text(self, action_context):
        """Test a JSON array body stands with the raw payload in the rationale."""
        strategy = _strategy(lambda request: httpx.Response(200, json=["Hit"]))
        decision = strategy.decide_action(action_context)
        assert decision.action == Action.STAND
        assert decision.rationale.startswith("[Parse error, defaulting to stand] Raw: ")
        assert '"Hit"' in decision.rationale


class TestUsage:
    """Tests for token accounting."""

    def test_usage_recorded_per_call(self, bet_context, action_context):
        """Test usage from every call is aggregated by model."""
        usage = UsageTracker()
        counts = {"prompt_tokens": 100, "completion_tokens": 20, "total_tokens": 120}
        handler = _reply('{"amount": 5, "action": "stand"}', usage=counts)
        strategy = _strategy(handler, usage=usage)

        strategy.decide_bet(bet_context)
        strategy.decide_action(action_context)

        totals = usage.snapshot()["test/model"]
        assert totals.input_tokens == 200
        assert totals.output_tokens == 40
        assert totals.total_tokens == 240

    def test_missing_usage_ignored(self, bet_context):
        """Test replies without usage leave the tracker empty."""
        usage = UsageTracker()
        _strategy(_reply('{"amount": 5}'), usage=usage).decide_bet(bet_context)
        assert len(usage) == 0

    def test_bad_usage_keeps_decision(self, action_context):
        """Test unusable token counts are skipped without losing the reply."""
        usage = UsageTracker()
        counts = {"prompt_tokens": "n/a", "completion_tokens": 3, "total_tokens": 3}
        handler = _reply('{"action": "Hit", "reasoning": "low total"}', usage=counts)
        decision = _strategy(handler, usage=usage).decide_action(action_context)

        assert decision.action == Action.HIT
        assert decision.rationale == "low total"
        assert len(usage) == 0


class TestInRound:
    """Tests for an LLM player driving a full round."""

    def test_malformed_reply_completes_round(self, stacked_deck, events):
        """Test a garbled action reply stands and the round still settles."""

        def handler(request):
            prompt = json.loads(request.content)["messages"][1]["content"]
            if "Decide how much to bet" in prompt:
                return httpx.Response(200, json=_completion('{"amount": 10, "reasoning": "why not"}'))
            return httpx.Response(200, json=_completion("not json at all"))

        player = Player("Mimo", balance=100, strategy=_strategy(handler))
        result = Round(stacked_deck("10S 6H 10C 7D"), Dealer(), [player], events=events).play(1)

        stand = events.of_type(EventType.PLAYER_STAND)[0]
        assert "Raw: not json at all" in stand.data["rationale"]
        assert result.results[0].wager == 10
        assert player.balance == 90
