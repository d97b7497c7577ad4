"""Tests for keyword intent routing and delegation."""

import asyncio

import pytest

from flemoji_ai.agents.intents import DISCOVERY_KEYWORDS, INTENT_KEYWORDS, PLAYBACK_KEYWORDS
from flemoji_ai.agents.llm import AnthropicChatModel, OpenAIChatModel
from flemoji_ai.agents.router import RouterAgent, classify_intent
from flemoji_ai.agents.tools.discovery_tools import SearchTracksArgs
from flemoji_ai.agents.tools.registry import get_default_registry
from flemoji_ai.models.agent import AgentContext, AgentFilters
from tests.conftest import FakeChatModel, calls, text, tool_call


class TestClassifyIntent:

    @pytest.mark.parametrize("query", [
        "Find me Amapiano tracks",
        "Search for tracks",
        "Show me playlists",
        "Find artists from Johannesburg",
        "Tell me about DJ Maphorisa",
        "What tracks are trending",
        "Browse hip hop music",
    ])
    def test_discovery_queries(self, query):
        assert classify_intent(query).intent == "discovery"

    @pytest.mark.parametrize("query", [
        "Play this song",
        "Start playing music",
        "Add to queue",
        "Shuffle the playlist",
        "Queue this track",
        "Pause the music",
        "Next song",
        "Resume playback",
    ])
    def test_playback_queries(self, query):
        assert classify_intent(query).intent == "playback"

    @pytest.mark.parametrize("query", [
        "What should I listen to?",
        "Recommend me music",
        "Suggest similar tracks",
        "Show me new music",
        "What else is good?",
        "Help me find fresh tracks",
    ])
    def test_recommendation_queries(self, query):
        assert classify_intent(query).intent == "recommendation"

    @pytest.mark.parametrize("query", ["hello", "Thanks", ""])
    def test_no_keywords_is_unknown(self, query):
        decision = classify_intent(query)
        assert decision.intent == "unknown"
        assert decision.confidence == 0.0
        assert decision.target_agent == "DiscoveryAgent"

    def test_playback_wins_tie_with_recommendation(self):
        decision = classify_intent("play and recommend something")
        assert decision.intent == "playback"
        assert decision.target_agent == "PlaybackAgent"

    def test_recommendation_wins_tie_with_discovery(self):
        # "help me find" + "fresh" vs "find" + "track"
        assert classify_intent("Help me find fresh tracks").intent == "recommendation"

    def test_confidence_is_hits_over_list_length(self):
        decision = classify_intent("Find me Amapiano tracks")
        assert decision.confidence == pytest.approx(2 / len(DISCOVERY_KEYWORDS))

    def test_confidence_capped_at_one(self):
        query = " ".join(PLAYBACK_KEYWORDS) * 2
        assert classify_intent(query).confidence <= 1.0

    def test_matching_is_case_insensitive(self):
        assert classify_intent("PLAY IT LOUD").intent == "playback"

    def test_substring_matching(self):
        # "play" is counted inside "playing"
        assert "play" in PLAYBACK_KEYWORDS
        assert classify_intent("keep it playing").intent == "playback"

    def test_every_intent_has_keywords(self):
        assert set(INTENT_KEYWORDS) == {"playback", "recommendation", "discovery"}
        assert all(INTENT_KEYWORDS.values())


class TestRouterAgent:

    def test_requires_catalog_or_registry(self):
        with pytest.raises(ValueError):
            RouterAgent()

    def test_provider_selects_model_backend(self, catalog):
        router = RouterAgent(catalog, provider="anthropic")
        assert all(isinstance(agent.model, AnthropicChatModel) for agent in router.agents.values())

        router = RouterAgent(catalog, provider="openai")
        assert all(isinstance(agent.model, OpenAIChatModel) for agent in router.agents.values())

    def test_unknown_provider_is_rejected(self, catalog):
        with pytest.raises(ValueError):
            RouterAgent(catalog, provider="google")

    def test_explicit_model_wins_over_provider(self, catalog):
        model = FakeChatModel()
        router = RouterAgent(catalog, model=model, provider="anthropic")
        assert all(agent.model is model for agent in router.agents.values())

    def test_get_routing_decision(self, catalog):
        router = RouterAgent(catalog, model=FakeChatModel())
        decision = router.get_routing_decision("shuffle my queue")
        assert decision.intent == "playback"
        assert decision.target_agent == "PlaybackAgent"

    def test_route_delegates_to_playback(self, catalog):
        model = FakeChatModel([
            calls(tool_call("create_play_track_action", trackId="t1")),
            text("Playing Mamelodi Sunset."),
        ])
        router = RouterAgent(catalog, model=model)

        response = asyncio.run(router.route("play Mamelodi Sunset"))

        assert response.metadata.agent == "PlaybackAgent"
        assert response.data.type == "action"
        assert response.data.data.actions[0].data == {"trackId": "t1"}

    def test_route_unknown_goes_to_discovery(self, catalog):
        router = RouterAgent(catalog, model=FakeChatModel(default="Hi! Ask me about South African music."))
        response = asyncio.run(router.route("hello"))
        assert response.metadata.agent == "DiscoveryAgent"
        assert response.data is None
        assert response.message.startswith("Hi!")

    def test_route_end_to_end_amapiano(self, catalog):
        five = [{"id": f"a{i}", "title": f"Piano {i}", "genre": "Amapiano"} for i in range(5)]

        async def fake_search(args):
            return {"tracks": five, "count": 5}

        registry = get_default_registry(catalog)
        registry.register("search_tracks", fake_search, SearchTracksArgs, "Search tracks")
        router = RouterAgent(catalog, registry=registry, model=FakeChatModel([
            calls(tool_call("search_tracks", query="amapiano")),
            calls(tool_call("search_tracks", query="amapiano", orderBy="popular")),
            text("Here are some Amapiano tracks."),
        ]))

        response = asyncio.run(router.route("Find me Amapiano tracks"))

        assert response.metadata.agent == "DiscoveryAgent"
        assert response.data.type == "track_list"
        assert response.data.data.metadata.genre == "Amapiano"
        assert [t.id for t in response.data.data.tracks] == [f"a{i}" for i in range(5)]

    def test_route_passes_context_filters(self, catalog):
        model = FakeChatModel(default="Sure.")
        router = RouterAgent(catalog, model=model)
        context = AgentContext(filters=AgentFilters(genre="Gqom", province="KwaZulu-Natal"))

        asyncio.run(router.route("find something", context))

        user_msg = model.calls[0]["messages"][-1]["content"]
        assert user_msg.endswith("Context: Genre: Gqom Province: KwaZulu-Natal")

    def test_route_never_raises(self, catalog):
        router = RouterAgent(catalog, model=FakeChatModel([RuntimeError("provider down")]))
        response = asyncio.run(router.route("find amapiano"))
        assert response.metadata.error == "provider down"
        assert "apologize" in response.message
