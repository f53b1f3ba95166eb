"""
Tests for VectorSearcher and WebSearcher

Both searchers wrap synchronous clients; the clients here are Mocks with
the same result-dict contract as PineconeClient and ExaClient.
"""

import pytest
from unittest.mock import Mock


class TestVectorSearcher:
    """Tests for VectorSearcher"""

    @pytest.fixture
    def store(self):
        store = Mock()
        store.query.return_value = {
            "ok": True,
            "results": [
                {"id": "ev-1", "score": 0.92, "metadata": {"text": "Rao shot wide", "minute": 27}},
            ],
        }
        return store

    @pytest.fixture
    def embedding(self):
        embedding = Mock()
        embedding.embed_single.return_value = [0.1, 0.2, 0.3]
        return embedding

    @pytest.fixture
    def searcher(self, store, embedding):
        from touchline.retriever.searcher import VectorSearcher
        return VectorSearcher(store, embedding, default_top_k=5)

    @pytest.mark.asyncio
    async def test_search_returns_results(self, searcher, embedding):
        results = await searcher.search("How did Rao play?", "match_events")

        assert len(results) == 1
        assert results[0].text == "Rao shot wide"
        assert results[0].score == 0.92
        assert results[0].source == "vector"
        assert results[0].id == "ev-1"
        embedding.embed_single.assert_called_once_with("How did Rao play?")

    @pytest.mark.asyncio
    async def test_filter_and_top_k_passed(self, searcher, store):
        query_filter = {"player": {"$eq": "Arjun Rao"}, "minute": {"$gte": 20, "$lte": 30}}

        await searcher.search("Rao", "match_events", filter=query_filter, top_k=3)

        store.query.assert_called_once_with("match_events", [0.1, 0.2, 0.3], 3, query_filter)

    @pytest.mark.asyncio
    async def test_empty_filter_is_unfiltered(self, searcher, store):
        await searcher.search("Rao", "historic_knowledge", filter={})

        store.query.assert_called_once_with("historic_knowledge", [0.1, 0.2, 0.3], 5, None)

    @pytest.mark.asyncio
    async def test_text_field_preference(self, searcher, store):
        store.query.return_value = {
            "ok": True,
            "results": [
                {"id": "1", "score": 0.9, "metadata": {"content": "content", "chunk_text": "chunk"}},
                {"id": "2", "score": 0.8, "metadata": {"text": "   ", "field_text": "field"}},
            ],
        }

        results = await searcher.search("q", "historic_knowledge")

        assert [r.text for r in results] == ["chunk", "field"]

    @pytest.mark.asyncio
    async def test_metadata_json_fallback(self, searcher, store):
        store.query.return_value = {
            "ok": True,
            "results": [{"id": "1", "score": 0.5, "metadata": {"minute": 25, "player": "Arjun Rao"}}],
        }

        results = await searcher.search("q", "match_events")

        assert results[0].text == '{"minute": 25, "player": "Arjun Rao"}'

    @pytest.mark.asyncio
    async def test_missing_score_defaults_to_zero(self, searcher, store):
        store.query.return_value = {
            "ok": True,
            "results": [{"id": "1", "score": None, "metadata": {"text": "t", "image_url": "https://cdn/x.png"}}],
        }

        results = await searcher.search("q", "match_events")

        assert results[0].score == 0.0
        assert results[0].media_url == "https://cdn/x.png"

    @pytest.mark.asyncio
    async def test_store_failure_yields_empty(self, searcher, store, caplog):
        import logging
        store.query.return_value = {"ok": False, "error": "index not found"}

        with caplog.at_level(logging.WARNING, logger="touchline.retriever.results"):
            results = await searcher.search("q", "match_events")

        assert results == []
        assert "vector:match_events retrieval failed" in caplog.text

    @pytest.mark.asyncio
    async def test_embedding_failure_yields_empty(self, searcher, store, embedding):
        embedding.embed_single.side_effect = RuntimeError("Embedding service not available")

        outcome = await searcher.try_search("q", "match_events")

        assert not outcome.ok
        assert outcome.source == "vector:match_events"
        assert "not available" in outcome.error
        store.query.assert_not_called()


class TestWebSearcher:
    """Tests for WebSearcher"""

    @pytest.fixture
    def client(self):
        client = Mock()
        client.search.return_value = {
            "ok": True,
            "results": [
                {
                    "title": "Fans react",
                    "url": "https://example.com/fans",
                    "text": "x" * 2000,
                    "published_date": "2026-03-01",
                    "image": "https://example.com/fans.jpg",
                },
            ],
        }
        return client

    @pytest.fixture
    def searcher(self, client):
        from touchline.retriever.web_searcher import WebSearcher
        return WebSearcher(client, num_results=5, snippet_chars=500, content_chars=1000)

    @pytest.mark.asyncio
    async def test_truncation(self, searcher):
        results = await searcher.search("referee")

        assert len(results[0].text) == 500
        assert len(results[0].content) == 1000
        assert results[0].score is None
        assert results[0].source == "web"
        assert results[0].title == "Fans react"
        assert results[0].media_url == "https://example.com/fans.jpg"
        assert results[0].published_date == "2026-03-01"

    @pytest.mark.asyncio
    async def test_query_is_enhanced(self, searcher, client):
        await searcher.search("referee", "fan_conversation")

        query, num_results = client.search.call_args.args
        assert query.startswith("referee ")
        assert "reddit twitter" in query
        assert num_results == 5

    @pytest.mark.asyncio
    async def test_no_hint_sends_query_unchanged(self, searcher, client):
        await searcher.search("Redchester injury news")

        client.search.assert_called_once_with("Redchester injury news", 5)

    @pytest.mark.asyncio
    async def test_result_cap(self, client):
        from touchline.retriever.web_searcher import WebSearcher
        client.search.return_value = {
            "ok": True,
            "results": [{"title": f"t{i}", "url": f"u{i}", "text": "x"} for i in range(7)],
        }
        searcher = WebSearcher(client, num_results=3)

        results = await searcher.search("q")

        assert [r.title for r in results] == ["t0", "t1", "t2"]

    @pytest.mark.asyncio
    async def test_failure_yields_empty(self, searcher, client):
        client.search.return_value = {"ok": False, "error": "EXA_API_KEY is not set"}

        outcome = await searcher.try_search("q", "live")

        assert not outcome.ok
        assert outcome.source == "web:live"
        assert await searcher.search("q", "live") == []

    @pytest.mark.asyncio
    async def test_client_exception_yields_empty(self, searcher, client):
        client.search.side_effect = ConnectionError("reset")

        assert await searcher.search("q") == []
