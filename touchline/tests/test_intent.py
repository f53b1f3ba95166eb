"""
Tests for intent classification

Covers the keyword classifier for both deployments, the LLM classifier's
degradation paths, and the live/current-information heuristic.
"""

import pytest
from unittest.mock import Mock


@pytest.fixture
def lexicon():
    from touchline.common.lexicon import load_lexicon
    return load_lexicon()


class TestKeywordClassifierMatch:
    """Keyword rules for the match deployment"""

    @pytest.fixture
    def classifier(self, lexicon):
        from touchline.retriever.intent import KeywordIntentClassifier
        return KeywordIntentClassifier(lexicon, deployment="match")

    @pytest.mark.parametrize("text,expected", [
        ("How did Arjun Rao perform between minute 25-30?", "performance"),
        ("What do fans think about the referee?", "fan_conversation"),
        ("Why is Blueport pressing higher?", "tactics"),
        ("Has Leo Mendes been consistent this season?", "history"),
        ("What formation are Redchester using?", "tactics"),
        ("Tell me about the club", "generic"),
    ])
    def test_classify(self, classifier, text, expected):
        assert classifier.classify(text).value == expected

    def test_fan_rule_beats_tactics(self, classifier):
        from touchline.retriever.intent import MatchIntent

        result = classifier.classify("What is the fans' reaction to the new formation?")

        assert result == MatchIntent.FAN_CONVERSATION

    def test_empty_is_generic(self, classifier):
        from touchline.retriever.intent import MatchIntent

        assert classifier.classify("") == MatchIntent.GENERIC
        assert classifier.classify("   ") == MatchIntent.GENERIC

    def test_parse_has_no_entities(self, classifier):
        result = classifier.parse("Why is Blueport pressing higher?")

        assert result.entities.is_empty

    def test_deployment(self, classifier):
        assert classifier.deployment == "match"


class TestKeywordClassifierClub:
    """Keyword rules for the club deployment"""

    @pytest.fixture
    def classifier(self, lexicon):
        from touchline.retriever.intent import KeywordIntentClassifier
        return KeywordIntentClassifier(lexicon, deployment="club")

    @pytest.mark.parametrize("text,expected", [
        ("What's the score against Barcelona?", "live_match"),
        ("Match report from the Copa del Rey game?", "previous_match"),
        ("What are fans saying about Bellingham?", "fan_reaction"),
        ("How does Real Madrid defend set pieces?", "historic"),
        ("What is a low block?", "general"),
        ("Any news on the squad?", "generic"),
    ])
    def test_classify(self, classifier, text, expected):
        assert classifier.classify(text).value == expected

    def test_general_beats_historic(self, classifier):
        from touchline.retriever.intent import ClubIntent

        # "formation" is a historic keyword, but the definition wins
        assert classifier.classify("What is a formation?") == ClubIntent.GENERAL


class TestIntentSets:
    """Every non-generic intent is reachable"""

    @pytest.mark.parametrize("deployment", ["match", "club"])
    def test_rules_cover_every_intent(self, lexicon, deployment):
        from touchline.retriever.intent import intent_set

        intents = intent_set(deployment)
        rule_names = {name for name, _ in lexicon.rules_for(deployment)}

        assert rule_names == {i.value for i in intents} - {"generic"}

    def test_unknown_deployment(self):
        from touchline.retriever.intent import intent_set

        with pytest.raises(ValueError, match="Unknown deployment"):
            intent_set("stadium")

    def test_lexicon_rule_for_unknown_intent(self):
        from touchline.common.lexicon import Lexicon
        from touchline.retriever.intent import KeywordIntentClassifier

        lexicon = Lexicon(intent_rules=(("match", (("weather", ("rain",)),)),))

        with pytest.raises(ValueError, match="weather"):
            KeywordIntentClassifier(lexicon, deployment="match")


class TestLLMIntentClassifier:
    """Tests for the model-assisted classifier"""

    @pytest.fixture
    def llm(self):
        return Mock()

    @pytest.fixture
    def classifier(self, llm):
        from touchline.retriever.intent import LLMIntentClassifier
        return LLMIntentClassifier(llm, deployment="match", timeout=5.0)

    def test_valid_reply(self, classifier, llm):
        from touchline.retriever.intent import MatchIntent
        llm.generate.return_value = (
            '{"intent": "performance", "player": "Arjun Rao", "team": null, "minute": 25}'
        )

        result = classifier.parse("How did Arjun Rao perform between minute 25-30?")

        assert result.intent == MatchIntent.PERFORMANCE
        assert result.entities.to_dict() == {"player": "Arjun Rao", "minute": 25}
        kwargs = llm.generate.call_args.kwargs
        assert kwargs["json_output"] is True
        assert kwargs["timeout"] == 5.0
        assert "performance" in kwargs["system"]

    def test_intent_is_case_insensitive(self, classifier, llm):
        from touchline.retriever.intent import MatchIntent
        llm.generate.return_value = '{"intent": " Tactics "}'

        assert classifier.classify("Why press?") == MatchIntent.TACTICS

    def test_unknown_intent_coerced_to_generic(self, classifier, llm, caplog):
        import logging
        from touchline.retriever.intent import MatchIntent
        llm.generate.return_value = '{"intent": "weather", "team": "Blueport"}'

        with caplog.at_level(logging.INFO, logger="touchline.retriever.intent"):
            result = classifier.parse("Will it rain at Blueport?")

        assert result.intent == MatchIntent.GENERIC
        assert result.entities.team == "Blueport"
        assert "unknown intent" in caplog.text

    def test_malformed_reply_is_generic(self, classifier, llm, caplog):
        import logging
        from touchline.retriever.intent import MatchIntent
        llm.generate.return_value = "I think this is about tactics."

        with caplog.at_level(logging.WARNING, logger="touchline.retriever.intent"):
            result = classifier.parse("Why press?")

        assert result.intent == MatchIntent.GENERIC
        assert result.entities.is_empty
        assert "LLM intent classification failed" in caplog.text

    @pytest.mark.parametrize("minute", ["1e999", "-1e999"])
    def test_infinite_minute_is_dropped(self, classifier, llm, minute):
        from touchline.retriever.intent import MatchIntent
        llm.generate.return_value = f'{{"intent": "performance", "player": "Arjun Rao", "minute": {minute}}}'

        result = classifier.parse("How did Arjun Rao perform?")

        assert result.intent == MatchIntent.PERFORMANCE
        assert result.entities.to_dict() == {"player": "Arjun Rao"}

    def test_client_error_is_generic(self, classifier, llm):
        from touchline.retriever.intent import MatchIntent
        llm.generate.side_effect = TimeoutError("timed out")

        assert classifier.classify("Why press?") == MatchIntent.GENERIC

    def test_unavailable_client_is_generic(self):
        from touchline.common.llm_client import LLMClient
        from touchline.retriever.intent import LLMIntentClassifier, MatchIntent

        classifier = LLMIntentClassifier(LLMClient(provider="openai"), deployment="match")

        assert classifier.classify("Why press?") == MatchIntent.GENERIC

    def test_empty_message_skips_call(self, classifier, llm):
        from touchline.retriever.intent import MatchIntent

        assert classifier.classify("  ") == MatchIntent.GENERIC
        llm.generate.assert_not_called()

    def test_club_deployment(self, llm):
        from touchline.retriever.intent import ClubIntent, LLMIntentClassifier
        llm.generate.return_value = '```json\n{"intent": "live_match", "opponent": "Barcelona"}\n```'
        classifier = LLMIntentClassifier(llm, deployment="club")

        result = classifier.parse("What's the score against Barcelona?")

        assert result.intent == ClubIntent.LIVE_MATCH
        assert result.entities.opponent == "Barcelona"
        assert "live_match" in llm.generate.call_args.kwargs["system"]


class TestIsCurrentInfoQuery:
    """Tests for the live/current-information heuristic"""

    @pytest.mark.parametrize("text", [
        "Any news on the squad?",
        "What's the latest?",
        "Is Vinicius injured?",
        "Who is in the lineup?",
        "When is the next game?",
        "What is the score?",
        "How are Redchester doing?",
    ])
    def test_current(self, lexicon, text):
        from touchline.retriever.intent import is_current_info_query
        assert is_current_info_query(text, lexicon)

    @pytest.mark.parametrize("text", [
        "Tell me something interesting",
        "Who won the 2014 final?",
        "Do you know the offside rule?",
        "",
    ])
    def test_not_current(self, lexicon, text):
        from touchline.retriever.intent import is_current_info_query
        assert not is_current_info_query(text, lexicon)
