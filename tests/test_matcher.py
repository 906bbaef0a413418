"""Unit tests for the keyword, TF-IDF and n-gram scorers."""

import pytest

from college_bot.data_store import Intent
from college_bot.matcher import (
    KeywordScorer,
    NGramScorer,
    Query,
    TfidfScorer,
    jaccard,
    keyword_similarity,
    merge_phrases,
    rank,
    select_best,
)


def make_query(normalizer, text):
    corrected = normalizer.correct(text)
    return Query(text=text, corrected=corrected, normalized=normalizer.normalize(corrected, spell_check=False))


def intent(name):
    return Intent(name=name, keywords=(name,), response=f"{name} response")


class TestKeywordSimilarity:

    def test_exact_keyword_scores_one(self):
        assert keyword_similarity("tell me about the hostel", ["hostel"]) == 1.0

    def test_partial_word_scores_half(self):
        assert keyword_similarity("what is the cost", ["cost of study"]) == 0.5

    def test_partial_score_is_capped(self):
        keywords = ["library hours", "reading room", "study hall"]
        assert keyword_similarity("library reading study", keywords) == 0.9

    def test_short_words_do_not_count(self):
        assert keyword_similarity("the fee", ["fee structure"]) == 0.0

    def test_no_overlap(self):
        assert keyword_similarity("xyzzy nonsense query", ["hostel", "fee structure"]) == 0.0


class TestRanking:

    def test_equal_scores_keep_declaration_order(self):
        a, b, c = intent("a"), intent("b"), intent("c")
        ranked = rank([a, b, c], [0.5, 0.9, 0.5])
        assert [i.name for i, _ in ranked] == ["b", "a", "c"]

    def test_threshold_is_strict(self):
        ranked = [(intent("fees"), 0.4)]
        assert select_best(ranked, 0.4) is None

    def test_just_below_threshold_falls_back(self):
        assert select_best([(intent("fees"), 0.4 - 1e-9)], 0.4) is None

    def test_just_above_threshold_matches(self):
        match = select_best([(intent("fees"), 0.4 + 1e-9)], 0.4)
        assert match.intent == "fees"
        assert match.response == "fees response"

    def test_nothing_to_select(self):
        assert select_best([], 0.4) is None


class TestKeywordScorer:

    def test_best_intent_first(self, store, normalizer):
        ranked = KeywordScorer(store).score(make_query(normalizer, "Is there a hostel?"))
        assert ranked[0][0].name == "hostel"
        assert ranked[0][1] == 1.0

    def test_scores_descending_and_bounded(self, store, normalizer):
        ranked = KeywordScorer(store).score(make_query(normalizer, "placement and fee structure"))
        scores = [s for _, s in ranked]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= s <= 1.0 for s in scores)
        assert len(ranked) == len(store)


class TestTfidfScorer:

    def test_documents_are_normalized_keywords(self, store, normalizer):
        scorer = TfidfScorer(store, normalizer)
        assert len(scorer.documents) == len(store)
        assert normalizer.stem("placements") in scorer.vocabulary

    def test_matching_intent_ranks_first(self, store, normalizer):
        scorer = TfidfScorer(store, normalizer)
        ranked = scorer.score(make_query(normalizer, "placements"))
        assert ranked[0][0].name == "placements"
        assert ranked[0][1] > 0.3

    def test_stemmed_variants_match(self, small_store, normalizer):
        scorer = TfidfScorer(small_store, normalizer)
        ranked = scorer.score(Query(text="study", corrected="study", normalized=normalizer.stem("study")))
        assert ranked[0][0].name == "library"
        assert ranked[0][1] == pytest.approx(1.0)

    def test_unknown_terms_score_zero(self, store, normalizer):
        ranked = TfidfScorer(store, normalizer).score(make_query(normalizer, "xyzzy nonsense query"))
        assert all(score == 0.0 for _, score in ranked)

    def test_empty_query_scores_zero(self, store, normalizer):
        ranked = TfidfScorer(store, normalizer).score(Query(text="", corrected="", normalized=""))
        assert [s for _, s in ranked] == [0.0] * len(store)


class TestMergePhrases:

    def test_joins_known_phrase(self):
        assert merge_phrases(["fee", "structure", "details"], {"fee structure"}) == ["fee structure", "details"]

    def test_longest_phrase_wins(self):
        phrases = {"computer science", "computer science and engineering"}
        tokens = ["computer", "science", "and", "engineering"]
        assert merge_phrases(tokens, phrases) == ["computer science and engineering"]

    def test_phrase_longer_than_limit_is_not_merged(self):
        assert merge_phrases(["a", "b", "c"], {"a b c"}, max_length=2) == ["a", "b", "c"]

    def test_no_phrases(self):
        assert merge_phrases(["hostel", "fees"], set()) == ["hostel", "fees"]


def test_jaccard():
    assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)
    assert jaccard([], []) == 0.0


class TestNGramScorer:

    def test_keyword_phrases_become_single_tokens(self, store, normalizer):
        scorer = NGramScorer(store, normalizer)
        assert "fee structure" in scorer.phrases
        assert "computer science and engineering" in scorer.phrases
        assert scorer.analyze("fee structure").tokens == ("fee structure",)

    def test_stopwords_are_dropped_question_words_kept(self, store, normalizer):
        scorer = NGramScorer(store, normalizer)
        assert scorer.analyze("what about the hostel").tokens == ("what", "hostel")

    def test_phrase_query_ranks_its_intent_first(self, store, normalizer):
        ranked = NGramScorer(store, normalizer).score(make_query(normalizer, "fee structure"))
        assert ranked[0][0].name == "fees"
        assert ranked[0][1] == pytest.approx(0.7)

    def test_weighted_blend(self, store, normalizer):
        # tokens 1/2 * 0.4 + stems 1/2 * 0.3, no shared bigram
        ranked = NGramScorer(store, normalizer).score(make_query(normalizer, "placement cell"))
        assert ranked[0][0].name == "placements"
        assert ranked[0][1] == pytest.approx(0.35)

    def test_identical_text_scores_one(self, store, normalizer):
        scorer = NGramScorer(store, normalizer)
        analysis = scorer.analyze("hostel mess timings")
        assert scorer.similarity(analysis, analysis) == pytest.approx(1.0)

    def test_empty_query_scores_zero(self, store, normalizer):
        ranked = NGramScorer(store, normalizer).score(Query(text="", corrected="", normalized=""))
        assert all(score == 0.0 for _, score in ranked)
