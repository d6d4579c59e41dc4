"""Tests for the BM25 lexical scorer."""

import math

import pytest

from vault_search.search_operations.search.lexical import BM25Config, BM25Scorer, score_lexical

from conftest import make_document


def _scores(ranked):
    return {scored.document.title: scored.score for scored in ranked}


class TestScoreLexical:

    def test_matching_documents_rank_above_non_matching(self, documents):
        ranked = score_lexical(["banana"], documents)
        scores = _scores(ranked)

        assert scores["A"] > 0
        assert scores["B"] > 0
        assert scores["C"] == 0
        assert ranked[-1].document.title == "C"

    def test_exact_okapi_score(self, documents):
        scores = _scores(score_lexical(["banana"], documents))

        # A: "a apple banana" (3 terms), average length 8/3, df(banana) = 2 of 3
        idf = math.log(1 + (3 - 2 + 0.5) / (2 + 0.5))
        tf_part = 1 * 2.2 / (1 + 1.2 * (1 - 0.75 + 0.75 * 3 / (8 / 3)))
        assert scores["A"] == pytest.approx(idf * tf_part)

    def test_output_sorted_non_increasing(self, documents):
        ranked = score_lexical(["banana", "cherry"], documents)
        values = [scored.score for scored in ranked]

        assert values == sorted(values, reverse=True)
        assert ranked[0].document.title == "B"

    def test_ties_keep_input_order(self, documents):
        ranked = score_lexical(["nothing"], documents)

        assert [scored.document.title for scored in ranked] == ["A", "B", "C"]
        assert all(scored.score == 0 for scored in ranked)

    def test_zero_score_documents_stay_in_list(self, documents):
        assert len(score_lexical(["apple"], documents)) == 3

    def test_empty_documents(self):
        assert score_lexical(["banana"], []) == []

    def test_empty_keywords_score_zero(self, documents):
        ranked = score_lexical(["", "   "], documents)

        assert all(scored.score == 0 for scored in ranked)

    def test_multi_word_keyword_sums_terms(self, documents):
        combined = _scores(score_lexical(["banana cherry"], documents))
        separate = _scores(score_lexical(["banana", "cherry"], documents))

        assert combined["B"] == pytest.approx(separate["B"])

    def test_matching_is_case_insensitive(self, documents):
        assert _scores(score_lexical(["BANANA"], documents))["A"] > 0

    def test_title_is_searchable(self):
        documents = [
            make_document("x.md", "unrelated body", title="Kubernetes"),
            make_document("y.md", "other body", title="Other"),
        ]

        ranked = score_lexical(["kubernetes"], documents)

        assert ranked[0].document.title == "Kubernetes"
        assert ranked[0].score > 0

    def test_term_in_every_document_has_positive_idf(self):
        documents = [make_document(f"{i}.md", "common words") for i in range(3)]

        assert all(scored.score > 0 for scored in score_lexical(["common"], documents))

    def test_repeated_term_saturates(self):
        documents = [
            make_document("once.md", "rust " + "filler " * 9, title="once"),
            make_document("many.md", "rust " * 10, title="many"),
        ]
        scores = _scores(score_lexical(["rust"], documents))

        assert scores["many"] > scores["once"]
        assert scores["many"] < 10 * scores["once"]


class TestBM25Config:

    def test_defaults(self):
        config = BM25Config()

        assert config.k1 == 1.2
        assert config.b == 0.75
        assert config.enable_stopwords is False

    @pytest.mark.parametrize("kwargs", [
        {"k1": 0},
        {"b": 1.5},
        {"min_term_length": 0},
        {"min_term_length": 5, "max_term_length": 3},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            BM25Config(**kwargs)

    def test_stopwords_filtered_when_enabled(self):
        documents = [make_document("a.md", "the cat"), make_document("b.md", "a dog")]
        scorer = BM25Scorer(BM25Config(enable_stopwords=True))

        assert all(scored.score == 0 for scored in scorer.score(["the"], documents))
