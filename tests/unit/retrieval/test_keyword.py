"""Unit tests for the BM25 keyword index."""

import math

from hybrid_rag.retrieval.keyword import BM25Index, keyword_terms


class TestKeywordTerms:
    def test_lowercases_letter_and_digit_runs(self):
        assert keyword_terms("Ship-to: Area51, NOW!") == ["ship", "to", "area", "51", "now"]


class TestBM25Index:
    def test_empty_index_returns_nothing(self):
        assert BM25Index().search("shipping policy", 5) == []

    def test_no_matching_term_returns_nothing(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "shipping policy"))
        assert index.search("warranty", 5) == []

    def test_scores_strictly_decreasing(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "shipping policy shipping"))
        index.add(make_chunk("c2", "return policy"))
        index.add(make_chunk("c3", "warranty terms"))

        hits = index.search("shipping policy", 10)

        assert [h.chunk_id for h in hits] == ["c1", "c2"]
        assert hits[0].score > hits[1].score > 0

    def test_limit_truncates(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "policy one"))
        index.add(make_chunk("c2", "policy two"))
        assert len(index.search("policy", 1)) == 1
        assert len(index.search("policy", 0)) == 2

    def test_single_term_score_matches_formula(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "alpha beta"))
        index.add(make_chunk("c2", "gamma delta"))

        hit = index.search("alpha", 1)[0]

        # N=2, df=1, tf=1, len=avg_len
        idf = math.log((2 - 1 + 0.5) / (1 + 0.5) + 1)
        expected = idf * (1 * 2.6) / (1 + 1.6)
        assert math.isclose(hit.score, expected, rel_tol=1e-9)

    def test_duplicate_query_terms_count_once(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "alpha beta"))
        index.add(make_chunk("c2", "gamma delta"))
        assert index.search("alpha alpha", 1)[0].score == index.search("alpha", 1)[0].score

    def test_chunks_without_terms_are_ignored(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "!!! ---"))
        assert len(index) == 0

    def test_re_adding_replaces_chunk(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "alpha"))
        index.add(make_chunk("c1", "beta"))

        assert len(index) == 1
        assert index.search("alpha", 5) == []
        assert [h.chunk_id for h in index.search("beta", 5)] == ["c1"]

    def test_reset(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "alpha"))
        index.reset()
        assert len(index) == 0
        assert index.search("alpha", 5) == []

    def test_remove_forgets_chunk(self, make_chunk):
        index = BM25Index()
        index.add(make_chunk("c1", "alpha beta"))
        index.add(make_chunk("c2", "beta"))

        index.remove("c1")
        index.remove("unknown")

        assert len(index) == 1
        assert index.search("alpha", 5) == []
        assert [h.chunk_id for h in index.search("beta", 5)] == ["c2"]
