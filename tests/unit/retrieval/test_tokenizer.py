"""Unit tests for SimpleTokenizer."""

from hybrid_rag.retrieval.tokenizer import SimpleTokenizer


class TestSimpleTokenizer:
    def test_words_numbers_and_punctuation(self):
        """Letter/digit runs are single tokens; punctuation stands alone."""
        tok = SimpleTokenizer()
        assert tok.tokenize("Ship in 5 days, please!") == ["Ship", "in", "5", "days", ",", "please", "!"]

    def test_cjk_characters_are_single_tokens(self):
        tok = SimpleTokenizer()
        assert tok.tokenize("AADDCC是药物") == ["AADDCC", "是", "药", "物"]

    def test_spans_point_into_source(self):
        tok = SimpleTokenizer()
        text = "  alpha  beta"
        spans = tok.spans(text)
        assert [text[s:e] for s, e in spans] == ["alpha", "beta"]

    def test_count_tokens_empty(self):
        assert SimpleTokenizer().count_tokens("") == 0
        assert SimpleTokenizer().count_tokens("   \n ") == 0
