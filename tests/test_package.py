"""Import checks for the public package surface."""

import pytest

import vault_search
from vault_search.search_operations.core.base import ScoredDocument

from conftest import make_document


def test_top_level_exports():
    assert vault_search.__version__ == "0.1.0"
    for name in ("HybridSearch", "create_hybrid_search", "fuse_results_rrf", "score_lexical", "load_corpus"):
        assert hasattr(vault_search, name)


def test_fuse_from_top_level_package():
    a = make_document("a.md", "alpha", title="A")
    b = make_document("b.md", "beta", title="B")

    fused = vault_search.fuse_results_rrf([
        [ScoredDocument(document=a, score=2.0), ScoredDocument(document=b, score=1.0)],
    ])

    assert [result.document.title for result in fused] == ["A", "B"]
    assert fused[0].fused_score == pytest.approx(1 / 60)
