from __future__ import annotations

import numpy as np
import pytest

from manualpack.models import ManualSource
from manualpack.search import ManualSearcher, expand_query, query_terms
from manualpack.storage import ManualStore
from tests.helpers import StaticEmbedder, make_chunk


@pytest.fixture
def vector_store(store: ManualStore) -> ManualStore:
    store.store_manual(
        ManualSource(manual_id="galaga", markdown="", source_path="galaga.md", title="Galaga"),
        page_count=4,
    )
    ids = store.persist_chunks(
        [
            make_chunk("galaga", "Open the coin door and check the credit switch.", page=1),
            make_chunk("galaga", "Coin mech jams when the return lever sticks.", page=2, index=1),
            make_chunk("galaga", "Adjust the monitor brightness pot.", page=3, index=2),
            make_chunk("galaga", "Speaker wiring diagram.", page=4, index=3),
        ]
    )
    store.store_embeddings(
        ids,
        np.array(
            [[1.0, 0.0], [0.96, 0.28], [0.64, 0.768], [0.0, 1.0]],
            dtype=np.float32,
        ),
    )
    return store


@pytest.mark.unit
def test_expand_query_appends_synonyms():
    expanded = expand_query("Coin STUCK in slot")

    assert expanded.startswith("coin stuck in slot")
    assert "jammed" in expanded
    assert "quarter" in expanded


@pytest.mark.unit
def test_expand_query_without_known_terms():
    assert expand_query("Replace the Fuse") == "replace the fuse"


@pytest.mark.unit
def test_query_terms_drop_stopwords_and_duplicates():
    assert query_terms("Why is the coin, the COIN door stuck?") == ["coin", "door", "stuck"]


@pytest.mark.unit
def test_vector_search_relaxes_threshold_until_enough_hits(vector_store):
    searcher = ManualSearcher(vector_store, StaticEmbedder([1.0, 0.0]))

    response = searcher.search("coin rejected", max_results=6)

    # Only 0.6 admits a third chunk (similarity ~0.64)
    assert response.strategy == "vector"
    assert [r.page_start for r in response.results] == [1, 2, 3]
    assert response.results[0].score == pytest.approx(1.0)
    assert response.results[0].manual_title == "Galaga"
    assert response.total == 3


@pytest.mark.unit
def test_vector_results_capped_at_max_results(vector_store):
    searcher = ManualSearcher(vector_store, StaticEmbedder([1.0, 0.0]))

    response = searcher.search("coin", max_results=2)

    assert response.strategy == "vector"
    assert [r.page_start for r in response.results] == [1, 2]


@pytest.mark.unit
def test_falls_back_to_keyword_search(vector_store):
    # Orthogonal to most chunks: never reaches 3 hits at any threshold
    searcher = ManualSearcher(vector_store, StaticEmbedder([-1.0, 0.0]))

    response = searcher.search("coin door")

    assert response.strategy == "text"
    assert response.query.startswith("coin door")
    assert response.results[0].page_start == 1
    assert all(r.score > 0 for r in response.results)


@pytest.mark.unit
def test_no_results(vector_store):
    searcher = ManualSearcher(vector_store, StaticEmbedder([-1.0, 0.0]))

    response = searcher.search("xyzzy")

    assert response.strategy == "none"
    assert response.results == []


@pytest.mark.unit
def test_manual_filter(vector_store):
    searcher = ManualSearcher(vector_store, StaticEmbedder([1.0, 0.0]))

    response = searcher.search("coin", manual_id="other")

    assert response.strategy == "none"


@pytest.mark.unit
def test_custom_thresholds(vector_store):
    searcher = ManualSearcher(
        vector_store, StaticEmbedder([1.0, 0.0]), thresholds=[0.9], min_results=2
    )

    response = searcher.search("coin")

    assert [r.page_start for r in response.results] == [1, 2]
