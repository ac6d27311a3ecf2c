"""Tests for the vector-space search engine."""

import json
from pathlib import Path

import pytest

from kotoba.engine.base import SearchEngine
from kotoba.engine.documents import KanjiDocument, WordDocument
from kotoba.engine.index import (
    Domain,
    Index,
    IndexRegistry,
    VectorStore,
    Vocabulary,
    get_indexes,
    indexes_initialized,
    init_indexes,
    load_indexes,
)
from kotoba.engine.result import ResultItem, SearchResult
from kotoba.engine.task import SearchTask
from kotoba.engine.terms import foreign_terms
from kotoba.engine.vector import DocumentVector, SparseVector, cosine_similarity
from kotoba.engine.words import ForeignWordEngine
from kotoba.errors import AlreadyInitializedError, NotInitializedError, UnexpectedError
from kotoba.languages import Language


class DocumentEngine(SearchEngine[KanjiDocument, KanjiDocument]):
    """Returns the matched documents themselves."""

    domain = Domain.KANJI

    def doc_to_output(self, storage, document):
        return [document]


def single_doc_registry() -> IndexRegistry:
    """A kanji index holding one document with vector {1: 1.0}."""
    index = Index.from_dict(
        {
            "terms": ["a", "b"],
            "documents": [{"vector": {"1": 1.0}, "document": {"literal": "食"}}],
        },
        KanjiDocument,
    )
    registry = IndexRegistry()
    registry.add(Domain.KANJI, index)
    return registry


def ranked_registry() -> IndexRegistry:
    """Five documents sharing term `x` with decreasing similarity."""
    index = Index.from_dict(
        {
            "terms": ["x", "y"],
            "documents": [
                {"vector": {"0": 1.0, "1": weight}, "document": {"literal": literal}}
                for literal, weight in [("一", 0.0), ("二", 0.5), ("三", 1.0), ("四", 1.5), ("五", 2.0)]
            ],
        },
        KanjiDocument,
    )
    registry = IndexRegistry()
    registry.add(Domain.KANJI, index)
    return registry


class TestSparseVector:
    """Tests for SparseVector and cosine similarity."""

    def test_identical_vectors(self):
        """Identical vectors should have similarity 1."""
        a = SparseVector({1: 1.0, 2: 2.0})
        assert cosine_similarity(a, SparseVector({1: 1.0, 2: 2.0})) == pytest.approx(1.0)

    def test_disjoint_vectors(self):
        """Vectors without shared dimensions should have similarity 0."""
        assert cosine_similarity(SparseVector({1: 1.0}), SparseVector({2: 1.0})) == 0.0

    def test_empty_vector(self):
        """Empty vectors should have similarity 0 rather than dividing by zero."""
        assert cosine_similarity(SparseVector(), SparseVector({1: 1.0})) == 0.0
        assert SparseVector().is_empty()

    def test_drops_zero_weights(self):
        """Zero weights should not count as dimensions."""
        vector = SparseVector({3: 1.0, 1: 0.0, 2: 0.5})
        assert vector.dimensions() == [2, 3]
        assert len(vector) == 2

    def test_from_dimensions(self):
        """from_dimensions should give every dimension the same weight."""
        assert SparseVector.from_dimensions([1, 4]) == SparseVector({1: 1.0, 4: 1.0})

    def test_partial_overlap(self):
        """Similarity should be the normalized dot product."""
        a = SparseVector({0: 1.0})
        b = SparseVector({0: 1.0, 1: 1.0})
        assert a.similarity(b) == pytest.approx(1 / 2**0.5)

    def test_document_vector_similarity(self):
        """DocumentVector should compare against vectors and other documents."""
        doc = DocumentVector(vector=SparseVector({1: 1.0}), document="x")
        assert doc.similarity(SparseVector({1: 2.0})) == pytest.approx(1.0)
        assert doc.similarity(DocumentVector(vector=SparseVector({2: 1.0}), document="y")) == 0.0


class TestVocabularyAndStore:
    """Tests for Vocabulary and VectorStore."""

    def test_vocabulary_dimensions(self):
        """Terms should map to their first position."""
        vocabulary = Vocabulary(["a", "b", "a", "c"])
        assert vocabulary.find_term("c") == 2
        assert vocabulary.has_term("b")
        assert "z" not in vocabulary
        assert len(vocabulary) == 3

    def test_build_vector_unknown_terms(self):
        """A vector of only unknown terms should not be built."""
        vocabulary = Vocabulary(["a"])
        assert vocabulary.build_vector(["z"]) is None
        assert vocabulary.build_vector(["a", "z"]) == SparseVector({0: 1.0})

    def test_get_all_deduplicates(self):
        """Documents matching several dimensions should be returned once, in store order."""
        docs = [
            DocumentVector(vector=SparseVector({0: 1.0, 1: 1.0}), document="first"),
            DocumentVector(vector=SparseVector({2: 1.0}), document="second"),
            DocumentVector(vector=SparseVector({1: 1.0}), document="third"),
        ]
        store = VectorStore(docs)
        assert [d.document for d in store.get_all([1, 0])] == ["first", "third"]
        assert [d.document for d in store.get_all([0, 1, 2], limit=2)] == ["first", "second"]
        assert store.get_all([9]) == []


class TestIndex:
    """Tests for Index construction and loading."""

    def test_from_dict_validates_documents(self):
        """Document payloads should be validated into the given model."""
        index = Index.from_dict(
            {"terms": ["食べる"], "documents": [{"vector": {"0": 1.0}, "document": {"seq_ids": [1, 2]}}]},
            WordDocument,
        )
        doc = next(iter(index.get_vector_store()))
        assert doc.document == WordDocument(seq_ids=[1, 2])
        assert index.has_term("食べる")
        assert len(index) == 1

    def test_from_dict_rejects_unknown_dimension(self):
        """Vectors referencing dimensions beyond the vocabulary should fail."""
        with pytest.raises(ValueError, match="out of range"):
            Index.from_dict({"terms": ["a"], "documents": [{"vector": {"3": 1.0}, "document": {}}]})

    def test_build_weights_rare_terms_higher(self):
        """Rare terms should weigh more than common ones."""
        index = Index.build([(["common", "rare"], "a"), (["common"], "b")])
        doc = next(iter(index.get_vector_store()))
        vocabulary = index.get_vocabulary()
        assert doc.vector.weights[vocabulary.find_term("rare")] > doc.vector.weights[vocabulary.find_term("common")]

    def test_load_indexes(self, tmp_path: Path):
        """Artifacts should be discovered by file name; unknown names skipped."""
        artifact = {"terms": ["eat"], "documents": [{"vector": {"0": 1.0}, "document": {"seq_ids": [1]}}]}
        for name in ["words_native.json", "words_foreign.en-US.json", "words_foreign.de.json", "bogus.json", "words_foreign.xx.json"]:
            (tmp_path / name).write_text(json.dumps(artifact), encoding="utf-8")

        registry = load_indexes(tmp_path)

        assert registry.get(Domain.WORDS_NATIVE) is not None
        assert registry.get(Domain.WORDS_FOREIGN, Language.ENGLISH) is not None
        assert registry.get(Domain.WORDS_FOREIGN, Language.GERMAN) is not None
        assert sorted(registry.languages(Domain.WORDS_FOREIGN)) == [Language.GERMAN, Language.ENGLISH]
        assert len(registry) == 3

    def test_load_indexes_missing_dir(self, tmp_path: Path):
        """A missing directory should give an empty registry."""
        assert len(load_indexes(tmp_path / "missing")) == 0


class TestIndexRegistryLifecycle:
    """Tests for the process-wide index registry."""

    def test_get_before_init(self):
        """Reading the registry before initialization should fail."""
        assert not indexes_initialized()
        with pytest.raises(NotInitializedError):
            get_indexes()

    def test_init_once(self):
        """The registry may only be published once."""
        registry = IndexRegistry()
        init_indexes(registry)
        assert get_indexes() is registry
        with pytest.raises(AlreadyInitializedError):
            init_indexes(IndexRegistry())


class TestSearchResult:
    """Tests for ranking and pagination."""

    def items(self, relevances):
        return [ResultItem(item=f"item{i}", relevance=r) for i, r in enumerate(relevances)]

    def test_sorted_descending(self):
        """Items should be ordered by descending relevance."""
        result = SearchResult.from_items(self.items([10, 30, 20]))
        assert result.outputs() == ["item1", "item2", "item0"]
        assert result.total == 3

    def test_ties_keep_insertion_order(self):
        """Items with equal relevance should keep their input order."""
        result = SearchResult.from_items(self.items([5, 5, 5, 9]))
        assert result.outputs() == ["item3", "item0", "item1", "item2"]

    def test_page_is_slice_of_full_ranking(self):
        """A page should equal the same slice of the unbounded ranking."""
        relevances = [3, 9, 1, 7, 5, 8, 2]
        full = SearchResult.from_items(self.items(relevances)).outputs()
        page = SearchResult.from_items(self.items(relevances), offset=2, limit=3)
        assert page.outputs() == full[2:5]
        assert page.total == len(relevances)

    def test_offset_past_end(self):
        """An offset beyond the results should give an empty page with the total."""
        result = SearchResult.from_items(self.items([1, 2]), offset=5, limit=3)
        assert result.is_empty()
        assert result.total == 2

    def test_zero_limit(self):
        """A zero limit should still count the candidates."""
        result = SearchResult.from_items(self.items([1, 2]), limit=0)
        assert len(result) == 0
        assert result.total == 2


class TestSearchTask:
    """Tests for SearchTask.find."""

    def test_single_document_scores_100(self):
        """An identical query and document vector should score 100."""
        for limit in (1, 5, 100):
            task = SearchTask(DocumentEngine(single_doc_registry())).add_query("b")
            result = task.set_threshold(0.2).set_limit(limit).find()
            assert len(result) == 1
            assert result.items[0].item == KanjiDocument(literal="食")
            assert result.items[0].relevance == 100

    def test_threshold_is_exclusive(self):
        """A similarity equal to the threshold should be rejected."""
        task = SearchTask(DocumentEngine(single_doc_registry())).add_query("b").set_threshold(1.0)
        assert task.find().is_empty()

    def test_unknown_query_term(self):
        """A query without indexed terms should find nothing."""
        assert SearchTask(DocumentEngine(single_doc_registry())).add_query("zzz").find().is_empty()

    def test_deduplicates_outputs(self):
        """The same output found by several queries should be returned once."""
        task = SearchTask(DocumentEngine(single_doc_registry())).add_query("b").add_query("b")
        result = task.find()
        assert len(result) == 1
        assert result.total == 1
        assert task.query_count() == 2

    def test_pagination(self):
        """Offset and limit should slice the ranked results."""
        registry = ranked_registry()
        full = SearchTask(DocumentEngine(registry)).add_query("x").set_threshold(0.0).find().outputs()
        page = SearchTask(DocumentEngine(registry)).add_query("x").set_threshold(0.0).set_offset(1).set_limit(2).find()
        assert [d.literal for d in full] == ["一", "二", "三", "四", "五"]
        assert page.outputs() == full[1:3]
        assert page.total == 5

    def test_filters_and_order(self):
        """Vector filters, result filters and the order function should apply."""
        task = SearchTask(DocumentEngine(ranked_registry())).add_query("x").set_threshold(0.0)
        task.set_vector_filter(lambda doc: doc.literal != "一")
        task.set_result_filter(lambda doc: doc.literal != "二")
        task.set_order_fn(lambda doc, _sim, _query, _lang: "一二三四五".index(doc.literal))
        assert [d.literal for d in task.find().outputs()] == ["五", "四", "三"]

    def test_missing_index(self, resources):
        """Searching a language without an index should be an unexpected error."""
        task = SearchTask.with_language(ForeignWordEngine(IndexRegistry()), "eat", Language.ENGLISH, resources)
        with pytest.raises(UnexpectedError):
            task.find()

    def test_has_term(self):
        """has_term should check queries literally against their index."""
        engine = DocumentEngine(single_doc_registry())
        assert SearchTask(engine).add_query("a").has_term()
        assert not SearchTask(engine).add_query("zzz").has_term()

    def test_uses_published_registry(self):
        """Engines without a registry should use the published one."""
        init_indexes(single_doc_registry())
        assert len(SearchTask(DocumentEngine()).add_query("b").find()) == 1


class TestForeignTerms:
    """Tests for foreign query term splitting."""

    def test_whole_query_then_words(self):
        """The lowercased query should come first, then its words."""
        assert foreign_terms("To Eat") == ["to eat", "to", "eat"]

    def test_single_word(self):
        """A single word should not be repeated."""
        assert foreign_terms("eat") == ["eat"]

    def test_empty(self):
        """Blank queries should give no terms."""
        assert foreign_terms("   ") == []


class TestQueryAlignment:
    """Tests for spelling alignment of foreign queries."""

    def test_aligns_misspelling(self, registry: IndexRegistry):
        """A close misspelling should be replaced by the indexed term."""
        index = registry.get(Domain.WORDS_FOREIGN, Language.ENGLISH)
        engine = ForeignWordEngine(registry)
        assert engine.align_query("retrun", index, Language.ENGLISH) == "return"
        assert engine.align_query("eat", index, Language.ENGLISH) is None

    def test_alignment_can_be_disabled(self, registry: IndexRegistry, resources):
        """Without alignment a misspelled query should find nothing."""
        task = SearchTask.with_language(ForeignWordEngine(registry), "retrun", Language.ENGLISH, resources)
        assert [w.sequence for w in task.find().outputs()] == [1001]
        task = SearchTask.with_language(ForeignWordEngine(registry), "retrun", Language.ENGLISH, resources)
        assert task.set_align(False).find().is_empty()
