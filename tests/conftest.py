"""Root pytest configuration for kotoba tests."""

import json
import sqlite3
from pathlib import Path

import pytest

from kotoba.engine.documents import KanjiDocument, SentenceDocument, WordDocument
from kotoba.engine.index import Domain, Index, IndexRegistry
from kotoba.languages import Language
from kotoba.storage.database import init_schema
from kotoba.storage.dictionary import DictStore
from kotoba.storage.kanji import KanjiStore
from kotoba.storage.resources import ResourceStorage, SentenceStorage, WordStorage
from kotoba.storage.schemas import Dict, Reading, Sense, Sentence, Word


def pytest_addoption(parser):
    """Add --run-integration option to pytest."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests against the configured data directory",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires --run-integration)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is provided."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ---------------------------------------------------------------------------
# Process-wide state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch: pytest.MonkeyPatch):
    """Every test starts with no published indexes, resources or stores."""
    monkeypatch.setattr("kotoba.engine.index._registry", None)
    monkeypatch.setattr("kotoba.storage.resources._resources", None)
    monkeypatch.setattr("kotoba.suggestions.registry._suggestions", None)
    monkeypatch.setattr("kotoba.storage.kanji._kanji_store", None)
    monkeypatch.setattr("kotoba.storage.dictionary._dict_store", None)


@pytest.fixture(autouse=True)
def no_tokenizer(monkeypatch: pytest.MonkeyPatch):
    """Native engines search the query as a single term."""
    monkeypatch.setattr("kotoba.engine.words.tokenize", lambda text: [])
    monkeypatch.setattr("kotoba.engine.sentences.tokenize", lambda text: [])


# ---------------------------------------------------------------------------
# Words and sentences
# ---------------------------------------------------------------------------


def make_word(
    sequence: int,
    kana: str,
    kanji: str | None = None,
    glosses: list[str] | None = None,
    pos: list[str] | None = None,
    jlpt: int | None = None,
    priorities: list[str] | None = None,
    genki: int | None = None,
    german: list[str] | None = None,
    misc: list[str] | None = None,
) -> Word:
    """Build a word with an English sense and optionally a German one."""
    kana_dict = Dict(sequence=sequence, reading=kana, priorities=None if kanji else priorities, jlpt_lvl=jlpt)
    kanji_dict = None
    if kanji:
        kanji_dict = Dict(sequence=sequence, reading=kanji, kanji=True, is_main=True, priorities=priorities, jlpt_lvl=jlpt)

    senses = [Sense(language=Language.ENGLISH, glosses=glosses or [], part_of_speech=pos or [], misc=misc or [])]
    if german:
        senses.append(Sense(language=Language.GERMAN, glosses=german, part_of_speech=pos or []))

    return Word(
        sequence=sequence,
        reading=Reading(kana=kana_dict, kanji=kanji_dict),
        senses=senses,
        priorities=priorities,
        jlpt_lvl=jlpt,
        genki_lesson=genki,
    )


@pytest.fixture
def words() -> list[Word]:
    return [
        make_word(
            1358280,
            "たべる",
            "食べる",
            glosses=["to eat"],
            pos=["v1", "vt"],
            jlpt=5,
            priorities=["ichi1", "news1"],
            genki=3,
            german=["essen"],
        ),
        make_word(1000, "たべもの", "食べ物", glosses=["food"], pos=["n"], jlpt=4, priorities=["ichi1"], genki=5),
        make_word(1001, "かえる", "帰る", glosses=["to return", "to go home"], pos=["v5r", "vi"], jlpt=5),
        make_word(1002, "ふるい", "古い", glosses=["old"], pos=["adj-i"], jlpt=5),
        make_word(1003, "くう", "食う", glosses=["to eat"], pos=["v5u", "vt"]),
    ]


@pytest.fixture
def sentences() -> list[Sentence]:
    return [
        Sentence(
            id=1,
            japanese="私はりんごを食べる。",
            furigana="わたしはりんごをたべる。",
            translations={Language.ENGLISH: "I eat an apple.", Language.GERMAN: "Ich esse einen Apfel."},
            jlpt=5,
        ),
        Sentence(
            id=2,
            japanese="家に帰る。",
            furigana="いえにかえる。",
            translations={Language.ENGLISH: "I go home."},
            jlpt=4,
        ),
    ]


@pytest.fixture
def resources(words: list[Word], sentences: list[Sentence]) -> ResourceStorage:
    return ResourceStorage(WordStorage(words), SentenceStorage(sentences))


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> IndexRegistry:
    """Small indexes over the `words`, `sentences` and kanji fixtures."""
    registry = IndexRegistry()
    registry.add(
        Domain.WORDS_NATIVE,
        Index.build(
            [
                (["食べる", "たべる"], WordDocument(seq_ids=[1358280])),
                (["食べ物", "たべもの"], WordDocument(seq_ids=[1000])),
                (["帰る", "かえる"], WordDocument(seq_ids=[1001])),
                (["古い", "ふるい", "古"], WordDocument(seq_ids=[1002])),
                (["食う", "くう"], WordDocument(seq_ids=[1003])),
            ]
        ),
    )
    registry.add(
        Domain.WORDS_FOREIGN,
        Index.build(
            [
                (["to eat", "to", "eat"], WordDocument(seq_ids=[1358280])),
                (["to eat", "to", "eat"], WordDocument(seq_ids=[1003])),
                (["food"], WordDocument(seq_ids=[1000])),
                (["to return", "to go home", "to", "return", "go", "home"], WordDocument(seq_ids=[1001])),
                (["old"], WordDocument(seq_ids=[1002])),
            ]
        ),
        Language.ENGLISH,
    )
    registry.add(
        Domain.WORDS_FOREIGN,
        Index.build([(["essen"], WordDocument(seq_ids=[1358280]))]),
        Language.GERMAN,
    )
    registry.add(
        Domain.SENTENCES_NATIVE,
        Index.build(
            [
                (["食べる", "私", "りんご", "食"], SentenceDocument(seq_id=1, jlpt=5)),
                (["帰る", "家"], SentenceDocument(seq_id=2, jlpt=4)),
            ]
        ),
    )
    registry.add(
        Domain.SENTENCES_FOREIGN,
        Index.build(
            [
                (["i eat an apple", "i", "eat", "an", "apple"], SentenceDocument(seq_id=1)),
                (["i go home", "i", "go", "home"], SentenceDocument(seq_id=2)),
            ]
        ),
        Language.ENGLISH,
    )
    registry.add(
        Domain.KANJI,
        Index.build(
            [
                (["食"], KanjiDocument(literal="食")),
                (["古"], KanjiDocument(literal="古")),
                (["新"], KanjiDocument(literal="新")),
            ]
        ),
    )
    registry.add(
        Domain.KANJI_MEANING,
        Index.build(
            [
                (["eat", "food"], KanjiDocument(literal="食")),
                (["old"], KanjiDocument(literal="古")),
                (["new"], KanjiDocument(literal="新")),
            ]
        ),
        Language.ENGLISH,
    )
    return registry


# ---------------------------------------------------------------------------
# SQLite dictionary
# ---------------------------------------------------------------------------

# (sequence, reading, kanji, is_main, priorities, jlpt_lvl)
DICT_ROWS = [
    (1358280, "たべる", 0, 0, ["ichi1", "news1"], 5),
    (1358280, "食べる", 1, 1, ["ichi1", "news1"], 5),
    (1000, "たべもの", 0, 0, ["ichi1"], 4),
    (1000, "食べ物", 1, 1, ["ichi1"], 4),
    (1002, "ふるい", 0, 0, None, 5),
    (1002, "古い", 1, 1, None, 5),
    (1004, "ふるいえ", 0, 0, ["news1"], 5),
    (1004, "古家", 1, 1, ["news1"], 5),
    (1005, "テスト", 0, 0, ["gai1"], None),
    (1006, "しん", 0, 0, None, None),
    (1006, "新", 1, 1, None, None),
    (1007, "あたらしい", 0, 0, ["ichi1"], 5),
    (1007, "新しい", 1, 1, ["ichi1"], 5),
    (1008, "100%", 0, 0, None, None),
]

# (id, literal, meaning, jlpt, onyomi, kunyomi)
KANJI_ROWS = [
    (1, "食", ["eat", "food"], 4, ["ショク", "ジキ"], ["く.う", "た.べる"]),
    (2, "古", ["old"], 4, ["コ"], ["ふる.い", "ふる-"]),
    (3, "新", ["new"], 4, ["シン"], ["あたら.しい", "あら.た"]),
    (4, "人", ["person"], 5, ["ジン", "ニン"], []),
]


def create_dictionary_db(path: Path) -> Path:
    conn = sqlite3.connect(path)
    init_schema(conn)
    for row_id, (sequence, reading, kanji, is_main, priorities, jlpt) in enumerate(DICT_ROWS, 1):
        conn.execute(
            "INSERT INTO dict (id, sequence, reading, kanji, is_main, priorities, jlpt_lvl) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (row_id, sequence, reading, kanji, is_main, json.dumps(priorities) if priorities else None, jlpt),
        )
    for kanji_id, literal, meaning, jlpt, onyomi, kunyomi in KANJI_ROWS:
        conn.execute(
            "INSERT INTO kanji (id, literal, meaning, stroke_count, jlpt, onyomi, kunyomi) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (kanji_id, literal, json.dumps(meaning), 5, jlpt, json.dumps(onyomi), json.dumps(kunyomi)),
        )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def dict_db(tmp_path: Path) -> Path:
    """A dictionary database with a handful of entries and kanji."""
    return create_dictionary_db(tmp_path / "dictionary.db")


@pytest.fixture
def kanji_store(dict_db: Path):
    store = KanjiStore(dict_db)
    yield store
    store.close()


@pytest.fixture
def dict_store(dict_db: Path):
    store = DictStore(dict_db, workers=2)
    yield store
    store.shutdown()


@pytest.fixture
def suggestion_dir(tmp_path: Path) -> Path:
    """Suggestion files for English and German."""
    directory = tmp_path / "suggestions"
    directory.mkdir()
    (directory / "en-US").write_text(
        "eating,1600\neat,1358280\neat out,1500\nfood,1000\nold,1002\n",
        encoding="utf-8",
    )
    (directory / "de-DE").write_text("essen,1358280\nEssen gehen,1700\n", encoding="utf-8")
    return directory


@pytest.fixture
def initialized(
    monkeypatch: pytest.MonkeyPatch,
    registry: IndexRegistry,
    resources: ResourceStorage,
    kanji_store: KanjiStore,
    dict_store: DictStore,
):
    """Publish the fixture indexes, resources and stores process-wide."""
    monkeypatch.setattr("kotoba.engine.index._registry", registry)
    monkeypatch.setattr("kotoba.storage.resources._resources", resources)
    monkeypatch.setattr("kotoba.storage.kanji._kanji_store", kanji_store)
    monkeypatch.setattr("kotoba.storage.dictionary._dict_store", dict_store)
    return registry, resources
