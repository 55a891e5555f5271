"""Shared test fixtures."""

import copy
import json
import tempfile
from pathlib import Path

import pytest

TEST_ENTRIES = [{
    "title": "Test iOS Entry",
    "platform": "ios",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "simpleString",
            "values": [{"value": "This is iOS"}],
        },
    ],
}, {
    "title": "Test Android Entry",
    "platform": "android",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "simpleString",
            "values": [{"value": "This is Android"}],
        },
    ],
}, {
    "title": "Test Cross Platform Entry",
    "platform": "all",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "universalString",
            "values": [{"value": "This is cross platform"}],
        },
    ],
}]

DIFF_ENTRIES = [{
    "title": "Test iOS Entry",
    "platform": "ios",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "simpleString",
            "values": [{"value": "This is iOS v2"}],
        },
    ],
}, {
    "title": "Test Android Entry",
    "platform": "android",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "simpleString",
            "values": [{"value": "This is Android v2"}],
        },
    ],
}, {
    "title": "Test Cross Platform Entry",
    "platform": "all",
    "lang": "en",
    "entries": [
        {
            "type": "string",
            "key": "universalString",
            "values": [{"value": "This is cross platform"}],
        },
    ],
}]


def make_document(title, lang, entries, platform=None, base_name=None):
    """Build a raw content document."""
    document = {"title": title, "lang": lang, "entries": entries}
    if platform is not None:
        document["platform"] = platform
    if base_name is not None:
        document["baseName"] = base_name
    return document


def write_documents(folder, documents):
    """Write documents as numbered JSON files."""
    folder.mkdir(parents=True, exist_ok=True)
    for i, document in enumerate(documents):
        (folder / f"{i:02d}.json").write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_entries():
    """The base fixture documents."""
    return copy.deepcopy(TEST_ENTRIES)


@pytest.fixture
def diff_entries():
    """The fixture documents with updated platform strings."""
    return copy.deepcopy(DIFF_ENTRIES)


@pytest.fixture
def content_folders(temp_dir, test_entries, diff_entries):
    """Write the base and updated fixture documents to two content folders."""
    before = temp_dir / "before"
    after = temp_dir / "after"
    write_documents(before, test_entries)
    write_documents(after, diff_entries)
    return before, after


@pytest.fixture
def localized_documents():
    """Documents covering two cultures, a base name, and descriptions."""
    return [
        make_document("Common", "en", [
            {"key": "ok", "description": "Confirm button", "values": [{"value": "OK"}]},
            {"key": "greeting", "values": [{"value": "Hello %@"}]},
        ]),
        make_document("Common AU", "en-AU", [
            {"key": "greeting", "values": [{"value": "G'day %@"}]},
        ]),
        make_document("Checkout", "en", [
            {"key": "title", "description": "Screen title", "values": [{"value": "Checkout"}]},
        ], base_name="checkout."),
    ]


@pytest.fixture
def document_factory():
    """Return the raw document builder."""
    return make_document


@pytest.fixture
def write_content():
    """Return the content folder writer."""
    return write_documents
