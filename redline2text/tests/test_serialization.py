import json
import logging
import unittest

import pytest

from redline2text.extractors.data_types import (
    ChangeType,
    TrackedChangesContent,
    TrackedItem,
)
from redline2text.extractors.ms_modern.docx_changes_extractor import read_docx_changes
from redline2text.extractors.serialization import (
    deserialize_extraction,
    serialize_extraction,
)

logger = logging.getLogger(__name__)

tc = unittest.TestCase()
tc.maxDiff = None

BODY = (
    '<w:p><w:pPr><w:outlineLvl w:val="0"/></w:pPr><w:r><w:t>Scope</w:t></w:r></w:p>'
    '<w:p><w:ins w:id="1" w:author="Alice" w:date="2024-02-02T12:00:00Z">'
    "<w:r><w:t>new clause</w:t></w:r></w:ins>"
    '<w:del w:id="2"><w:r><w:delText>old clause</w:delText></w:r></w:del>'
    '<w:r><w:commentReference w:id="11"/></w:r></w:p>'
)


@pytest.fixture
def content(make_docx) -> TrackedChangesContent:
    buffer = make_docx(BODY, comments={"11": "Check with legal"})
    return next(read_docx_changes(buffer, path="clauses.docx"))


def test_serialize_for_json(content) -> None:
    payload = content.to_json()
    tc.assertIsInstance(payload, dict)

    # must survive a real JSON round trip
    payload = json.loads(json.dumps(payload))

    tc.assertEqual("TrackedChangesContent", payload["_type"])
    tc.assertEqual("Scope\nnew clauseold clause\n", payload["full_text"])
    tc.assertEqual(3, len(payload["items"]))

    first = payload["items"][0]
    tc.assertEqual("TrackedItem", first["_type"])
    tc.assertEqual("INSERTION", first["kind"])
    tc.assertEqual("ins-1-0", first["id"])
    tc.assertEqual("Scope", first["section_context"])
    tc.assertEqual("2024-02-02T12:00:00Z", first["date"])

    tc.assertEqual("TrackedChangesMetadata", payload["metadata"]["_type"])
    tc.assertEqual("clauses.docx", payload["metadata"]["filename"])
    tc.assertEqual(2, payload["metadata"]["paragraph_count"])


def test_deserialize_round_trip(content) -> None:
    payload = json.loads(json.dumps(serialize_extraction(content)))

    restored = deserialize_extraction(payload)

    tc.assertIsInstance(restored, TrackedChangesContent)
    tc.assertEqual(content.full_text, restored.full_text)
    tc.assertIsInstance(restored.items, tuple)
    tc.assertEqual(content.items, restored.items)
    tc.assertIs(ChangeType.COMMENT, restored.items[2].kind)
    tc.assertEqual("Check with legal", restored.items[2].comment_content)
    tc.assertEqual(content.metadata, restored.metadata)


def test_persisted_items_reattach_after_reparse(make_docx, content) -> None:
    stored = {item.id: "reviewed" for item in content.items}
    saved = json.loads(json.dumps(content.to_json()))

    reparsed = next(
        read_docx_changes(
            make_docx(BODY, comments={"11": "Check with legal"}), path="clauses.docx"
        )
    )
    restored = deserialize_extraction(saved)

    tc.assertListEqual(
        [item.id for item in restored.items], [item.id for item in reparsed.items]
    )
    for item in reparsed.items:
        tc.assertEqual("reviewed", stored[item.id])


def test_serialize_single_item() -> None:
    item = TrackedItem(
        id="del-0-0",
        kind=ChangeType.DELETION,
        text="x",
        context="x y",
        section_context="Start of Document",
        author="Unknown",
        paragraph_index=1,
    )

    payload = serialize_extraction(item)

    tc.assertEqual("DELETION", payload["kind"])
    tc.assertIsNone(payload["comment_content"])
    tc.assertEqual(item, deserialize_extraction(payload))


def test_deserialize_rejects_invalid_input() -> None:
    with pytest.raises(ValueError):
        deserialize_extraction(["not", "a", "dict"])  # type: ignore[arg-type]

    with pytest.raises(ValueError):
        deserialize_extraction({"full_text": "no type marker"})
