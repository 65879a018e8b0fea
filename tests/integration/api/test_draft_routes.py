"""
API tests for draft storage.
"""

from __future__ import annotations

import json

from blockdoc.core.services.codec import blocks_to_json
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import TableCell, TableMetadata

DRAFT_URL = "/api/drafts/user-1/section-1"


class TestDraftLifecycle:
    def test_missing_draft(self, client) -> None:
        assert client.get(DRAFT_URL).status_code == 404

    def test_put_get_delete(self, client, three_blocks) -> None:
        content = blocks_to_json(three_blocks)
        assert client.put(DRAFT_URL, json={"content": content}).status_code == 204

        response = client.get(DRAFT_URL)
        assert response.status_code == 200
        body = response.json()
        assert body["content"] == content
        assert [b["id"] for b in body["blocks"]] == [b.id for b in three_blocks]

        assert client.delete(DRAFT_URL).status_code == 204
        assert client.get(DRAFT_URL).status_code == 404

    def test_drafts_are_per_user_and_section(self, client) -> None:
        client.put(DRAFT_URL, json={"content": "[]"})
        assert client.get("/api/drafts/user-2/section-1").status_code == 404

    def test_hyphenated_ids_do_not_share_a_draft(self, client) -> None:
        client.put("/api/drafts/alice-1/sec", json={"content": "[]"})
        assert client.get("/api/drafts/alice/1-sec").status_code == 404

    def test_content_normalized(self, client) -> None:
        raw = '[ {"type": "divider", "id": "d1", "createdAt": 1, "updatedAt": 1, "unknown": true} ]'
        client.put(DRAFT_URL, json={"content": raw})
        stored = client.get(DRAFT_URL).json()["content"]
        assert json.loads(stored) == [
            {"id": "d1", "type": "divider", "content": "", "createdAt": 1, "updatedAt": 1}
        ]


class TestDraftValidation:
    def test_unreadable_rejected(self, client) -> None:
        response = client.put(DRAFT_URL, json={"content": "not json"})
        assert response.status_code == 422
        assert client.get(DRAFT_URL).status_code == 404

    def test_invalid_blocks_rejected(self, client) -> None:
        ragged = TableMetadata(rows=[[TableCell(), TableCell()], [TableCell()]])
        content = blocks_to_json([create_block("table", metadata=ragged)])
        response = client.put(DRAFT_URL, json={"content": content})
        assert response.status_code == 422
        assert response.json()["detail"][0]["code"] == "ragged_table"
