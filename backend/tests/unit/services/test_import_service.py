"""Unit tests for ImportService against the transactional test store."""

from __future__ import annotations

import json
import logging

import pytest
from sqlalchemy.exc import SQLAlchemyError
from worldimport.core.errors import EmptyImportError, PayloadError, StoreWriteError
from worldimport.models import GameAsset, GameLevel, GameUser
from worldimport.repositories import AssetDependencyRepository, AssetRepository, UserRepository
from worldimport.services.importer.service import ImportService

from tests.factories.user import GameUserFactory

ALICE_ID = "64b7f0c2a1d3e4f5a6b7c8d9"


def make_payload(users=(), levels=(), relations=(), assets=()) -> dict:
    """Build an import document keyed the way the exporter writes it."""
    return {
        "Users": list(users),
        "Levels": list(levels),
        "Relations": list(relations),
        "Assets": list(assets),
    }


class TestImportService:
    # -------------------------- Fixtures ---------------------------------- #

    @pytest.fixture()
    def service(self, service_ctx) -> ImportService:
        return ImportService(ctx=service_ctx)

    @pytest.fixture()
    def users(self, session) -> UserRepository:
        return UserRepository(session=session)

    def run(self, service: ImportService, payload: dict):
        return service.import_batch(service.parse_batch(payload))

    # -------------------------- Identity ---------------------------------- #

    def test_reimport_keeps_single_user_with_stable_id(self, service, users):
        """
        GIVEN the same batch imported twice
        WHEN the second run sees "alice" again with a different id
        THEN there is still one "alice" and its id is the first run's id.
        """
        self.run(service, make_payload(users=[{"Username": "alice"}]))
        first_id = users.get_by_username("alice").user_id

        result = self.run(
            service, make_payload(users=[{"Username": "alice", "UserId": ALICE_ID}])
        )

        assert users.count() == 1
        assert users.get_by_username("alice").user_id == first_id
        assert result.users_existing == 1
        assert result.users_created == 0

    def test_existing_row_is_updated_in_place(self, service, session, users):
        stored = GameUserFactory(username="alice", description="old")

        self.run(service, make_payload(users=[{"Username": "alice", "Description": "new"}]))

        assert session.get(GameUser, stored.user_id).description == "new"
        assert users.count() == 1

    # -------------------------- Linking ----------------------------------- #

    def test_level_without_owner_is_published_by_first_user(self, service, session):
        """
        GIVEN one user "alice" and one level without an owner
        WHEN imported
        THEN the level's publisher is alice.
        """
        self.run(
            service,
            make_payload(users=[{"Username": "alice"}], levels=[{"LevelId": 42, "Title": "Hub"}]),
        )

        assert session.get(GameLevel, 42).publisher.username == "alice"

    def test_asset_uploader_and_icon_flag(self, service, session):
        result = self.run(
            service,
            make_payload(
                users=[{"Username": "alice", "UserId": ALICE_ID}],
                levels=[{"LevelId": 1, "IconHash": "icon"}],
                assets=[{"AssetHash": "icon"}, {"AssetHash": "texture"}],
            ),
        )
        icon = session.get(GameAsset, "icon")
        texture = session.get(GameAsset, "texture")
        assert icon.original_uploader_id == ALICE_ID
        assert icon.is_level_icon
        assert texture.as_mainline_icon_hash == ""
        assert not texture.is_level_icon
        assert result.fallback_owner_id == ALICE_ID

    # -------------------------- Sanitization ------------------------------ #

    def test_null_username_and_title_are_sanitized(self, service, session):
        """
        GIVEN a user with a null display name and a level with a null title
        WHEN imported
        THEN the user is named user_<id> and the title is stored as "".
        """
        self.run(
            service,
            make_payload(
                users=[{"Username": None, "UserId": ALICE_ID}],
                levels=[{"LevelId": 3, "Title": None}],
            ),
        )

        assert session.get(GameUser, ALICE_ID).username == f"user_{ALICE_ID}"
        assert session.get(GameLevel, 3).title == ""

    def test_placeholder_shaped_username_is_flagged(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            self.run(service, make_payload(users=[{"Username": "dummy_user_3"}]))

        assert "named like a placeholder" in caplog.text

    # -------------------------- Relations --------------------------------- #

    def test_duplicate_edges_are_stored_once(self, service, session):
        edge = {"Dependent": "a", "Dependency": "b"}
        payload = make_payload(users=[{"Username": "alice"}], relations=[edge, edge])

        first = self.run(service, payload)
        second = self.run(service, make_payload(users=[{"Username": "alice"}], relations=[edge]))

        edges = AssetDependencyRepository(session=session)
        assert edges.existing_pairs() == {("a", "b")}
        assert (first.relations, first.relations_skipped) == (1, 1)
        assert (second.relations, second.relations_skipped) == (0, 1)

    # -------------------------- Failures ---------------------------------- #

    def test_empty_batch_is_rejected_without_writes(self, service, users):
        before = users.count()

        with pytest.raises(EmptyImportError):
            self.run(service, make_payload(levels=[{"LevelId": 1}]))

        assert users.count() == before

    def test_write_failure_rolls_back_the_whole_batch(self, service, users, monkeypatch):
        """
        GIVEN a store that fails while staging assets
        WHEN the batch is imported
        THEN a StoreWriteError is raised and the users staged earlier are gone.
        """

        def _boom(self, instance):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(AssetRepository, "merge", _boom)

        with pytest.raises(StoreWriteError, match="disk full"):
            self.run(
                service,
                make_payload(users=[{"Username": "alice"}], assets=[{"AssetHash": "x"}]),
            )

        assert users.get_by_username("alice") is None

    # -------------------------- Reading ----------------------------------- #

    def test_load_batch_reads_file(self, service, tmp_path):
        path = tmp_path / "import.json"
        path.write_text(json.dumps(make_payload(users=[{"Username": "alice"}])), encoding="utf-8")

        batch = service.load_batch(path)

        assert [u["username"] for u in batch.users] == ["alice"]

    @pytest.mark.parametrize(
        "content", ["{not json", "[1, 2]", '{"Relations": [{"Dependent": 1}]}']
    )
    def test_load_batch_rejects_bad_payloads(self, service, tmp_path, content):
        path = tmp_path / "import.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(PayloadError):
            service.load_batch(path)

    def test_load_batch_accepts_byte_order_mark(self, service, tmp_path):
        """
        GIVEN a batch file saved with a UTF-8 byte-order mark
        WHEN it is loaded
        THEN the mark is dropped and the users are read.
        """
        path = tmp_path / "import.json"
        document = json.dumps(make_payload(users=[{"Username": "alice"}]))
        path.write_bytes(b"\xef\xbb\xbf" + document.encode("utf-8"))

        batch = service.load_batch(path)

        assert [u["username"] for u in batch.users] == ["alice"]

    def test_load_batch_rejects_invalid_utf8(self, service, tmp_path):
        path = tmp_path / "import.json"
        path.write_bytes(b'{"Users": [{"Username": "\xff"}]}')

        with pytest.raises(PayloadError, match="Error reading"):
            service.load_batch(path)

    def test_load_batch_missing_file(self, service, tmp_path):
        with pytest.raises(PayloadError, match="Error reading"):
            service.load_batch(tmp_path / "absent.json")
