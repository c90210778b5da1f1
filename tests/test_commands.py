"""
Integration tests for ScanCommand: store lifecycle around one orchestrator run.
"""
import sqlite3
from pathlib import Path
from unittest import mock
import pytest
from phashsort import ScanCommand, ScanParams, Fingerprint, HashAlgorithm
from phashsort.exceptions import GroupCopyError, StoreError
from phashsort.services.file_service import FileService
from phashsort.services.fingerprint_store import SqliteFingerprintStore


def names_in(directory: Path) -> set:
    return {p.name for p in Path(directory).iterdir()}


class TestNonPersistentRuns:

    def test_database_dropped_after_run(self, scenario_files, scan_dir, tmp_path):
        db = tmp_path / "state.db"
        params = ScanParams(input_dir=str(scan_dir), db_path=str(db))

        stats = ScanCommand().execute(params)

        assert stats.images_processed == 3
        assert stats.duplicate_groups == 1
        assert not db.exists(), "Stateless run must not leave the database behind"

    def test_stale_database_dropped_before_run(self, scenario_files, scan_dir, tmp_path):
        db = tmp_path / "state.db"
        with SqliteFingerprintStore(str(db)) as stale:
            stale.insert("A.png", Fingerprint("1111111111111111"))

        stats = ScanCommand().execute(ScanParams(input_dir=str(scan_dir), db_path=str(db)))

        assert stats.skipped_known == 0
        assert stats.duplicate_groups == 1

    def test_rerun_rediscovers_identical_groups(self, scenario_files, scan_dir, tmp_path):
        db = str(tmp_path / "state.db")
        first_out = tmp_path / "first"
        second_out = tmp_path / "second"

        first_out.mkdir()
        second_out.mkdir()

        first = ScanCommand().execute(ScanParams(str(scan_dir), str(first_out), db_path=db))
        second = ScanCommand().execute(ScanParams(str(scan_dir), str(second_out), db_path=db))

        assert first.images_processed == second.images_processed == 3
        assert first.duplicate_groups == second.duplicate_groups == 1
        assert names_in(first_out / "1") == names_in(second_out / "1") == {"A.png", "B.png"}

    def test_database_created_notice(self, scenario_files, scan_dir, tmp_path):
        messages = []
        ScanCommand().execute(
            ScanParams(input_dir=str(scan_dir), db_path=str(tmp_path / "s.db")),
            message_callback=messages.append
        )
        assert messages[0] == "Database created"

    def test_database_dropped_after_fatal_copy_error(self, scenario_files, scan_dir, tmp_path):
        db = tmp_path / "state.db"
        with mock.patch.object(FileService, "copy_file",
                               side_effect=GroupCopyError("a", "b", "disk full")):
            with pytest.raises(GroupCopyError):
                ScanCommand().execute(ScanParams(input_dir=str(scan_dir), db_path=str(db)))
        assert not db.exists()


class TestPersistentRuns:

    def test_second_run_over_unchanged_directory(self, scan_dir, make_image, tmp_path):
        for seed in range(1, 4):
            make_image(scan_dir / f"img{seed}.png", seed=seed)
        db = tmp_path / "state.db"
        params = ScanParams(input_dir=str(scan_dir), db_path=str(db), persist=True)

        first = ScanCommand().execute(params)
        second = ScanCommand().execute(params)

        assert db.exists()
        assert first.images_processed == second.images_processed == 3
        assert second.skipped_known == 3
        assert second.duplicate_groups == 0

    def test_no_second_group_directory_for_same_set(self, scenario_files, scan_dir, tmp_path):
        params = ScanParams(input_dir=str(scan_dir), db_path=str(tmp_path / "s.db"), persist=True)

        ScanCommand().execute(params)
        ScanCommand().execute(params)

        assert not (scan_dir / "2").exists()
        assert names_in(scan_dir / "1") == {"A.png", "B.png"}

    def test_only_new_files_are_decoded(self, scan_dir, make_image, copy_image, tmp_path):
        a = make_image(scan_dir / "A.png", seed=1)
        make_image(scan_dir / "C.png", seed=2)
        params = ScanParams(input_dir=str(scan_dir), db_path=str(tmp_path / "s.db"), persist=True)
        ScanCommand().execute(params)

        copy_image(a, scan_dir / "A_copy.png")
        command = ScanCommand()
        stats = command.execute(params)

        assert stats.skipped_known == 2
        assert stats.images_processed == 3
        assert command.get_groups() == {1: "A.png"}
        assert names_in(scan_dir / "1") == {"A.png", "A_copy.png"}


    @pytest.mark.parametrize("changed", [
        {"algorithm": HashAlgorithm.PERCEPTUAL},
        {"hash_size": 16},
    ])
    def test_changed_hash_settings_rebuild_fingerprints(self, scan_dir, make_image, copy_image,
                                                        tmp_path, changed):
        a = make_image(scan_dir / "A.png", seed=1)
        db = str(tmp_path / "s.db")
        ScanCommand().execute(ScanParams(input_dir=str(scan_dir), db_path=db, persist=True))

        copy_image(a, scan_dir / "A_copy.png")
        messages = []
        stats = ScanCommand().execute(
            ScanParams(input_dir=str(scan_dir), db_path=db, persist=True, **changed),
            message_callback=messages.append
        )

        assert stats.skipped_known == 0
        assert stats.images_processed == 2
        assert stats.duplicate_groups == 1
        assert names_in(scan_dir / "1") == {"A.png", "A_copy.png"}
        assert any("rebuilding" in message for message in messages)

    def test_hash_settings_recorded(self, scan_dir, make_image, tmp_path):
        make_image(scan_dir / "A.png", seed=1)
        db = str(tmp_path / "s.db")
        ScanCommand().execute(ScanParams(input_dir=str(scan_dir), db_path=db, persist=True,
                                         algorithm=HashAlgorithm.AVERAGE, hash_size=12))

        with SqliteFingerprintStore(db) as store:
            assert store.hash_config() == "ahash:12"
            assert store.exists("A.png")

    def test_unchanged_hash_settings_keep_fingerprints(self, scan_dir, make_image, tmp_path):
        make_image(scan_dir / "A.png", seed=1)
        params = ScanParams(input_dir=str(scan_dir), db_path=str(tmp_path / "s.db"), persist=True)
        ScanCommand().execute(params)

        messages = []
        stats = ScanCommand().execute(params, message_callback=messages.append)

        assert stats.skipped_known == 1
        assert not any("rebuilding" in message for message in messages)

    def test_records_without_hash_settings_are_rebuilt(self, scan_dir, make_image, tmp_path):
        make_image(scan_dir / "A.png", seed=1)
        db = str(tmp_path / "s.db")
        conn = sqlite3.connect(db)
        conn.execute("CREATE TABLE images (filename TEXT PRIMARY KEY NOT NULL, imagehash TEXT UNIQUE)")
        conn.execute("INSERT INTO images VALUES ('A.png', 'ffffffffffffffff')")
        conn.commit()
        conn.close()

        stats = ScanCommand().execute(ScanParams(input_dir=str(scan_dir), db_path=db, persist=True))

        assert stats.skipped_known == 0
        assert stats.images_processed == 1
        with SqliteFingerprintStore(db) as store:
            assert store.hash_config() == "dhash:8"

class TestFatalStoreErrors:

    def test_reset_failure_is_fatal(self, scan_dir):
        store = mock.Mock()
        store.reset.side_effect = StoreError("cannot drop")
        with pytest.raises(StoreError, match="cannot drop"):
            ScanCommand(store=store).execute(ScanParams(input_dir=str(scan_dir)))
        store.ensure_initialized.assert_not_called()

    def test_schema_failure_is_fatal(self, scan_dir, tmp_path):
        params = ScanParams(input_dir=str(scan_dir), db_path=str(tmp_path / "no" / "s.db"), persist=True)
        with pytest.raises(StoreError):
            ScanCommand().execute(params)

    def test_missing_input_directory(self, tmp_path):
        params = ScanParams(input_dir=str(tmp_path / "missing"), db_path=str(tmp_path / "s.db"))
        with pytest.raises(RuntimeError, match="does not exist"):
            ScanCommand().execute(params)
        assert not (tmp_path / "s.db").exists()
