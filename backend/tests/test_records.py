"""
Tests for the video record store, task result ledger and concat job registry.
"""

import threading

import pytest

from movie_edit.records import (
    VideoRecordStore,
    TaskResultLedger,
    ConcatJobRegistry,
    CutOperation,
    ConcatOperation,
    ConcatJob,
    ConcatJobStatus,
    VideoNotFoundError,
    ConcatJobNotFoundError,
)


class TestVideoRecordStore:

    def setup_method(self):
        self.store = VideoRecordStore()

    def test_create_starts_with_empty_histories(self):
        record = self.store.create("v1", "./uploads/v1.mp4")

        assert record.original_path == "./uploads/v1.mp4"
        assert record.cut_history == []
        assert record.concat_history == []
        assert record.final_path is None

    def test_create_rejects_duplicate_ids(self):
        self.store.create("v1", "a.mp4")
        with pytest.raises(ValueError):
            self.store.create("v1", "b.mp4")

    def test_get_or_create_is_lazy_and_stable(self):
        first = self.store.get_or_create("v1", "a.mp4")
        second = self.store.get_or_create("v1", "b.mp4")

        assert first.original_path == second.original_path == "a.mp4"
        assert self.store.count() == 1

    def test_get_or_raise_unknown(self):
        with pytest.raises(VideoNotFoundError) as exc_info:
            self.store.get_or_raise("missing")
        assert exc_info.value.status_code == 404

    def test_append_cut_grows_history_in_order(self):
        self.store.create("v1", "v1.mp4")
        self.store.append_cut("v1", CutOperation(start_time="1", end_time="2", output_path="cut_1.mp4"))
        self.store.append_cut("v1", CutOperation(start_time="3", end_time="4", output_path="cut_3.mp4"))

        history = self.store.get("v1").cut_history
        assert [op.output_path for op in history] == ["cut_1.mp4", "cut_3.mp4"]

    def test_append_cut_creates_record_with_output_as_origin(self):
        self.store.append_cut("ghost", CutOperation(start_time="1", end_time="2", output_path="cut_ghost.mp4"))

        record = self.store.get("ghost")
        assert record.original_path == "cut_ghost.mp4"
        assert len(record.cut_history) == 1

    def test_append_concat_creates_record_with_output_as_origin(self):
        operation = ConcatOperation(input_video_ids=["a", "b"], output_path="concat_1.mp4")

        record = self.store.append_concat("a", operation)

        assert record.original_path == "concat_1.mp4"
        assert record.concat_history == [operation]

    def test_set_final_overwrites(self):
        self.store.create("v1", "v1.mp4")
        self.store.set_final("v1", "cut_1.mp4")
        self.store.set_final("v1", "cut_2.mp4")

        assert self.store.get("v1").final_path == "cut_2.mp4"

    def test_returned_records_are_copies(self):
        self.store.create("v1", "v1.mp4")

        leaked = self.store.get("v1")
        leaked.cut_history.append(CutOperation(start_time="1", end_time="2", output_path="x"))
        leaked.final_path = "tampered"

        record = self.store.get("v1")
        assert record.cut_history == []
        assert record.final_path is None

    def test_list_all(self):
        self.store.create("v1", "v1.mp4")
        self.store.create("v2", "v2.mp4")

        assert {r.id for r in self.store.list_all()} == {"v1", "v2"}

    def test_concurrent_appends_are_not_lost(self):
        self.store.create("v1", "v1.mp4")

        def append_many(offset):
            for i in range(200):
                self.store.append_cut(
                    "v1", CutOperation(start_time=str(offset + i), end_time="x", output_path=f"{offset + i}.mp4")
                )

        threads = [threading.Thread(target=append_many, args=(n * 1000,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(self.store.get("v1").cut_history) == 1600


class TestTaskResultLedger:

    def setup_method(self):
        self.ledger = TaskResultLedger()

    def test_records_are_append_only_and_ordered(self):
        self.ledger.record_cut_output("v1", "cut_v1_1.mp4")
        self.ledger.record_cut_output("v2", "cut_v2_1.mp4")
        self.ledger.record_concat_output("job1", "concat_1.mp4")

        assert self.ledger.cut_outputs() == ["cut_v1_1.mp4", "cut_v2_1.mp4"]
        assert self.ledger.concat_outputs() == ["concat_1.mp4"]
        assert len(self.ledger) == 3

    def test_lookup_returns_first_entry_for_owner(self):
        self.ledger.record_cut_output("v1", "cut_v1_1.mp4")
        self.ledger.record_cut_output("v1", "cut_v1_9.mp4")

        assert self.ledger.find_cut_output("v1") == "cut_v1_1.mp4"

    def test_lookup_never_matches_on_substring(self):
        """An id that is a substring of another id's path must not match."""
        self.ledger.record_cut_output("abc-123", "cut_abc-123_1.mp4")
        self.ledger.record_concat_output("job-1", "concat_123.mp4")

        assert self.ledger.find_cut_output("abc") is None
        assert self.ledger.find_concat_output("123") is None
        assert self.ledger.find_concat_output("job-1") == "concat_123.mp4"

    def test_snapshots_do_not_see_later_appends(self):
        self.ledger.record_cut_output("v1", "a.mp4")

        snapshot = self.ledger.cut_entries()
        self.ledger.record_cut_output("v1", "b.mp4")

        assert [e.path for e in snapshot] == ["a.mp4"]


class TestConcatJobRegistry:

    def setup_method(self):
        self.registry = ConcatJobRegistry()
        self.job = ConcatJob(input_video_ids=["a"], input_paths=["/data/a.mp4"])
        self.registry.add(self.job)

    def test_new_job_is_queued(self):
        assert self.registry.get(self.job.id).status == ConcatJobStatus.QUEUED

    def test_lifecycle_to_completed(self):
        self.registry.mark_running(self.job.id)
        assert self.registry.get(self.job.id).started_at is not None

        self.registry.mark_completed(self.job.id, "/data/concat_1.mp4")

        job = self.registry.get(self.job.id)
        assert job.status == ConcatJobStatus.COMPLETED
        assert job.output_path == "/data/concat_1.mp4"
        assert job.is_terminal()

    def test_lifecycle_to_failed(self):
        self.registry.mark_running(self.job.id)
        self.registry.mark_failed(self.job.id, "FFmpeg failed", "stderr text")

        job = self.registry.get(self.job.id)
        assert job.status == ConcatJobStatus.FAILED
        assert job.failure_reason == "FFmpeg failed"
        assert job.details == "stderr text"

    def test_unknown_job(self):
        with pytest.raises(ConcatJobNotFoundError):
            self.registry.get_or_raise("nope")
        with pytest.raises(ConcatJobNotFoundError):
            self.registry.mark_running("nope")

    def test_duplicate_job_rejected(self):
        with pytest.raises(ValueError):
            self.registry.add(self.job)
