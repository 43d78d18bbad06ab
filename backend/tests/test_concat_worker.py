"""
Tests for the background concat worker.
"""

import threading
import time

from movie_edit.execution import ConcatWorker
from movie_edit.records import ConcatJob


def make_job(name: str) -> ConcatJob:
    return ConcatJob(input_video_ids=[name], input_paths=[f"/data/{name}.mp4"])


class TestConcatWorker:

    def test_submit_returns_before_job_runs(self):
        release = threading.Event()
        handled = []

        def handler(job):
            release.wait(5)
            handled.append(job.input_video_ids[0])

        worker = ConcatWorker(handler)
        try:
            worker.submit(make_job("a"))
            assert handled == []
            assert worker.pending_count == 1
        finally:
            release.set()
            assert worker.wait_idle(timeout=5)
            worker.stop(timeout=5)

        assert handled == ["a"]

    def test_jobs_run_in_fifo_order(self):
        handled = []
        worker = ConcatWorker(lambda job: handled.append(job.input_video_ids[0]))

        for name in ["first", "second", "third"]:
            worker.submit(make_job(name))

        assert worker.wait_idle(timeout=5)
        worker.stop(timeout=5)
        assert handled == ["first", "second", "third"]

    def test_failing_job_does_not_stop_worker(self):
        handled = []

        def handler(job):
            if job.input_video_ids[0] == "bad":
                raise RuntimeError("boom")
            handled.append(job.input_video_ids[0])

        worker = ConcatWorker(handler)
        worker.submit(make_job("bad"))
        worker.submit(make_job("good"))

        assert worker.wait_idle(timeout=5)
        worker.stop(timeout=5)
        assert handled == ["good"]

    def test_only_one_job_runs_at_a_time(self):
        active = []
        overlaps = []
        lock = threading.Lock()

        def handler(job):
            with lock:
                active.append(job.id)
                if len(active) > 1:
                    overlaps.append(list(active))
            time.sleep(0.01)
            with lock:
                active.remove(job.id)

        worker = ConcatWorker(handler)
        for i in range(5):
            worker.submit(make_job(str(i)))

        assert worker.wait_idle(timeout=5)
        worker.stop(timeout=5)
        assert overlaps == []

    def test_stop_is_idempotent(self):
        worker = ConcatWorker(lambda job: None)
        worker.start()
        assert worker.is_running

        worker.stop(timeout=5)
        worker.stop(timeout=5)

        assert not worker.is_running
