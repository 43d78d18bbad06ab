"""
Shared fixtures for the movie-edit test suite.

FFmpeg is replaced by small executable Python scripts written into the test's
tmp_path. They honour the same argument layout as the real tool:

- trim / remux: copy the -i input to the last argument
- concat:       read the -i manifest and join the listed files

Every invocation is appended to calls.log (one JSON argv per line) so tests
can assert on the exact command that was run.
"""

import json
import stat
import sys
from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

# Add backend to Python path for test imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from movie_edit.config import Settings
from movie_edit.execution.ffmpeg import FFmpegRunner
from movie_edit.main import create_app
from movie_edit.services.editing import EditingService


FAKE_FFMPEG_TEMPLATE = '''#!{python}
import json
import shutil
import sys
import time

MODE = {mode!r}
LOG = {log!r}

args = sys.argv[1:]
with open(LOG, "a", encoding="utf-8") as log:
    log.write(json.dumps(args) + "\\n")

output = args[-1]
is_concat = "-f" in args and args[args.index("-f") + 1] == "concat"

if MODE == "slow":
    time.sleep(30)

if MODE == "fail" or (MODE == "fail_concat" and is_concat):
    sys.stderr.write("Invalid duration specification for ss: bogus\\n")
    sys.exit(1)

if MODE == "empty":
    open(output, "wb").close()
    print("fake ffmpeg: wrote empty output")
    sys.exit(0)

if MODE == "no_output":
    print("fake ffmpeg: wrote nothing")
    sys.exit(0)

if is_concat:
    manifest = args[args.index("-i") + 1]
    with open(output, "wb") as dst, open(manifest, encoding="utf-8") as entries:
        for line in entries:
            line = line.strip()
            if not line:
                continue
            path = line[len("file '"):-1].replace("'\\\\''", "'")
            with open(path, "rb") as src:
                dst.write(src.read())
else:
    shutil.copyfile(args[args.index("-i") + 1], output)

print("fake ffmpeg: ok")
'''


class FakeFFmpeg:
    """Handle on a fake FFmpeg script and its call log."""

    def __init__(self, path: Path, log_path: Path):
        self.path = path
        self.log_path = log_path

    def calls(self) -> List[List[str]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line]


def make_fake_ffmpeg(directory: Path, mode: str = "ok") -> FakeFFmpeg:
    """
    Write an executable fake FFmpeg.

    Modes: ok, fail, fail_concat, empty, no_output, slow
    """
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / f"ffmpeg_{mode}"
    log_path = directory / f"calls_{mode}.log"
    script.write_text(
        FAKE_FFMPEG_TEMPLATE.format(python=sys.executable, mode=mode, log=str(log_path)),
        encoding="utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return FakeFFmpeg(script, log_path)


@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> FakeFFmpeg:
    return make_fake_ffmpeg(tmp_path / "bin")


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(upload_dir: Path, fake_ffmpeg: FakeFFmpeg) -> Settings:
    return Settings(upload_dir=str(upload_dir), ffmpeg_path=str(fake_ffmpeg.path))


@pytest.fixture
def service(settings: Settings):
    service = EditingService.from_settings(settings)
    yield service
    service.shutdown(timeout=10)


@pytest.fixture
def client(settings: Settings, service: EditingService):
    app = create_app(settings, service=service)
    with TestClient(app) as test_client:
        yield test_client


def runner_for(fake: FakeFFmpeg, timeout=None) -> FFmpegRunner:
    return FFmpegRunner(ffmpeg_path=str(fake.path), timeout=timeout)
