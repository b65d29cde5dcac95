from __future__ import annotations

import os
import time

import pytest

from simkltrakt.utils.errors import ConfigMissing, SubmitFailed
from simkltrakt.utils.log_rotation import rotate_logs
from simkltrakt.utils.safe_runner import safe_main


def test_rotate_logs_removes_only_old_files(tmp_path) -> None:
    old = tmp_path / "2020-01-01_SimklTrakt.log"
    current = tmp_path / "2020-01-01_script.log"
    fresh = tmp_path / "today.log"
    other = tmp_path / "sync-history.json"
    for f in (old, current, fresh, other):
        f.write_text("x", encoding="utf-8")
    past = time.time() - 40 * 86400
    for f in (old, current, other):
        os.utime(f, (past, past))

    removed = rotate_logs(str(tmp_path), 30, logf=str(current))

    assert removed == [old]
    assert current.exists() and fresh.exists() and other.exists()


def test_http_errors_render_status_and_reason() -> None:
    exc = SubmitFailed(422, "Unprocessable Entity")
    assert exc.http_error == "HTTP 422: Unprocessable Entity"
    assert "HTTP 422: Unprocessable Entity" in str(exc)


@pytest.mark.parametrize(
    ("error", "code"),
    [(ConfigMissing(), 1), (RuntimeError("boom"), 1), (KeyboardInterrupt(), 130)],
)
def test_safe_main_exit_codes(error: BaseException, code: int) -> None:
    @safe_main
    def run() -> None:
        raise error

    with pytest.raises(SystemExit) as excinfo:
        run()
    assert excinfo.value.code == code


def test_safe_main_returns_value() -> None:
    assert safe_main(lambda: 42)() == 42
