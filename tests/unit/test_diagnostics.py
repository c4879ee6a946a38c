from __future__ import annotations

import json
from typing import Any

import pytest

from fanlog.core import diagnostics


def test_emit_builds_payload(diagnostics_capture: list[dict[str, Any]]) -> None:
    diagnostics.emit("ERROR", "dispatch", "sink failed", sink="file")

    payload = diagnostics_capture[0]
    assert payload["level"] == "ERROR"
    assert payload["component"] == "dispatch"
    assert payload["message"] == "sink failed"
    assert payload["sink"] == "file"
    assert "ts" in payload


def test_level_helpers(diagnostics_capture: list[dict[str, Any]]) -> None:
    diagnostics.warn("manager", "w")
    diagnostics.error("manager", "e")
    assert [p["level"] for p in diagnostics_capture] == ["WARN", "ERROR"]


def test_default_writer_emits_json_line(capsys: pytest.CaptureFixture[str]) -> None:
    diagnostics.warn("dispatch", "queue full", dropped=1)

    line = capsys.readouterr().err.strip()
    payload = json.loads(line)
    assert payload["message"] == "queue full"
    assert payload["dropped"] == 1


def test_unserializable_fields_are_stringified(
    capsys: pytest.CaptureFixture[str],
) -> None:
    diagnostics.error("dispatch", "odd", thing=object())
    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["thing"].startswith("<object object")


def test_writer_failure_never_raises() -> None:
    def broken(_payload: dict[str, Any]) -> None:
        raise RuntimeError("writer down")

    diagnostics.set_writer_for_tests(broken)
    diagnostics.error("dispatch", "still returns")
