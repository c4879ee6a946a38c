from __future__ import annotations

from pathlib import Path

import pytest

from fanlog.core.errors import (
    ConfigurationError,
    ErrorCategory,
    FanlogError,
    SinkError,
    ValidationError,
)
from fanlog.core.validation import (
    ensure_directory_writable,
    ensure_not_empty,
    is_empty,
)


class TestErrors:
    def test_code_is_rendered(self) -> None:
        err = ConfigurationError("missing target", code="LOG-DIR-001")
        assert str(err) == "[LOG-DIR-001] missing target"
        assert err.category is ErrorCategory.CONFIG

    def test_plain_message_without_code(self) -> None:
        assert str(FanlogError("boom")) == "boom"

    def test_cause_is_chained(self) -> None:
        root = PermissionError("denied")
        err = ConfigurationError("no access", code="LOG-DIR-002", cause=root)
        assert err.__cause__ is root
        data = err.to_dict()
        assert data["cause"] == {"error_type": "PermissionError", "message": "denied"}
        assert data["code"] == "LOG-DIR-002"
        assert data["category"] == "config"

    def test_subclass_extras_in_dict(self) -> None:
        assert ValidationError("x", field_name="value").to_dict()["field_name"] == (
            "value"
        )
        sink_err = SinkError("y", sink_name="file")
        assert sink_err.to_dict()["sink_name"] == "file"
        assert sink_err.category is ErrorCategory.SINK

    def test_error_ids_are_unique(self) -> None:
        assert FanlogError("a").error_id != FanlogError("a").error_id

    def test_all_derive_from_base(self) -> None:
        for cls in (ConfigurationError, ValidationError, SinkError):
            assert issubclass(cls, FanlogError)


class TestValidation:
    @pytest.mark.parametrize("value", [None, "", "  \t", [], {}, ()])
    def test_is_empty(self, value: object) -> None:
        assert is_empty(value)

    @pytest.mark.parametrize("value", ["x", [0], 0, False, Path(".")])
    def test_is_not_empty(self, value: object) -> None:
        assert not is_empty(value)

    def test_ensure_not_empty_hard_fail(self) -> None:
        with pytest.raises(ValidationError) as info:
            ensure_not_empty("", name="target")
        assert info.value.field_name == "target"
        assert "'target' cannot be null or empty" in str(info.value)

    def test_ensure_not_empty_soft_fail(self) -> None:
        assert ensure_not_empty(None, hard_fail=False) is False
        assert ensure_not_empty("ok") is True

    def test_ensure_not_empty_custom_message(self) -> None:
        with pytest.raises(ValidationError, match="need a value"):
            ensure_not_empty([], message="need a value")

    def test_directory_created(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"
        resolved = ensure_directory_writable(target)
        assert resolved == target.resolve()
        assert target.is_dir()
        assert list(tmp_path.rglob(".fanlog-probe-*")) == []

    def test_existing_directory_accepted(self, tmp_path: Path) -> None:
        assert ensure_directory_writable(str(tmp_path)) == tmp_path.resolve()

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(ConfigurationError) as info:
            ensure_directory_writable(blocker)
        assert info.value.code == "LOG-DIR-002"
