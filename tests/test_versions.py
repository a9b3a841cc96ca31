"""Tests for cargo_stage.versions."""

from __future__ import annotations

import pytest

from cargo_stage.versions import (
    is_dotted_numeric,
    replace_version_field,
    validate_placeholder,
)


class TestIsDottedNumeric:
    def test_full_version(self) -> None:
        assert is_dotted_numeric("1.2.3")

    def test_single_number(self) -> None:
        assert is_dotted_numeric("7")

    def test_prerelease_rejected(self) -> None:
        assert not is_dotted_numeric("1.0.0-alpha")

    def test_empty_rejected(self) -> None:
        assert not is_dotted_numeric("")


class TestReplaceVersionField:
    def test_replaces_value(self) -> None:
        assert replace_version_field('version = "1.2.3"\n', "0.1.0") == 'version = "0.1.0"\n'

    def test_no_field_unchanged(self) -> None:
        assert replace_version_field('name = "x"\n', "0.1.0") == 'name = "x"\n'

    def test_preserves_surrounding_text(self) -> None:
        line = 'serde = { version = "1.0", features = ["derive"] }\r\n'
        assert (
            replace_version_field(line, "0.1.0")
            == 'serde = { version = "0.1.0", features = ["derive"] }\r\n'
        )

    def test_only_first_field(self) -> None:
        line = 'version = "1.0" # was version = "0.9"'
        assert replace_version_field(line, "0.1.0") == 'version = "0.1.0" # was version = "0.9"'

    def test_non_numeric_version_untouched(self) -> None:
        line = 'version = "1.0.0-rc.1"'
        assert replace_version_field(line, "0.1.0") == line

    def test_workspace_inheritance_untouched(self) -> None:
        line = "version.workspace = true"
        assert replace_version_field(line, "0.1.0") == line


class TestValidatePlaceholder:
    def test_accepts_semver(self) -> None:
        assert validate_placeholder("0.1.0") == "0.1.0"

    def test_rejects_non_numeric(self) -> None:
        with pytest.raises(ValueError, match="dotted-numeric"):
            validate_placeholder("0.1.0-dev")

    def test_rejects_incomplete_semver(self) -> None:
        with pytest.raises(ValueError, match="semantic version"):
            validate_placeholder("0.1")
