"""Unit tests for GitHub Actions output helpers."""

from __future__ import annotations

import json
from pathlib import Path

from cmx_versions._cmx_github import (
    append_github_output,
    mask_secret,
    matrix_to_json,
    parse_bool,
    publish_matrix,
)
from cmx_versions._cmx_models import MatrixEntry


def test_parse_bool() -> None:
    assert parse_bool("true") is True, "true should parse to True"
    assert parse_bool("YES") is True, "YES should parse to True"
    assert parse_bool("0") is False, "0 should parse to False"
    assert parse_bool(None) is False, "None should use the default"
    assert parse_bool("", default=True) is True, "Blank should use the default"


def test_mask_secret_masks_each_line() -> None:
    masked: list[str] = []
    mask_secret("line1\n\nline2", stream=masked.append)
    assert masked == ["::add-mask::line1", "::add-mask::line2"], "Mask per line"


def test_mask_secret_ignores_empty_value() -> None:
    masked: list[str] = []
    mask_secret("", stream=masked.append)
    assert masked == [], "Nothing to mask"


def test_append_github_output_single_line(tmp_path: Path) -> None:
    output_file = tmp_path / "out"
    append_github_output(output_file, {"versions-to-test": "[]"})
    assert (
        output_file.read_text(encoding="utf-8") == "versions-to-test=[]\n"
    ), "Single-line output should be written directly"


def test_append_github_output_multiline_avoids_delimiter_collision(
    tmp_path: Path,
) -> None:
    output_file = tmp_path / "nested" / "out"
    append_github_output(output_file, {"notes": "CMX_EOF\nmore"})
    content = output_file.read_text(encoding="utf-8")
    assert content == "notes<<CMX_EOF_1\nCMX_EOF\nmore\nCMX_EOF_1\n", (
        "Heredoc delimiter should not occur in the value"
    )


def test_matrix_to_json_is_compact() -> None:
    document = matrix_to_json(
        [MatrixEntry("openshift", "4.14.0-okd", "r1.large", "alpha")]
    )
    assert "\n" not in document, "Matrix output should fit on one line"
    assert json.loads(document) == [
        {
            "distribution": "openshift",
            "version": "4.14.0-okd",
            "instance_type": "r1.large",
            "stage": "alpha",
        }
    ], "All four fields should be serialised"


def test_publish_matrix_appends_output(tmp_path: Path) -> None:
    output_file = tmp_path / "out"
    output_file.write_text("existing=1\n", encoding="utf-8")

    document = publish_matrix([MatrixEntry("eks", "1.32")], output_file)

    content = output_file.read_text(encoding="utf-8")
    assert content.startswith("existing=1\n"), "Existing outputs should be kept"
    assert f"versions-to-test={document}\n" in content, "Matrix should be appended"
