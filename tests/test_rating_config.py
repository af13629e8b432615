"""Tests for TOML-based rating system config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from clubladder.domain.ratings import (
    DEFAULT_PARAMETERS,
    LEGACY_PARAMETERS,
    FormulaVersion,
    find_rating_system,
    load_rating_system_configs,
)

REPO_CONFIG_DIR = Path(__file__).resolve().parents[1] / "configs" / "ratings"


def test_load_rating_system_configs_from_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "club.toml"
    config_path.write_text(
        """
[system]
name = "system_a"
description = "A test system"

[rating]
default_rating = 4.0
min_rating = 1.5
max_rating = 9.0
k_factor = 0.1
scale_factor = 2.5
margin_slope = 0.05
performance_coefficient = 0.2
""".strip()
    )

    configs = load_rating_system_configs(tmp_path)
    assert len(configs) == 1

    system = configs[0]
    assert system.name == "system_a"
    assert system.description == "A test system"
    assert system.file_path == config_path
    assert system.parameters.default_rating == pytest.approx(4.0)
    assert system.parameters.min_rating == pytest.approx(1.5)
    assert system.parameters.max_rating == pytest.approx(9.0)
    assert system.parameters.k_factor == pytest.approx(0.1)
    assert system.parameters.scale_factor == pytest.approx(2.5)
    assert system.parameters.margin_slope == pytest.approx(0.05)
    assert system.parameters.performance_coefficient == pytest.approx(0.2)
    assert system.parameters.margin_base == pytest.approx(DEFAULT_PARAMETERS.margin_base)
    assert system.parameters.formula_version is FormulaVersion.V2


def test_missing_rating_table_uses_current_defaults(tmp_path: Path) -> None:
    (tmp_path / "bare.toml").write_text(
        """
[system]
name = "bare"
""".strip()
    )

    system = load_rating_system_configs(tmp_path)[0]
    assert system.description is None
    assert system.parameters == DEFAULT_PARAMETERS


def test_legacy_formula_version_selects_legacy_preset(tmp_path: Path) -> None:
    (tmp_path / "legacy.toml").write_text(
        """
[system]
name = "old"

[rating]
formula_version = "v1"
k_factor = 0.1
""".strip()
    )

    system = load_rating_system_configs(tmp_path)[0]
    assert system.parameters.formula_version is FormulaVersion.V1
    assert system.parameters.performance_coefficient == pytest.approx(LEGACY_PARAMETERS.performance_coefficient)
    assert system.parameters.performance_max == pytest.approx(1.3)
    assert system.parameters.k_factor == pytest.approx(0.1)


def test_config_json_is_serializable_payload(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text(
        """
[system]
name = "a"

[rating]
formula_version = "v1"
""".strip()
    )

    payload = load_rating_system_configs(tmp_path)[0].as_config_json()
    assert payload["formula_version"] == "v1"
    assert payload["k_factor"] == pytest.approx(0.08)
    assert set(payload) >= {"default_rating", "min_rating", "max_rating", "scale_factor"}


def test_repository_configs_load() -> None:
    systems = {system.name: system for system in load_rating_system_configs(REPO_CONFIG_DIR)}

    assert set(systems) == {"club_default", "club_legacy"}
    assert systems["club_default"].parameters == DEFAULT_PARAMETERS
    assert systems["club_legacy"].parameters == LEGACY_PARAMETERS


def test_find_rating_system_by_name() -> None:
    system = find_rating_system(REPO_CONFIG_DIR, "club_legacy")
    assert system.parameters.formula_version is FormulaVersion.V1

    with pytest.raises(ValueError, match=r"Unknown rating system"):
        find_rating_system(REPO_CONFIG_DIR, "missing")


def test_load_rating_system_configs_rejects_duplicate_names(tmp_path: Path) -> None:
    for file_name in ("a.toml", "b.toml"):
        (tmp_path / file_name).write_text(
            """
[system]
name = "dup"
""".strip()
        )

    with pytest.raises(ValueError, match=r"Duplicate rating system names"):
        load_rating_system_configs(tmp_path)


def test_load_rating_system_configs_requires_name(tmp_path: Path) -> None:
    (tmp_path / "nameless.toml").write_text(
        """
[system]
description = "no name"
""".strip()
    )

    with pytest.raises(ValueError, match=r"\[system\]\.name is required"):
        load_rating_system_configs(tmp_path)


def test_load_rating_system_configs_rejects_empty_directory(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match=r"No \.toml config files found"):
        load_rating_system_configs(tmp_path)

    with pytest.raises(FileNotFoundError):
        load_rating_system_configs(tmp_path / "missing")


@pytest.mark.parametrize(
    ("rating_table", "message"),
    [
        ('formula_version = "v3"', r"formula_version must be one of"),
        ("min_rating = 0.0", r"min_rating must be > 0"),
        ("max_rating = 2.0", r"max_rating must be > min_rating"),
        ("default_rating = 9.0", r"default_rating must be between"),
        ("k_factor = 0.0", r"k_factor must be > 0"),
        ("scale_factor = -1.0", r"scale_factor must be > 0"),
        ("margin_slope = -0.1", r"margin_slope must be >= 0"),
        ("performance_coefficient = -0.1", r"performance_coefficient must be >= 0"),
        ("performance_min = 1.5", r"performance_max must be >= performance_min"),
        ("loser_underdog_min = 0.0", r"loser_underdog_min must be > 0"),
    ],
)
def test_invalid_rating_values_are_rejected(tmp_path: Path, rating_table: str, message: str) -> None:
    (tmp_path / "bad.toml").write_text(
        f"""
[system]
name = "bad"

[rating]
{rating_table}
""".strip()
    )

    with pytest.raises(ValueError, match=message):
        load_rating_system_configs(tmp_path)
