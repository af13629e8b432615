"""Load rating system definitions from TOML files."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from clubladder.domain.config_base import BaseSystemConfig, load_system_configs, parse_system_header
from clubladder.domain.ratings.calculator import RatingParameters, parameters_for_version
from clubladder.domain.ratings.common import FormulaVersion


@dataclass(frozen=True)
class RatingSystemConfig(BaseSystemConfig):
    """Configuration for one named rating system."""

    parameters: RatingParameters

    def as_config_json(self) -> dict[str, Any]:
        payload = asdict(self.parameters)
        payload["formula_version"] = self.parameters.formula_version.value
        return payload


_FLOAT_KEYS = tuple(
    field.name for field in fields(RatingParameters) if field.name != "formula_version"
)

_MULTIPLIER_RANGES = (
    ("margin_min", "margin_max"),
    ("performance_min", "performance_max"),
    ("winner_individual_min", "winner_individual_max"),
    ("winner_underdog_min", "winner_underdog_max"),
    ("loser_individual_min", "loser_individual_max"),
    ("loser_underdog_min", "loser_underdog_max"),
)


def load_rating_system_configs(config_dir: Path) -> list[RatingSystemConfig]:
    """Load and validate all rating system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_rating_system_config,
        duplicate_name_label="rating",
    )


def find_rating_system(config_dir: Path, name: str) -> RatingSystemConfig:
    systems = load_rating_system_configs(config_dir)
    for system in systems:
        if system.name == name:
            return system
    available = ", ".join(system.name for system in systems)
    raise ValueError(f"Unknown rating system {name!r}; available: {available}")


def _parse_rating_system_config(raw: dict[str, Any], file_path: Path) -> RatingSystemConfig:
    name, description = parse_system_header(raw, file_path)
    rating_raw = raw.get("rating", {})

    version_value = str(rating_raw.get("formula_version", FormulaVersion.V2.value))
    try:
        version = FormulaVersion(version_value)
    except ValueError as exc:
        raise ValueError(
            f"{file_path}: [rating].formula_version must be one of "
            f"{[item.value for item in FormulaVersion]}"
        ) from exc

    overrides: dict[str, float] = {}
    for key in _FLOAT_KEYS:
        if key in rating_raw:
            overrides[key] = float(rating_raw[key])

    parameters = replace(parameters_for_version(version), **overrides)
    _validate_parameters(file_path=file_path, parameters=parameters)

    return RatingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: RatingParameters) -> None:
    if parameters.min_rating <= 0.0:
        raise ValueError(f"{file_path}: [rating].min_rating must be > 0")
    if parameters.max_rating <= parameters.min_rating:
        raise ValueError(f"{file_path}: [rating].max_rating must be > min_rating")
    if not parameters.min_rating <= parameters.default_rating <= parameters.max_rating:
        raise ValueError(
            f"{file_path}: [rating].default_rating must be between min_rating and max_rating"
        )
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].scale_factor must be > 0")
    if parameters.margin_base <= 0.0:
        raise ValueError(f"{file_path}: [rating].margin_base must be > 0")
    if parameters.margin_slope < 0.0:
        raise ValueError(f"{file_path}: [rating].margin_slope must be >= 0")
    if parameters.performance_coefficient < 0.0:
        raise ValueError(f"{file_path}: [rating].performance_coefficient must be >= 0")
    if parameters.underdog_team_coefficient < 0.0:
        raise ValueError(f"{file_path}: [rating].underdog_team_coefficient must be >= 0")
    if parameters.winner_individual_coefficient < 0.0:
        raise ValueError(f"{file_path}: [rating].winner_individual_coefficient must be >= 0")
    if parameters.loser_individual_coefficient < 0.0:
        raise ValueError(f"{file_path}: [rating].loser_individual_coefficient must be >= 0")
    for lower_key, upper_key in _MULTIPLIER_RANGES:
        lower = getattr(parameters, lower_key)
        upper = getattr(parameters, upper_key)
        if lower <= 0.0:
            raise ValueError(f"{file_path}: [rating].{lower_key} must be > 0")
        if upper < lower:
            raise ValueError(f"{file_path}: [rating].{upper_key} must be >= {lower_key}")


__all__ = ["RatingSystemConfig", "find_rating_system", "load_rating_system_configs"]
