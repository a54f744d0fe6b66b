"""Load ledger rating policy from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_config, parse_system_metadata
from domain.ratings.elo.calculator import DEFAULT_K_FACTOR_TIERS, EloParameters, KFactorTier

ROOT_DIR = Path(__file__).resolve().parents[4]
DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "ledger" / "default.toml"


@dataclass(frozen=True)
class LedgerSystemConfig(BaseSystemConfig):
    """Rating policy plus ledger presentation thresholds."""

    parameters: EloParameters
    provisional_max_matches: int = 5
    history_limit: int = 50


def default_ledger_config() -> LedgerSystemConfig:
    """Built-in policy used when no config file is supplied."""
    return LedgerSystemConfig(
        name="ledger_default",
        description=None,
        file_path=DEFAULT_CONFIG_PATH,
        parameters=EloParameters(),
    )


def load_ledger_config(file_path: Path = DEFAULT_CONFIG_PATH) -> LedgerSystemConfig:
    """Load and validate one ledger TOML config file."""
    return load_system_config(file_path, _parse_ledger_config)


def _parse_k_factor_tiers(raw_tiers: Any, file_path: Path) -> tuple[KFactorTier, ...]:
    if raw_tiers is None:
        return DEFAULT_K_FACTOR_TIERS
    if not isinstance(raw_tiers, list) or not raw_tiers:
        raise ValueError(f"{file_path}: [[elo.k_factor_tiers]] must be a non-empty array of tables")

    tiers: list[KFactorTier] = []
    for index, raw_tier in enumerate(raw_tiers):
        if not isinstance(raw_tier, dict):
            raise ValueError(f"{file_path}: [[elo.k_factor_tiers]] entry {index} must be a table")
        tiers.append(
            KFactorTier(
                min_matches=int(raw_tier.get("min_matches", 0)),
                k_factor=float(raw_tier.get("k_factor", 0.0)),
            )
        )
    return tuple(tiers)


def _parse_ledger_config(raw: dict[str, Any], file_path: Path) -> LedgerSystemConfig:
    name, description = parse_system_metadata(raw, file_path)
    elo_raw = raw.get("elo", {})
    ledger_raw = raw.get("ledger", {})

    parameters = EloParameters(
        initial_rating=float(elo_raw.get("initial_rating", 1000.0)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
        rating_precision=int(elo_raw.get("rating_precision", 1)),
        k_factor_tiers=_parse_k_factor_tiers(elo_raw.get("k_factor_tiers"), file_path),
        margin_threshold=float(elo_raw.get("margin_threshold", 0.6)),
        margin_slope=float(elo_raw.get("margin_slope", 2.0)),
        margin_ceiling=float(elo_raw.get("margin_ceiling", 2.0)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    provisional_max_matches = int(ledger_raw.get("provisional_max_matches", 5))
    if provisional_max_matches < 0:
        raise ValueError(f"{file_path}: [ledger].provisional_max_matches must be >= 0")

    history_limit = int(ledger_raw.get("history_limit", 50))
    if history_limit < 0:
        raise ValueError(f"{file_path}: [ledger].history_limit must be >= 0")

    return LedgerSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
        provisional_max_matches=provisional_max_matches,
        history_limit=history_limit,
    )


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.initial_rating <= 0.0:
        raise ValueError(f"{file_path}: [elo].initial_rating must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.rating_precision < 0:
        raise ValueError(f"{file_path}: [elo].rating_precision must be >= 0")
    if parameters.margin_threshold < 0.5 or parameters.margin_threshold >= 1.0:
        raise ValueError(f"{file_path}: [elo].margin_threshold must be in [0.5, 1.0)")
    if parameters.margin_slope < 0.0:
        raise ValueError(f"{file_path}: [elo].margin_slope must be >= 0")
    if parameters.margin_ceiling < 1.0:
        raise ValueError(f"{file_path}: [elo].margin_ceiling must be >= 1")

    tiers = parameters.k_factor_tiers
    if tiers[0].min_matches != 0:
        raise ValueError(f"{file_path}: first [[elo.k_factor_tiers]] entry must have min_matches = 0")
    for previous, current in zip(tiers, tiers[1:]):
        if current.min_matches <= previous.min_matches:
            raise ValueError(
                f"{file_path}: [[elo.k_factor_tiers]] min_matches must be strictly increasing"
            )
    for tier in tiers:
        if tier.k_factor <= 0.0:
            raise ValueError(f"{file_path}: [[elo.k_factor_tiers]] k_factor must be > 0")
