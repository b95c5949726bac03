"""
Engine configuration.

Values come from keyword arguments, environment variables
(`EngineConfig.from_env`) or a YAML file (`load_config`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..state.balances import ZERO_ADDRESS, normalize_address


# Custody account of the engine when none is configured
DEFAULT_ENGINE_ADDRESS = "0x" + "ee" * 20

# 18-decimal fixed-point scaling used by price reads
PRICE_SCALE = 10**18

_CONFIG_KEYS = ("engine_address", "price_scale")


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    raw = environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class EngineConfig:
    # Account that holds pulled tokens; Token.transfer sends from here.
    engine_address: str = DEFAULT_ENGINE_ADDRESS
    price_scale: int = PRICE_SCALE

    def __post_init__(self) -> None:
        address = normalize_address(self.engine_address, name="engine_address")
        if address == ZERO_ADDRESS:
            raise ValueError("engine_address must not be the zero address")
        object.__setattr__(self, "engine_address", address)
        if not isinstance(self.price_scale, int) or isinstance(self.price_scale, bool) or self.price_scale <= 0:
            raise ValueError("price_scale must be a positive int")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        return cls(
            engine_address=_env_str(env, "PAIRSWAP_ENGINE_ADDRESS", DEFAULT_ENGINE_ADDRESS),
            price_scale=_env_int(env, "PAIRSWAP_PRICE_SCALE", PRICE_SCALE),
        )

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> EngineConfig:
        unknown = sorted(set(obj) - set(_CONFIG_KEYS))
        if unknown:
            raise ValueError(f"unknown config keys: {unknown}")
        values = {k: obj[k] for k in _CONFIG_KEYS if k in obj}
        address = values.get("engine_address")
        # YAML reads an unquoted 0x... scalar as an int.
        if isinstance(address, int) and not isinstance(address, bool):
            values["engine_address"] = f"0x{address:040x}"
        return cls(**values)


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an EngineConfig from a YAML mapping; an empty file yields defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return EngineConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return EngineConfig.from_mapping(obj)
