"""Generator configuration (demo.toml) loading and validation."""
from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from demo_derive.semantics.policy import normalize_visibility

CONFIG_NAME = "demo.toml"


class ConfigError(Exception):
    pass


@dataclass
class GeneratorConfig:
    std: bool = True
    visibility: str = "pub"

    def validate(self) -> None:
        if not isinstance(self.std, bool):
            raise ConfigError(f"Invalid value for 'std': {self.std!r}. Must be true or false.")
        if not isinstance(self.visibility, str):
            raise ConfigError(f"Invalid value for 'visibility': {self.visibility!r}. Must be a string.")
        visibility = normalize_visibility(self.visibility)
        if visibility is None:
            raise ConfigError(
                f"Invalid visibility '{self.visibility}'. "
                "Use pub, pub(crate), pub(super), pub(self), pub(in path) or an empty string."
            )
        self.visibility = visibility


def load_config(path: Path | None = None, directory: Path | None = None) -> GeneratorConfig:
    """Load the generator configuration.

    An explicit `path` must exist. Otherwise `demo.toml` is looked up in
    `directory` (default: cwd), and its absence yields the defaults.
    """
    if path is None:
        path = (directory or Path.cwd()) / CONFIG_NAME
        if not path.exists():
            return GeneratorConfig()
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    return _parse_config(data)


def load_config_from_string(text: str) -> GeneratorConfig:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e
    return _parse_config(data)


def _parse_config(data: dict) -> GeneratorConfig:
    gen = data.get("generator", {})
    if not isinstance(gen, dict):
        raise ConfigError("[generator] must be a table")
    unknown = sorted(set(gen) - {"std", "visibility"})
    if unknown:
        raise ConfigError(f"Unknown key(s) in [generator]: {', '.join(unknown)}")
    config = GeneratorConfig(
        std=gen.get("std", True),
        visibility=gen.get("visibility", "pub"),
    )
    config.validate()
    return config
