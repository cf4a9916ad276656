"""TOML config loading for skoolbot.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "skoolbot.toml"


@dataclass
class GeneratorConfig:
    naked_value_prefix: str = "local _ = "
    comments: bool = True


@dataclass
class NamesConfig:
    reserved: list[str] = field(default_factory=list)


@dataclass
class SkoolbotConfig:
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    names: NamesConfig = field(default_factory=NamesConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find skoolbot.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> SkoolbotConfig:
    """Parse a skoolbot.toml file into a SkoolbotConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = SkoolbotConfig()

    if "generator" in data:
        gen = data["generator"]
        config.generator = GeneratorConfig(
            naked_value_prefix=gen.get("naked_value_prefix", "local _ = "),
            comments=gen.get("comments", True),
        )

    if "names" in data:
        names = data["names"]
        config.names = NamesConfig(
            reserved=list(names.get("reserved", [])),
        )

    return config


def config_for(start_path: Path | None = None) -> SkoolbotConfig:
    """Load the nearest skoolbot.toml, or the defaults if there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return SkoolbotConfig()
