from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Optional

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

DEFAULT_POSTS_DIR = "posts"
DEFAULT_OUTPUT_DIR = "public"
DEFAULT_CONFIG_PATH = "devlog.config.json"
MISSING_SOURCE_POLICIES = ("seed", "fail")

# Recognized keys: (expected type, default). Anything else is passed through.
CONFIG_SCHEMA: dict[str, tuple[type, object]] = {
    "title": (str, "Devlog"),
    "tagline": (str, ""),
    "author": (str, ""),
    "authorUrl": (str, ""),
    "siteUrl": (str, ""),
    "excerptLength": (int, 160),
    "tags": (bool, True),
    "sitemap": (bool, True),
    "postNav": (bool, True),
    "redact": (bool, False),
    "missingSource": (str, "seed"),
    "credit": (str, "devlog"),
    "creditUrl": (str, ""),
}


def warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def default_config() -> dict:
    return {key: default for key, (_, default) in CONFIG_SCHEMA.items()}


def _type_name(value: object) -> str:
    return type(value).__name__


def _matches(expected: type, value: object) -> bool:
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def validate_config(raw: dict) -> tuple[dict, list[str]]:
    config = {}
    warnings = []
    for key, (expected, default) in CONFIG_SCHEMA.items():
        if key not in raw or raw[key] is None:
            config[key] = default
            continue
        value = raw[key]
        if not _matches(expected, value):
            warnings.append(
                f'Config "{key}" should be {expected.__name__}, got {_type_name(value)}; using default.'
            )
            config[key] = default
            continue
        config[key] = value

    if config["missingSource"] not in MISSING_SOURCE_POLICIES:
        warnings.append(
            f'Config "missingSource" must be one of {", ".join(MISSING_SOURCE_POLICIES)}, '
            f'got {config["missingSource"]!r}; using default.'
        )
        config["missingSource"] = CONFIG_SCHEMA["missingSource"][1]
    if config["excerptLength"] <= 0:
        warnings.append('Config "excerptLength" must be positive; using default.')
        config["excerptLength"] = CONFIG_SCHEMA["excerptLength"][1]

    for key, value in raw.items():
        if key not in CONFIG_SCHEMA:
            config[key] = value
    return config, warnings


def load_config(path: Path) -> dict:
    """Read a raw config mapping from JSON, TOML or YAML, picked by suffix.

    Problems are reported as warnings and yield ``{}`` so the build can fall
    back to defaults.
    """
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        warn(f"Failed to read config at {path}: {exc}")
        return {}
    if suffix == ".toml":
        if toml is None:
            warn("TOML config requires tomllib (Python 3.11+) or tomli.")
            return {}
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            warn(f"Failed to parse config at {path}: {exc}")
            return {}
    elif suffix in {".yml", ".yaml"}:
        if yaml is None:
            warn("YAML config requires PyYAML.")
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            warn(f"Failed to parse config at {path}: {exc}")
            return {}
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            warn(f"Failed to parse config at {path}: {exc}")
            return {}
    if not isinstance(data, dict):
        warn(f"Config must be a mapping: {path}")
        return {}
    return data


def resolve_paths(args: object) -> dict[str, Path]:
    """Source, output and config locations: CLI flag, then environment, then default."""

    def pick(attr: str, env: str, default: str) -> Path:
        value = (getattr(args, attr, None) or "").strip() or os.environ.get(env, "").strip()
        return Path(value or default)

    return {
        "posts": pick("posts", "DEVLOG_POSTS", DEFAULT_POSTS_DIR),
        "output": pick("output", "DEVLOG_OUTPUT", DEFAULT_OUTPUT_DIR),
        "config": pick("config", "DEVLOG_CONFIG", DEFAULT_CONFIG_PATH),
    }


def build_config(path: Path, overrides: Optional[dict] = None) -> dict:
    """Load, validate and apply command-line overrides; the result is final for the run."""
    config, warnings = validate_config(load_config(path))
    for message in warnings:
        warn(message)
    for key, value in (overrides or {}).items():
        if value is not None:
            config[key] = value
    return config
