"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path

from api_typegen.generation import DEFAULT_REQUEST_MODULE

CONFIG_FILE_NAME = "api_typegen.toml"
GLOBAL_CONFIG_FILE_NAME = ".api_typegen.toml"
MAX_RETRIES_CAP = 10
MAX_TIMEOUT_SECONDS_CAP = 300.0
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")


@dataclass(slots=True, frozen=True)
class NetworkConfig:
    """Fetch timeouts and retry budget."""

    timeout_seconds: float = 10.0
    max_retries: int = 3


@dataclass(slots=True, frozen=True)
class GeneratorConfig:
    """Fully merged generator configuration."""

    output_dir: Path
    data_dir: Path
    request_module: str = DEFAULT_REQUEST_MODULE
    type_prefix: str = ""
    api_prefix: str = ""
    default_method: str = "GET"
    network: NetworkConfig = NetworkConfig()

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "output_dir": str(self.output_dir),
            "data_dir": str(self.data_dir),
            "request_module": self.request_module,
            "type_prefix": self.type_prefix,
            "api_prefix": self.api_prefix,
            "default_method": self.default_method,
            "network": {
                "timeout_seconds": self.network.timeout_seconds,
                "max_retries": self.network.max_retries,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    output_dir: Path | None = None
    data_dir: Path | None = None
    type_prefix: str | None = None
    api_prefix: str | None = None
    timeout_seconds: float | None = None
    max_retries: int | None = None


def default_config(project_root: Path) -> GeneratorConfig:
    """Build default config for a given project directory."""
    resolved_root = project_root.resolve()
    return GeneratorConfig(
        output_dir=resolved_root,
        data_dir=resolved_root / ".api_typegen",
    )


def load_config_file(path: Path) -> dict[str, object]:
    """Load an optional TOML config file."""
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    return value


def _optional_positive_int_with_cap(value: object, name: str, default: int, cap: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def _optional_positive_float_with_cap(
    value: object, name: str, default: float, cap: float
) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config field '{name}' must be a positive number.")
    if value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return float(value)


def _method(value: object, default: str) -> str:
    method = _optional_string(value, "default_method", default).upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Config field 'default_method' must be one of {', '.join(HTTP_METHODS)}.")
    return method


def _optional_path(value: object, name: str, base_dir: Path, default: Path) -> Path:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return (base_dir / Path(value).expanduser()).resolve()


def merge_config(
    base: GeneratorConfig,
    payload: dict[str, object],
    base_dir: Path,
) -> GeneratorConfig:
    """Merge one config file payload over base."""
    network_payload = _get_table(payload, "network")
    return GeneratorConfig(
        output_dir=_optional_path(
            payload.get("output_dir"), "output_dir", base_dir, base.output_dir
        ),
        data_dir=_optional_path(payload.get("data_dir"), "data_dir", base_dir, base.data_dir),
        request_module=_optional_string(
            payload.get("request_module"), "request_module", base.request_module
        ),
        type_prefix=_optional_string(payload.get("type_prefix"), "type_prefix", base.type_prefix),
        api_prefix=_optional_string(payload.get("api_prefix"), "api_prefix", base.api_prefix),
        default_method=_method(payload.get("default_method"), base.default_method),
        network=NetworkConfig(
            timeout_seconds=_optional_positive_float_with_cap(
                network_payload.get("timeout_seconds"),
                "network.timeout_seconds",
                base.network.timeout_seconds,
                MAX_TIMEOUT_SECONDS_CAP,
            ),
            max_retries=_optional_positive_int_with_cap(
                network_payload.get("max_retries"),
                "network.max_retries",
                base.network.max_retries,
                MAX_RETRIES_CAP,
            ),
        ),
    )


def apply_cli_overrides(config: GeneratorConfig, overrides: CliOverrides) -> GeneratorConfig:
    """Apply command-line overrides at highest precedence."""
    network = NetworkConfig(
        timeout_seconds=_optional_positive_float_with_cap(
            overrides.timeout_seconds,
            "overrides.timeout_seconds",
            config.network.timeout_seconds,
            MAX_TIMEOUT_SECONDS_CAP,
        ),
        max_retries=_optional_positive_int_with_cap(
            overrides.max_retries,
            "overrides.max_retries",
            config.network.max_retries,
            MAX_RETRIES_CAP,
        ),
    )
    return GeneratorConfig(
        output_dir=(overrides.output_dir or config.output_dir).resolve(),
        data_dir=(overrides.data_dir or config.data_dir).resolve(),
        request_module=config.request_module,
        type_prefix=(
            overrides.type_prefix if overrides.type_prefix is not None else config.type_prefix
        ),
        api_prefix=overrides.api_prefix if overrides.api_prefix is not None else config.api_prefix,
        default_method=config.default_method,
        network=network,
    )


def load_effective_config(
    project_root: Path,
    overrides: CliOverrides | None = None,
    home_dir: Path | None = None,
) -> GeneratorConfig:
    """Load config using merge order defaults -> global file -> project file -> overrides."""
    resolved_root = project_root.resolve()
    home = (home_dir or Path.home()).resolve()
    config = default_config(resolved_root)
    config = merge_config(config, load_config_file(home / GLOBAL_CONFIG_FILE_NAME), home)
    config = merge_config(config, load_config_file(resolved_root / CONFIG_FILE_NAME), resolved_root)
    return apply_cli_overrides(config, overrides or CliOverrides())


def write_project_config(project_root: Path, force: bool = False) -> Path:
    """Write a starter project config file and return its path."""
    path = project_root.resolve() / CONFIG_FILE_NAME
    if path.exists() and not force:
        raise FileExistsError(f"{CONFIG_FILE_NAME} already exists; use --force to overwrite.")
    lines = [
        f"request_module = {json.dumps(DEFAULT_REQUEST_MODULE)}",
        'type_prefix = ""',
        'api_prefix = ""',
        "",
        "[network]",
        "timeout_seconds = 10.0",
        "max_retries = 3",
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
