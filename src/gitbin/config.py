"""Remote store configuration loading and saving.

Settings live in .git-bin/config.yaml. Credentials may be kept out of the
file and supplied through environment variables instead.
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from .constants import ENV_ACCESS_KEY, ENV_PROTOCOL, ENV_SECRET_KEY
from .context import ProjectContext
from .errors import ConfigError
from .models import StoreConfiguration

SECRET_FIELDS = ("access_key", "secret_key")


def _atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to file (temp file, fsync, rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp_name = f.name

    try:
        os.replace(tmp_name, path)
    except OSError:
        os.unlink(tmp_name)
        raise


def parse_protocol(value: str) -> bool:
    """Return True for HTTPS, False for HTTP (case-insensitive).

    Raises:
        ConfigError: For any other value
    """
    normalized = value.strip().upper()
    if normalized == "HTTPS":
        return True
    if normalized == "HTTP":
        return False
    raise ConfigError(f"Invalid protocol '{value}': expected HTTPS or HTTP")


def apply_env_overrides(
    data: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Overlay credential and transport settings from environment variables.

    Args:
        data: Raw settings loaded from config.yaml
        environ: Environment mapping (defaults to os.environ)

    Returns:
        New settings dict with overrides applied
    """
    env = os.environ if environ is None else environ
    merged = dict(data)
    if env.get(ENV_ACCESS_KEY):
        merged["access_key"] = env[ENV_ACCESS_KEY]
    if env.get(ENV_SECRET_KEY):
        merged["secret_key"] = env[ENV_SECRET_KEY]
    if env.get(ENV_PROTOCOL):
        merged["secure"] = parse_protocol(env[ENV_PROTOCOL])
    return merged


def load_config(
    ctx: Optional[ProjectContext] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StoreConfiguration:
    """Load store configuration for the project.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if ctx is None:
        ctx = ProjectContext()

    if not ctx.config_path.exists():
        raise ConfigError(
            f"Configuration not found at {ctx.config_path}. Run 'git-bin init' first"
        )

    try:
        with ctx.config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {ctx.config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {ctx.config_path}")

    data = apply_env_overrides(data, environ)
    try:
        return StoreConfiguration(**data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration in {ctx.config_path}: {errors}") from e


def save_config(
    config: StoreConfiguration,
    ctx: Optional[ProjectContext] = None,
    include_secrets: bool = False,
) -> None:
    """Save store configuration atomically.

    Credentials are left out unless include_secrets is set.
    """
    if ctx is None:
        ctx = ProjectContext.init()

    data = config.model_dump(exclude_none=True)
    if not include_secrets:
        for name in SECRET_FIELDS:
            data.pop(name, None)

    config_text = yaml.safe_dump(data, default_flow_style=False)
    _atomic_write_text(ctx.config_path, config_text)
