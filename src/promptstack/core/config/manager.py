"""
Configuration loading (YAML + environment, validated by JSON Schema).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import copy
import json
import logging
import os
import re

import jsonschema
import yaml

from promptstack.core.errors import ConfigError
from promptstack.core.utils.merge import deep_merge
from promptstack.data import get_data_path, read_json, read_yaml

logger = logging.getLogger(__name__)

PROJECT_CONFIG_DIR = ".promptstack"
PROJECT_CONFIG_FILE = "config.yaml"
ENV_PREFIX = "PROMPTSTACK_"


class ConfigManager:
    """Load, merge, and validate promptstack configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: PROMPTSTACK_<section>__<key>
    2. Project config: <repo>/.promptstack/config.yaml
    3. Bundled defaults: promptstack.data/config/defaults.yaml
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.repo_root = Path(repo_root or Path.cwd()).resolve()
        self.environ = os.environ if environ is None else environ
        self.core_config_path = get_data_path("config", "defaults.yaml")
        self.project_config_path = self.repo_root / PROJECT_CONFIG_DIR / PROJECT_CONFIG_FILE

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            # Invalid config must never be silently ignored.
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
        return data

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Invalid JSON in environment override: {s!r} ({exc})") from exc
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if not raw or any(seg == "" for seg in segs):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: '{key}'")
            yield segs, self._coerce_type(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            # Case-insensitive match against existing keys keeps camelCase names intact.
            key = {k.lower(): k for k in cur}.get(part.lower(), part.lower())
            nxt = cur.get(key)
            if not isinstance(nxt, dict):
                if nxt is not None:
                    raise ConfigError(f"Environment override path '{'__'.join(path)}' traverses a non-mapping value")
                nxt = cur[key] = {}
            cur = nxt
        leaf = path[-1]
        cur[{k.lower(): k for k in cur}.get(leaf.lower(), leaf)] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            logger.debug("Applying environment override %s", "__".join(path))
            self._set_nested(cfg, path, value)
        return cfg

    # ========== Loading ==========

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_json("schemas", "config.schema.json")
        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as exc:
            location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(f"Invalid configuration at {location}: {exc.message}") from exc

    def load_config(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration dict.

        Raises:
            ConfigError: On invalid YAML, bad environment keys, or schema violations
        """
        cfg: Dict[str, Any] = copy.deepcopy(read_yaml("config", "defaults.yaml"))
        cfg = deep_merge(cfg, self.load_yaml(self.project_config_path))
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg


def load_config(repo_root: Optional[Path] = None, *, validate: bool = True) -> Dict[str, Any]:
    """Convenience wrapper around :meth:`ConfigManager.load_config`."""
    return ConfigManager(repo_root).load_config(validate=validate)


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_DIR", "load_config"]
