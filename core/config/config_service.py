"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
MACHINE_INI = CONFIG_DIR / "config.ini"
ENV_PREFIX = "SIGNPLACE_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Interaction": {
        "min_width_px": "50",
        "min_height_px": "25",
    },
    "Placement": {
        "default_x_percent": "20",
        "default_y_percent": "15",
        "default_width_percent": "10",
        "default_height_percent": "10",
    },
    "Preview": {
        "render_scale": "1.5",
        "canvas_width": "800",
        "canvas_height": "1000",
    },
    "Files": {
        "max_upload_mb": "50",
        "output_prefix": "completed-",
    },
    "Logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class InteractionConfig:
    min_width_px: float = 50.0
    min_height_px: float = 25.0


@dataclass
class PlacementConfig:
    default_x_percent: float = 20.0
    default_y_percent: float = 15.0
    default_width_percent: float = 10.0
    default_height_percent: float = 10.0


@dataclass
class PreviewConfig:
    render_scale: float = 1.5
    canvas_width: int = 800
    canvas_height: int = 1000


@dataclass
class FilesConfig:
    max_upload_mb: int = 50
    output_prefix: str = "completed-"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section, raw=True)}
    return data


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser(interpolation=None)
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    # dataclass annotations are strings under "from __future__ import annotations"
    typ = {"float": float, "int": int, "str": str, "bool": bool, "Path": Path}.get(typ, typ)
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(float(value))
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays(environ: Dict[str, str] | None = None) -> Dict[str, Dict[str, Any]]:
    environ = os.environ if environ is None else environ
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "SignPlace" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "signplace" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety.

    Precedence (lowest first): embedded defaults, defaults.ini, environment
    (``SIGNPLACE_<SECTION>__<KEY>``), machine config.ini, user config.ini.
    Extra INI files passed as ``overrides`` are applied last.
    """

    def __init__(self, *overrides: Path, environ: Dict[str, str] | None = None) -> None:
        self._lock = RLock()
        self._overrides = tuple(Path(p) for p in overrides)
        self._environ = environ
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if DEFAULTS_INI.exists():
                _apply(merged, _read_ini(DEFAULTS_INI), "defaults.ini", str(DEFAULTS_INI), sources)

            # Layer 2: environment variables
            _apply(merged, _env_overlays(self._environ), "env", "os.environ", sources)

            # Layer 3: machine config
            if MACHINE_INI.exists():
                _apply(merged, _read_ini(MACHINE_INI), "machine", str(MACHINE_INI), sources)

            # Layer 4: user overrides
            user_ini = _user_config_path()
            if user_ini.exists():
                _apply(merged, _read_ini(user_ini), "user", str(user_ini), sources)

            # Layer 5: explicit files
            for path in self._overrides:
                if path.exists():
                    _apply(merged, _read_ini(path), "explicit", str(path), sources)

            self._merged = merged
            self._sources = sources

            self.interaction = _build_dataclass(InteractionConfig, merged.get("Interaction", {}))
            self.placement = _build_dataclass(PlacementConfig, merged.get("Placement", {}))
            self.preview = _build_dataclass(PreviewConfig, merged.get("Preview", {}))
            self.files = _build_dataclass(FilesConfig, merged.get("Files", {}))
            self.logging = _build_dataclass(LoggingConfig, merged.get("Logging", {}))

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
