# dhconfig/config/settings.py
"""
Typed configuration for the loader itself.

* Loads defaults from `dhconfig.config.defaults.DEFAULT_CONFIG`
* Overrides with ``DHCONFIG_*`` environment variables
* Allows optional in-memory overrides (useful for tests and the CLI)
* Exposes values through a Pydantic model called `LoaderSettings`

This is *not* the user's settings tree; it only controls how that tree is
located, keyed and merged.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dhconfig.config.defaults import DEFAULT_CONFIG

ENV_PREFIX = "DHCONFIG_"

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge *override* into *base* (override wins)."""
    result: Dict[str, Any] = {**base}
    for k, v in override.items():
        if (
            k in result
            and isinstance(result[k], dict)
            and isinstance(v, dict)
        ):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _env_to_dict(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``DHCONFIG_<KEY>`` variables for the scalar defaults."""
    environ = os.environ if environ is None else environ
    found: Dict[str, Any] = {}
    for key, default in DEFAULT_CONFIG.items():
        if isinstance(default, dict):
            continue
        name = ENV_PREFIX + key
        if name in environ:
            found[key] = environ[name]
    return found


def _lower_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        str(k).lower(): _lower_keys(v) if isinstance(v, dict) else v
        for k, v in data.items()
    }


# --------------------------------------------------------------------------- #
# Pydantic model                                                              #
# --------------------------------------------------------------------------- #


class Priorities(BaseModel):
    model_config = ConfigDict(frozen=True)

    argv: int = Field(default=DEFAULT_CONFIG["PRIORITIES"]["ARGV"])
    env: int = Field(default=DEFAULT_CONFIG["PRIORITIES"]["ENV"])
    file: int = Field(default=DEFAULT_CONFIG["PRIORITIES"]["FILE"])
    overrides: int = Field(default=DEFAULT_CONFIG["PRIORITIES"]["OVERRIDES"])


class LoaderSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    # ---- key resolution -------------------------------------------------- #
    delimiter: str = Field(default=DEFAULT_CONFIG["DELIMITER"], min_length=1)
    # ---- environment selection ------------------------------------------- #
    environment_variable: str = Field(
        default=DEFAULT_CONFIG["ENVIRONMENT_VARIABLE"], min_length=1
    )
    environment_name_key: str = Field(
        default=DEFAULT_CONFIG["ENVIRONMENT_NAME_KEY"], min_length=1
    )
    # ---- files ----------------------------------------------------------- #
    file_extension: str = Field(default=DEFAULT_CONFIG["FILE_EXTENSION"])
    file_encoding: str = Field(default=DEFAULT_CONFIG["FILE_ENCODING"])
    dotenv_file: str = Field(default=DEFAULT_CONFIG["DOTENV_FILE"])
    # ---- volatile sources ------------------------------------------------ #
    env_separator: str = Field(default=DEFAULT_CONFIG["ENV_SEPARATOR"])
    parse_argv_values: bool = Field(default=DEFAULT_CONFIG["PARSE_ARGV_VALUES"])
    # ---- precedence ------------------------------------------------------ #
    priorities: Priorities = Field(default_factory=Priorities)

    @field_validator("file_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        if value and not value.startswith("."):
            return "." + value
        return value

    def get(self, item: str, default: Any | None = None) -> Any:  # noqa: A003
        return getattr(self, item, default)


# --------------------------------------------------------------------------- #
# Public loader                                                               #
# --------------------------------------------------------------------------- #


def load_settings(
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LoaderSettings:
    """
    Build a ``LoaderSettings`` by merging:

    1.  ``DEFAULT_CONFIG``                          (hard-coded defaults)
    2.  ``DHCONFIG_*`` environment variables        (deployment overrides)
    3.  *overrides* dict passed in programmatically (tests / cli flags)

    Later items win on conflict. Keys are case-insensitive.
    """
    merged = _deep_merge(DEFAULT_CONFIG, _env_to_dict(environ))
    if overrides:
        merged = _deep_merge(merged, {str(k).upper(): v for k, v in overrides.items()})
    return LoaderSettings(**_lower_keys(merged))
