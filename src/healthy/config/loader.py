"""Layered configuration loading for healthy-sdk.

A wait configuration is resolved from up to four layers; a later layer wins
for every setting it actually names:

1. ``DEFAULT_CONFIG``
2. a config file, given explicitly or discovered in the search directory
3. ``HEALTHY_TIMEOUT``, ``HEALTHY_DELAY`` and ``HEALTHY_JITTER``
4. flags given by the caller, e.g. the ``healthy wait`` options

A config file is a YAML (or ``.json``) mapping of durations::

    timeout: 2m
    delay: 250ms
    jitter: 0

Shipped in this module
----------------------
- ConfigLoader   — reads each layer and resolves them into one ``WaitConfig``
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import yaml

from healthy.config.defaults import DEFAULT_CONFIG
from healthy.config.schema import CONFIGURABLE_KEYS, RUNTIME_ONLY_KEYS, validate_config
from healthy.schema.config import WaitConfig
from healthy.schema.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Searched in order by discover(); the first existing file wins.
_AUTO_SEARCH_PATHS: tuple[str, ...] = (
    "healthy.yaml",
    "healthy.yml",
    "healthy.json",
    ".healthy.yaml",
    ".healthy.yml",
    ".healthy.json",
)


class ConfigLoader:
    """Resolves ``WaitConfig`` from a file, the environment and flags.

    Parameters
    ----------
    env_prefix:
        Prefix of the variables read by :meth:`load_env`.
    search_dir:
        Directory searched by :meth:`discover`.  Defaults to the working
        directory at the time of the call.

    Examples
    --------
    >>> loader = ConfigLoader(env_prefix="UNSET_PREFIX_", search_dir="/nonexistent")
    >>> loader.resolve(delay="250ms").delay
    0.25
    """

    def __init__(
        self,
        env_prefix: str = "HEALTHY_",
        search_dir: str | Path | None = None,
    ) -> None:
        self._env_prefix = env_prefix
        self._search_dir = Path(search_dir) if search_dir is not None else None

    @property
    def env_prefix(self) -> str:
        return self._env_prefix

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def read_file(self, path: str | Path) -> dict[str, object]:
        """Parse *path* as JSON (``.json`` suffix) or YAML (anything else).

        An empty file reads as an empty mapping.

        Raises
        ------
        ConfigurationError
            If the file is missing or unreadable, does not parse, or its
            top level is not a mapping.
        """
        resolved = Path(path)
        try:
            text = resolved.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"Config file not found: {resolved}",
                context={"path": str(resolved)},
            ) from exc
        except OSError as exc:
            raise ConfigurationError(
                f"Could not read config file {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc

        try:
            if resolved.suffix.lower() == ".json":
                raw: object = json.loads(text) if text.strip() else None
            else:
                raw = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationError(
                f"Failed to parse config file {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Config file {resolved} must hold a mapping of settings, "
                f"not {type(raw).__name__}",
                context={"path": str(resolved)},
            )
        return raw

    def load_file(self, path: str | Path) -> WaitConfig:
        """Read and validate one config file."""
        config = validate_config(self.read_file(path), source=f"config file {path}")
        logger.debug("Loaded %s from %s", sorted(config.model_fields_set), path)
        return config

    def load_env(self) -> WaitConfig:
        """Read ``<prefix>TIMEOUT``, ``<prefix>DELAY`` and ``<prefix>JITTER``.

        Other prefixed variables are ignored, except ``<prefix>SCOPE`` and
        ``<prefix>CALLBACK``: naming a runtime-only setting is an error.
        """
        data: dict[str, object] = {}
        for key in (*CONFIGURABLE_KEYS, *sorted(RUNTIME_ONLY_KEYS)):
            value = os.environ.get(f"{self._env_prefix}{key.upper()}")
            if value is not None:
                data[key] = value
        config = validate_config(data, source="environment")
        if data:
            logger.debug("Loaded %s from %s* variables", sorted(data), self._env_prefix)
        return config

    def load_flags(self, **flags: object) -> WaitConfig:
        """Validate caller flags; a ``None`` value means the flag was not given."""
        given = {key: value for key, value in flags.items() if value is not None}
        return validate_config(given, source="flags")

    def discover(self) -> Path | None:
        """Return the first config file found in the search directory."""
        base_dir = self._search_dir if self._search_dir is not None else Path.cwd()
        for name in _AUTO_SEARCH_PATHS:
            candidate = base_dir / name
            if candidate.is_file():
                logger.info("Using healthy config from %s", candidate)
                return candidate
        logger.debug("No config file in %s; using defaults", base_dir)
        return None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, path: str | Path | None = None, **flags: object) -> WaitConfig:
        """Layer defaults, a config file, the environment and *flags*.

        Parameters
        ----------
        path:
            Config file to use.  It must exist; when omitted, the file
            returned by :meth:`discover` is used if there is one.
        **flags:
            ``timeout``, ``delay`` and ``jitter`` values.  ``None`` values are
            skipped.

        Raises
        ------
        ConfigurationError
            From whichever layer is invalid; ``context["source"]`` is
            ``"flags"`` when the flags themselves are at fault.
        """
        config = DEFAULT_CONFIG
        config_file = Path(path) if path is not None else self.discover()
        if config_file is not None:
            config = config.merge(self.load_file(config_file))
        config = config.merge(self.load_env())
        config = config.merge(self.load_flags(**flags))
        logger.debug("Resolved wait config: %s", config.summary())
        return config
