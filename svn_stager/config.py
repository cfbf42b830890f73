"""Configuration management for svn-stager.

Values resolve through a fallback chain: environment variable, then an
options object registered with initialize(), then the [stager] section of
the file named by SVN_STAGER_CONFIG, then the built-in default.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

try:
    import koji
except ImportError:
    koji = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

CONFIG_SECTION = "stager"
# Canonical staging directory, relative to the working directory
SOURCE_DIR_NAME = "source"
DEFAULT_CONTEXT_TMP_NAME = "upload/tmp"

# Module-level config cache
_config: Optional[Dict[str, Any]] = None
_options: Optional[Any] = None  # Options object of the embedding application


def initialize(options: Any) -> None:
    """Register an already-parsed options object.

    Attributes named `stager_<key>` on options override the config file.

    Args:
        options: Parsed options object (e.g. from a kojid-style get_options())
    """
    global _options
    _options = options
    logger.debug("Config module initialized with options object")


def _parse_config_file(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Read the [stager] section of config_file with koji's config reader.

    Args:
        config_file: Path to an ini-style config file, or None

    Returns:
        Dict of raw string values, empty when the file or section is absent
    """
    if not config_file:
        return {}
    if koji is None:
        logger.debug("koji library unavailable, ignoring config file %s", config_file)
        return {}
    if not os.path.exists(config_file):
        logger.warning("Config file %s does not exist, using defaults", config_file)
        return {}

    try:
        parser = koji.read_config_files([config_file], raw=True)
    except Exception as exc:
        logger.warning("Failed to read config file %s: %s", config_file, exc)
        return {}

    if not parser.has_section(CONFIG_SECTION):
        logger.debug("No [%s] section in %s", CONFIG_SECTION, config_file)
        return {}
    return dict(parser.items(CONFIG_SECTION))


def _get_config() -> Dict[str, Any]:
    """Get parsed config dict, initializing if needed."""
    global _config
    if _config is None:
        config_file = os.environ.get("SVN_STAGER_CONFIG")
        _config = _parse_config_file(config_file)
    return _config


def _get_config_value(
    key: str,
    default: Any,
    env_var: Optional[str] = None,
    converter: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """Get config value with fallback chain: env var -> options -> config file -> default.

    Args:
        key: Config key name (in [stager] section)
        default: Default value if not found
        env_var: Optional environment variable name (e.g., SVN_STAGER_KEY)
        converter: Optional function to convert string value (e.g., int, bool)

    Returns:
        Config value (converted if converter provided)
    """
    if env_var:
        env_value = os.environ.get(env_var)
        if env_value is not None:
            if converter:
                try:
                    return converter(env_value)
                except (ValueError, TypeError):
                    logger.warning(
                        "Invalid value for %s: %s, using default", env_var, env_value
                    )
                    return default
            return env_value

    if _options is not None:
        option_key = f"stager_{key}"
        if hasattr(_options, option_key):
            value = getattr(_options, option_key)
            if converter and isinstance(value, str):
                try:
                    return converter(value)
                except (ValueError, TypeError):
                    logger.warning("Invalid value for %s: %s, using default", key, value)
                    return default
            return value

    config = _get_config()
    value = config.get(key)
    if value is not None:
        if converter:
            try:
                return converter(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Invalid value for config key %s: %s, using default", key, value
                )
                return default
        return value

    return default


def _parse_bool(value: Any) -> bool:
    """Parse boolean value from config (string or bool).

    Accepts: True, "true", "True", "1", "yes", "on" -> True
             False, "false", "False", "0", "no", "off" -> False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off", ""):
            return False
        raise ValueError(f"Not a boolean: {value}")
    return bool(value)


def parse_scratch_dir(value: Any) -> str:
    """Validate the scratch directory name.

    It must be relative, stay inside the working directory and stay out of
    the canonical source directory, which is cleared during extraction.
    """
    text = str(value).strip()
    parts = [part for part in text.replace("\\", "/").split("/") if part and part != "."]
    if (
        not parts
        or text.startswith(("/", "\\"))
        or os.path.isabs(text)
        or ".." in parts
        or parts[0] == SOURCE_DIR_NAME
    ):
        raise ValueError(f"Invalid scratch directory: {value}")
    return "/".join(parts)


def stager_svn_command() -> str:
    """Program name (or path) of the svn client."""
    return _get_config_value(
        "svn_command",
        "svn",
        env_var="SVN_STAGER_SVN_COMMAND",
    )


def stager_cygpath_command() -> str:
    """Program used to translate paths in hybrid mode."""
    return _get_config_value(
        "cygpath_command",
        "cygpath",
        env_var="SVN_STAGER_CYGPATH_COMMAND",
    )


def stager_hybrid_paths() -> bool:
    """Translate paths to Cygwin syntax before invoking svn (default: off)."""
    return _get_config_value(
        "hybrid_paths",
        False,
        env_var="SVN_STAGER_HYBRID_PATHS",
        converter=_parse_bool,
    )


def stager_context_tmp_name() -> str:
    """Scratch checkout directory, relative to the working directory."""
    return _get_config_value(
        "context_tmp_name",
        DEFAULT_CONTEXT_TMP_NAME,
        env_var="SVN_STAGER_CONTEXT_TMP_NAME",
        converter=parse_scratch_dir,
    )


def stager_collect_info() -> bool:
    """Run `svn info --xml` after checkout to record commit metadata."""
    return _get_config_value(
        "collect_info",
        False,
        env_var="SVN_STAGER_COLLECT_INFO",
        converter=_parse_bool,
    )


def stager_log_file() -> str:
    """Optional file receiving a copy of captured client output."""
    return _get_config_value(
        "log_file",
        "",
        env_var="SVN_STAGER_LOG_FILE",
    )


def reset_config() -> None:
    """Reset config cache (useful for testing)."""
    global _config, _options
    _config = None
    _options = None
