"""Configuration for asum.

Configuration is read from TOML files, layered field by field:

    built-in defaults  <-  ~/.asum/asum.toml  <-  ./asum.toml

Every key is optional. Unknown keys and sections are ignored.
Use 'asum init' to write a commented starter file and 'asum verify' to check one.
"""

import logging
import re
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from asum import global_config

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    """Supported generation backends."""

    OLLAMA = "ollama"
    GEMINI = "gemini"

    @classmethod
    def from_name(cls, name: str) -> "LLMProvider":
        """Resolve a provider name or one of its aliases.

        Raises:
            ValueError: If the name is not a known provider.
        """
        key = name.strip().lower()
        if key in PROVIDER_ALIASES:
            return PROVIDER_ALIASES[key]
        return cls(key)


PROVIDER_ALIASES = {
    "local-model": LLMProvider.OLLAMA,
    "local": LLMProvider.OLLAMA,
    "hosted-api": LLMProvider.GEMINI,
    "hosted": LLMProvider.GEMINI,
    "google": LLMProvider.GEMINI,
}


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================

CONFIG_FILE_NAME = "asum.toml"

DEFAULT_PROVIDER = LLMProvider.OLLAMA
DEFAULT_MAX_DIFF_LENGTH = 36000
DEFAULT_TIMEOUT_SECONDS = 60.0

DEFAULT_TEMPERATURE = 0.3
DEFAULT_TOP_P = 0.9
DEFAULT_NUM_PREDICT = 1024

DEFAULT_OLLAMA_URL = "http://localhost:11434/api/chat"
DEFAULT_OLLAMA_MODEL = "llama3"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

# Checked in order when [gemini] api_key is not set
API_KEY_ENV_VARS = {
    LLMProvider.GEMINI: ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
}


# ============================================================
# EXCEPTIONS
# ============================================================


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Configuration file not found: {self.path}")


class ConfigParseError(ConfigError):
    """Raised when a configuration file is malformed or fails validation.

    Syntax errors carry a line and column; schema errors carry the dotted key.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        key: Optional[str] = None,
    ):
        self.message = message
        self.path = Path(path) if path is not None else None
        self.line = line
        self.column = column
        self.key = key
        super().__init__(str(self))

    @property
    def location(self) -> str:
        """Human readable location of the error inside the file."""
        if self.line is not None:
            if self.column is not None:
                return f"line {self.line}, column {self.column}"
            return f"line {self.line}"
        if self.key:
            return f"key '{self.key}'"
        return ""

    def __str__(self) -> str:
        where = str(self.path) if self.path else "<config>"
        if self.location:
            where = f"{where} ({self.location})"
        return f"{where}: {self.message}"


# ============================================================
# SCHEMA
# ============================================================


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class GeneralConfig(_Section):
    """[general] section."""

    active_provider: LLMProvider = DEFAULT_PROVIDER
    max_diff_length: int = Field(DEFAULT_MAX_DIFF_LENGTH, gt=0)
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    ignore_patterns: tuple[str, ...] = ()
    git_extensions: tuple[str, ...] = ()

    @field_validator("active_provider", mode="before")
    @classmethod
    def resolve_provider_alias(cls, v: Any) -> Any:
        """Accept provider aliases such as 'local-model' and 'hosted-api'."""
        if isinstance(v, str):
            return LLMProvider.from_name(v)
        return v


class PromptsConfig(_Section):
    """[prompts] section. None means the built-in prompt is used."""

    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None


class AIParamsConfig(_Section):
    """[ai_params] section."""

    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    top_p: float = Field(DEFAULT_TOP_P, ge=0.0, le=1.0)
    num_predict: int = Field(DEFAULT_NUM_PREDICT, gt=0)


class OllamaConfig(_Section):
    """[ollama] section."""

    url: str = DEFAULT_OLLAMA_URL
    model: str = DEFAULT_OLLAMA_MODEL
    stream: bool = False


class GeminiConfig(_Section):
    """[gemini] section."""

    api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    url: Optional[str] = None


class AsumConfig(_Section):
    """Fully resolved, immutable configuration for one invocation.

    Attributes:
        sources: The files the values were read from, lowest precedence first.
    """

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)
    ai_params: AIParamsConfig = Field(default_factory=AIParamsConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    sources: tuple[str, ...] = ()

    @property
    def active_provider(self) -> LLMProvider:
        return self.general.active_provider

    @property
    def max_diff_length(self) -> int:
        return self.general.max_diff_length

    @property
    def active_model(self) -> str:
        """Model identifier of the active provider."""
        if self.active_provider == LLMProvider.GEMINI:
            return self.gemini.model
        return self.ollama.model


# ============================================================
# LOADING
# ============================================================

_TOML_LOCATION_RE = re.compile(r"\(at line (\d+), column (\d+)\)")


def _parse_error_from_toml(error: tomllib.TOMLDecodeError, path: Path) -> ConfigParseError:
    """Convert a TOML decode error into a ConfigParseError with its location."""
    line = getattr(error, "lineno", None)
    column = getattr(error, "colno", None)
    message = getattr(error, "msg", None) or str(error)

    if line is None:
        match = _TOML_LOCATION_RE.search(str(error))
        if match:
            line, column = int(match.group(1)), int(match.group(2))
            message = _TOML_LOCATION_RE.sub("", str(error)).strip()

    return ConfigParseError(f"TOML syntax error: {message}", path=path, line=line, column=column)


def _parse_error_from_validation(error: ValidationError, path: Optional[Path]) -> ConfigParseError:
    """Convert the first pydantic validation error into a ConfigParseError."""
    first = error.errors()[0]
    key = ".".join(str(part) for part in first.get("loc", ()))
    return ConfigParseError(f"Invalid value: {first.get('msg', error)}", path=path, key=key)


def load_config_file(path: Path) -> dict:
    """Read a single TOML configuration file.

    Args:
        path: Path to the file.

    Returns:
        The raw parsed document.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigParseError: If the file is not valid TOML.
        ConfigError: If the file cannot be read.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigNotFoundError(path)

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise _parse_error_from_toml(e, path) from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration from {path}: {e}") from e


def _validate(data: dict, path: Optional[Path] = None, sources: tuple[str, ...] = ()) -> AsumConfig:
    """Validate a raw document against the schema, filling in defaults."""
    try:
        return AsumConfig.model_validate({**data, "sources": sources})
    except ValidationError as e:
        raise _parse_error_from_validation(e, path) from e


def _merge(base: dict, override: dict) -> dict:
    """Merge two raw documents field by field; values in override win."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def get_search_paths(cwd: Optional[Path] = None) -> list[Path]:
    """Get the configuration files consulted by resolve_config.

    Returns:
        Paths in order of increasing precedence (home file, then local file).
    """
    cwd = Path.cwd() if cwd is None else Path(cwd)
    return [global_config.get_config_file_path(), cwd / CONFIG_FILE_NAME]


def resolve_config(cwd: Optional[Path] = None) -> AsumConfig:
    """Resolve the configuration for this invocation.

    Values from ./asum.toml override ~/.asum/asum.toml, which overrides the
    built-in defaults. When neither file exists the defaults are used and a
    warning is logged.

    Args:
        cwd: Directory to look for the local file in (defaults to the CWD).

    Returns:
        The resolved configuration.

    Raises:
        ConfigParseError: If a file that exists is malformed or invalid.
        ConfigError: If a file that exists cannot be read.
    """
    merged: dict = {}
    found: list[Path] = []

    for path in get_search_paths(cwd):
        if not path.is_file() or path in found:
            continue
        layer = load_config_file(path)
        # Validate each layer on its own so errors point at the right file
        _validate(layer, path)
        merged = _merge(merged, layer)
        found.append(path)
        logger.debug("Loaded configuration layer %s", path)

    if not found:
        searched = " or ".join(str(p) for p in get_search_paths(cwd))
        logger.warning("No %s found in %s; using built-in defaults", CONFIG_FILE_NAME, searched)

    return _validate(merged, found[-1] if found else None, tuple(str(p) for p in found))


def verify_config(path: Path) -> AsumConfig:
    """Parse and validate an explicit configuration file without side effects.

    Args:
        path: Path to the TOML file.

    Returns:
        The configuration the file resolves to (file values over defaults).

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigParseError: With line/column for syntax errors, or the key for
            schema errors.
    """
    path = Path(path)
    data = load_config_file(path)
    return _validate(data, path, (str(path),))


def mask_api_key(api_key: Optional[str]) -> str:
    """Mask an API key for display."""
    if not api_key:
        return "not set"
    if len(api_key) > 8:
        return f"{api_key[:4]}...{api_key[-4:]}"
    return "****"
