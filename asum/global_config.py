"""Global configuration management for asum.

Handles user-level files stored in ~/.asum/:
- asum.toml: Fallback configuration when the working directory has none
- logs/: Daily log files
"""

from pathlib import Path


class GlobalConfigError(Exception):
    """Raised when there's an error writing global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".asum"


def get_global_config_dir() -> Path:
    """Get the global asum configuration directory.

    Returns:
        Path to ~/.asum/
    """
    return _CONFIG_DIR


def get_config_file_path() -> Path:
    """Get path to the global asum.toml file.

    Returns:
        Path to ~/.asum/asum.toml
    """
    return get_global_config_dir() / "asum.toml"


def get_logs_dir() -> Path:
    """Get path to the log directory.

    Returns:
        Path to ~/.asum/logs/
    """
    return get_global_config_dir() / "logs"


DEFAULT_CONFIG_TEXT = """\
# asum configuration
# Looked up in ./asum.toml first, then ~/.asum/asum.toml.
# Every key is optional; missing keys fall back to the defaults shown here.

[general]
# "ollama" (local model) or "gemini" (hosted API)
active_provider = "ollama"
# Maximum number of bytes of diff sent to the model
max_diff_length = 36000
# Seconds to wait for the model before giving up
timeout_seconds = 60
# Extra glob patterns to leave out of the diff (lock files are already skipped)
ignore_patterns = []
# Only send files matching these globs, e.g. ["*.py", "*.rs"]; empty sends all
git_extensions = []

[ai_params]
temperature = 0.3
top_p = 0.9
num_predict = 1024

[ollama]
url = "http://localhost:11434/api/chat"
model = "llama3"
stream = false

[gemini]
# api_key = "..."   # or set GEMINI_API_KEY / GOOGLE_API_KEY
model = "gemini-2.0-flash"

# [prompts]
# system_prompt = "..."
# user_prompt = \"\"\"[INPUT DIFF]
# {{diff}}
#
# [OUTPUT]\"\"\"
"""


def default_config_text() -> str:
    """Get the commented starter configuration written by 'asum init'."""
    return DEFAULT_CONFIG_TEXT


def write_default_config(path: Path, force: bool = False) -> Path:
    """Write the starter configuration to path.

    Args:
        path: Destination file.
        force: Overwrite an existing file.

    Returns:
        The path written.

    Raises:
        GlobalConfigError: If the file exists and force is False, or on I/O failure.
    """
    path = Path(path)
    if path.exists() and not force:
        raise GlobalConfigError(f"{path} already exists (use --force to overwrite)")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(default_config_text())
    except OSError as e:
        raise GlobalConfigError(f"Failed to write config to {path}: {e}")

    return path
