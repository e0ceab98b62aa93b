"""Shared test fixtures and configuration."""

import logging
import tempfile
from pathlib import Path

import pytest

from asum.config import AsumConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point ~/.asum at a temp dir, run from an empty CWD and clear API keys."""
    home_dir = tmp_path / "home" / ".asum"
    work_dir = tmp_path / "work"
    work_dir.mkdir()

    monkeypatch.setattr("asum.global_config._CONFIG_DIR", home_dir)
    monkeypatch.chdir(work_dir)
    for var in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "ASUM_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    yield {"home": home_dir, "work": work_dir}

    logger = logging.getLogger("asum")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def home_config_dir(isolated_env):
    """The (not yet created) ~/.asum directory used by the test."""
    return isolated_env["home"]


@pytest.fixture
def work_dir(isolated_env):
    """The current working directory used by the test."""
    return isolated_env["work"]


@pytest.fixture
def default_config():
    """Configuration with every value at its default."""
    return AsumConfig()


@pytest.fixture
def sample_diff():
    """Staged diff touching a source file and a lock file."""
    return """diff --git a/src/parser.rs b/src/parser.rs
index 3b18e51..a9c2f04 100644
--- a/src/parser.rs
+++ b/src/parser.rs
@@ -10,6 +10,9 @@ pub fn parse(input: &str) -> Result<Ast> {
+    if input.is_empty() {
+        return Err(Error::Empty);
+    }
     let tokens = lex(input)?;
diff --git a/Cargo.lock b/Cargo.lock
index 1111111..2222222 100644
--- a/Cargo.lock
+++ b/Cargo.lock
@@ -1,3 +1,3 @@
 [[package]]
-version = "0.1.0"
+version = "0.1.1"
"""


@pytest.fixture
def lock_only_diff():
    """Staged diff that only touches Cargo.lock."""
    return """diff --git a/Cargo.lock b/Cargo.lock
index 1111111..2222222 100644
--- a/Cargo.lock
+++ b/Cargo.lock
@@ -1,3 +1,3 @@
 [[package]]
-version = "0.1.0"
+version = "0.1.1"
"""
