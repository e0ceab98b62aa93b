"""Tests for asum.cli module."""

from unittest.mock import MagicMock

from typer.testing import CliRunner

from asum import __version__
from asum.cli import app
from asum.config import LLMProvider
from asum.git import GitError
from asum.global_config import default_config_text
from asum.llm import BaseLLMProvider, LLMResult, ProviderUnreachableError


runner = CliRunner()


def fake_provider(text="feat(parser): reject empty input\n\n- Return Error::Empty early", error=None):
    provider = MagicMock(spec=BaseLLMProvider)
    provider.name = "Fake (test-model)"
    if error is not None:
        provider.generate.side_effect = error
    else:
        provider.generate.return_value = LLMResult(text=text, model="test-model")
    return provider


class TestMainCommand:
    """Tests for the default generate command."""

    def test_prints_message_and_copies(self, mocker, sample_diff):
        """Test a successful run prints the message and copies it."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mocker.patch("asum.generator.get_provider", return_value=fake_provider())
        mock_copy = mocker.patch("asum.cli.main.copy_to_clipboard", return_value=True)

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "feat(parser): reject empty input" in result.output
        assert "- Return Error::Empty early" in result.output
        mock_copy.assert_called_once_with(
            "feat(parser): reject empty input\n\n- Return Error::Empty early"
        )

    def test_no_copy(self, mocker, sample_diff):
        """Test that --no-copy skips the clipboard."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mocker.patch("asum.generator.get_provider", return_value=fake_provider())
        mock_copy = mocker.patch("asum.cli.main.copy_to_clipboard")

        result = runner.invoke(app, ["--no-copy"])

        assert result.exit_code == 0
        mock_copy.assert_not_called()

    def test_clipboard_failure_still_prints(self, mocker, sample_diff):
        """Test that a clipboard failure does not fail the run."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mocker.patch("asum.generator.get_provider", return_value=fake_provider())
        mocker.patch("asum.cli.main.copy_to_clipboard", return_value=False)

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "feat(parser): reject empty input" in result.output
        assert "copied to clipboard" not in result.output

    def test_empty_diff_exits_zero(self, mocker):
        """Test that nothing staged is informational, not an error."""
        mocker.patch("asum.cli.main.read_diff", return_value="")
        mock_get_provider = mocker.patch("asum.generator.get_provider")

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "No staged changes" in result.output
        mock_get_provider.assert_not_called()

    def test_lock_only_diff_exits_zero(self, mocker, lock_only_diff):
        """Test that a lock-file-only diff does not call the backend."""
        mocker.patch("asum.cli.main.read_diff", return_value=lock_only_diff)
        mock_get_provider = mocker.patch("asum.generator.get_provider")

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "nothing to summarize" in result.output
        mock_get_provider.assert_not_called()

    def test_backend_unreachable(self, mocker, sample_diff):
        """Test that an unreachable backend exits 1 with a hint."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        error = ProviderUnreachableError("Could not connect to Ollama. Start it with: ollama serve")
        mocker.patch("asum.generator.get_provider", return_value=fake_provider(error=error))

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "ollama serve" in result.output

    def test_invalid_format_shows_raw_text(self, mocker, sample_diff):
        """Test that an unusable answer is shown to the user."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mocker.patch(
            "asum.generator.get_provider",
            return_value=fake_provider(text="I am not sure what this does."),
        )

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "[RAW MODEL RESPONSE]" in result.output
        assert "I am not sure what this does." in result.output

    def test_git_error(self, mocker):
        """Test that a git failure exits 1."""
        mocker.patch("asum.cli.main.read_diff", side_effect=GitError("not a git repository"))

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "not a git repository" in result.output

    def test_config_error(self, mocker, work_dir):
        """Test that a malformed config file exits 1 with its location."""
        (work_dir / "asum.toml").write_text("[general]\nmax_diff_length = = 3\n")
        mock_read = mocker.patch("asum.cli.main.read_diff")

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "line 2" in result.output
        mock_read.assert_not_called()

    def test_provider_and_model_overrides(self, mocker, sample_diff):
        """Test that --provider and --model reach the provider factory."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mock_get_provider = mocker.patch("asum.generator.get_provider", return_value=fake_provider())
        mocker.patch("asum.cli.main.copy_to_clipboard", return_value=True)

        result = runner.invoke(
            app, ["--provider", "hosted-api", "--model", "gemini-2.5-pro", "--timeout", "5"]
        )

        assert result.exit_code == 0
        config = mock_get_provider.call_args.args[0]
        assert config.active_provider == LLMProvider.GEMINI
        assert config.gemini.model == "gemini-2.5-pro"
        assert config.general.timeout_seconds == 5

    def test_invalid_provider(self, mocker):
        """Test that an unknown --provider exits 1."""
        mocker.patch("asum.cli.main.read_diff", return_value="")

        result = runner.invoke(app, ["--provider", "openai"])

        assert result.exit_code == 1
        assert "Valid providers" in result.output

    def test_max_diff_length_override(self, mocker, sample_diff):
        """Test that --max-diff-length truncates the payload."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        provider = fake_provider()
        mocker.patch("asum.generator.get_provider", return_value=provider)
        mocker.patch("asum.cli.main.copy_to_clipboard", return_value=True)

        result = runner.invoke(app, ["--max-diff-length", "120"])

        assert result.exit_code == 0
        prompt = provider.generate.call_args.args[0]
        assert "diff truncated" in prompt.user

    def test_show_prompt(self, mocker, sample_diff):
        """Test that --show-prompt prints the prompt."""
        mocker.patch("asum.cli.main.read_diff", return_value=sample_diff)
        mocker.patch("asum.generator.get_provider", return_value=fake_provider())
        mocker.patch("asum.cli.main.copy_to_clipboard", return_value=True)

        result = runner.invoke(app, ["--show-prompt"])

        assert result.exit_code == 0
        assert "[SYSTEM PROMPT]" in result.output
        assert "[USER PROMPT]" in result.output

    def test_version(self):
        """Test --version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_stdin_flag_reads_piped_diff(self, mocker, sample_diff):
        """Test that --stdin summarizes the piped diff without calling git."""
        mock_git = mocker.patch("asum.git.get_staged_diff")
        provider = fake_provider()
        mocker.patch("asum.generator.get_provider", return_value=provider)

        result = runner.invoke(app, ["--stdin", "--no-copy"], input=sample_diff)

        assert result.exit_code == 0
        assert "feat(parser): reject empty input" in result.output
        mock_git.assert_not_called()
        prompt = provider.generate.call_args[0][0]
        assert "src/parser.rs" in prompt.user

    def test_file_list_fallback_when_extensions_match_nothing(self, mocker, work_dir):
        """Test that staged file names are summarized when git_extensions filter out every change."""
        (work_dir / "asum.toml").write_text('[general]\ngit_extensions = ["*.rs"]\n')
        mock_diff = mocker.patch("asum.git.get_staged_diff", return_value="")
        mocker.patch("asum.git.get_staged_files", return_value="M\tREADME.md")
        provider = fake_provider(text="docs(readme): describe installation")
        mocker.patch("asum.generator.get_provider", return_value=provider)

        result = runner.invoke(app, ["--no-copy"])

        assert result.exit_code == 0
        assert "docs(readme): describe installation" in result.output
        mock_diff.assert_called_once_with(("*.rs",))
        prompt = provider.generate.call_args[0][0]
        assert "README.md" in prompt.user


class TestVerifyCommand:
    """Tests for asum verify."""

    def test_valid_default_file(self, work_dir):
        """Test verifying ./asum.toml."""
        (work_dir / "asum.toml").write_text(default_config_text())

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 0
        assert "[OK] asum.toml syntax is valid." in result.output

    def test_valid_explicit_file(self, temp_dir):
        """Test verifying a file given on the command line."""
        path = temp_dir / "custom.toml"
        path.write_text('[general]\nactive_provider = "local-model"\n')

        result = runner.invoke(app, ["verify", str(path)])

        assert result.exit_code == 0
        assert "syntax is valid" in result.output

    def test_syntax_error(self, work_dir):
        """Test that a syntax error reports line and column."""
        (work_dir / "asum.toml").write_text('[ollama]\nurl = "http://x\n')

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert "line 2" in result.output
        assert "column" in result.output

    def test_schema_error(self, work_dir):
        """Test that a schema error names the key."""
        (work_dir / "asum.toml").write_text("[ai_params]\ntemperature = 9\n")

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert "ai_params.temperature" in result.output

    def test_missing_file(self):
        """Test that a missing file exits 1."""
        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestInitCommand:
    """Tests for asum init."""

    def test_writes_local_file(self, work_dir):
        """Test writing ./asum.toml."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (work_dir / "asum.toml").read_text() == default_config_text()

    def test_refuses_overwrite(self, work_dir):
        """Test that an existing file is kept without --force."""
        (work_dir / "asum.toml").write_text("# mine\n")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (work_dir / "asum.toml").read_text() == "# mine\n"

    def test_force(self, work_dir):
        """Test that --force overwrites."""
        (work_dir / "asum.toml").write_text("# mine\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert (work_dir / "asum.toml").read_text() == default_config_text()

    def test_global(self, home_config_dir, work_dir):
        """Test writing ~/.asum/asum.toml."""
        result = runner.invoke(app, ["init", "--global"])

        assert result.exit_code == 0
        assert (home_config_dir / "asum.toml").exists()
        assert not (work_dir / "asum.toml").exists()


class TestConfigShowCommand:
    """Tests for asum config show."""

    def test_defaults(self):
        """Test showing the defaults when no file exists."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "built-in defaults" in result.output
        assert "Provider: ollama" in result.output
        assert "API Key: not set" in result.output

    def test_masks_api_key(self, work_dir):
        """Test that the API key is masked and sources are listed."""
        path = work_dir / "asum.toml"
        path.write_text(
            '[general]\nactive_provider = "gemini"\n[gemini]\napi_key = "abcd1234567890wxyz"\n'
        )

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "abcd...wxyz" in result.output
        assert "abcd1234567890wxyz" not in result.output
        assert str(path) in result.output
        assert "Provider: gemini" in result.output

    def test_key_from_env(self, monkeypatch):
        """Test that an environment key is shown masked with its source."""
        monkeypatch.setenv("GEMINI_API_KEY", "wxyz0987654321abcd")

        result = runner.invoke(app, ["config", "show"])

        assert "wxyz...abcd (GEMINI_API_KEY)" in result.output

    def test_invalid_config(self, work_dir):
        """Test that a broken file exits 1."""
        (work_dir / "asum.toml").write_text("[general\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
