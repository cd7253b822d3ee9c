"""
Tests for the stand-alone indexer script.
"""

import importlib.util
import pytest
from pathlib import Path
from unittest.mock import patch

SCRIPT = Path(__file__).parent.parent.parent / "scripts" / "run_indexer.py"

ENV_VARIABLES = ("PDF_DIR", "INDEX_STRUCTURED", "INDEX_QUERYABLE", "PAPERINDEX_CONFIG")


@pytest.fixture
def run_indexer(temp_config: Path, reset_config_singleton, reset_logger_singleton, monkeypatch):
    """Load the script as a module and return a helper running its main()."""
    for variable in ENV_VARIABLES:
        monkeypatch.delenv(variable, raising=False)

    spec = importlib.util.spec_from_file_location("run_indexer", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    def _run(*arguments: str) -> int:
        monkeypatch.setattr("sys.argv", ["run_indexer.py", "--config", str(temp_config), "--quiet", *arguments])
        with pytest.raises(SystemExit) as exc_info:
            module.main()
        return exc_info.value.code

    _run.module = module
    return _run


class TestRunIndexer:
    """Tests for rebuild and update through the script."""

    def test_reset_asks_with_shared_prompt(self, run_indexer, sample_library: Path, config):
        """Test that --reset confirms through the command line prompt."""
        with patch.object(run_indexer.module, "prompt", return_value="y") as prompt:
            assert run_indexer("--reset") == 0

        prompt.assert_called_once()
        assert config.paths.structured_index.is_file()

    def test_reset_end_of_input_is_rejected(self, run_indexer, sample_library: Path, config, capsys):
        """Test that closed input aborts the rebuild as an input error."""
        with patch("builtins.input", side_effect=EOFError):
            assert run_indexer("--reset") == 1

        assert "input error" in capsys.readouterr().out
        assert not config.paths.structured_index.exists()

    def test_update(self, run_indexer, sample_library: Path, config):
        """Test that the default mode updates an existing index."""
        with patch.object(run_indexer.module, "prompt", return_value="y"):
            assert run_indexer("--reset") == 0

        assert run_indexer() == 0
        assert config.paths.queryable_index.is_file()
