from __future__ import annotations

import sys


def test_engine_import_does_not_load_cli_or_logging_setup() -> None:
    before_modules = set(sys.modules)
    import engine  # noqa: F401

    newly_imported = set(sys.modules) - before_modules
    assert "cli" not in newly_imported
    assert "logging_config" not in newly_imported
    assert not any(name == "rich" or name.startswith("rich.") for name in newly_imported)
