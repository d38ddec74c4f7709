import importlib.util
from pathlib import Path

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "check_core_imports.py"


def _load_guard():
    spec = importlib.util.spec_from_file_location("check_core_imports", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None  # for mypy
    spec.loader.exec_module(module)
    return module


def test_core_import_guard_passes():
    exit_code = _load_guard().main()
    assert exit_code == 0, "core import guard failed"


def test_guard_covers_front_end_modules():
    guard = _load_guard()

    assert guard.CORE_DIR.parts[-2:] == ("amplitude_mcp", "core")
    for module in (
        "amplitude_mcp.registry",
        "amplitude_mcp.resources",
        "amplitude_mcp.server",
        "mcp.server.fastmcp",
    ):
        assert guard.is_forbidden(module)
    assert not guard.is_forbidden("amplitude_mcp.core.client")
    assert not guard.is_forbidden("httpx")


def test_guard_flags_relative_import_out_of_core(tmp_path):
    guard = _load_guard()
    bad = tmp_path / "leaky.py"
    bad.write_text("from ..registry import register_operations\nfrom . import models\n")

    errors = guard.scan_file(bad)

    assert errors == [f"{bad}: forbidden import '..registry'"]
