"""Harness configuration."""

import platform
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

from compiletest.models.mode import Mode


def host_triple() -> str:
    """Best-effort target triple for the machine running the harness."""
    machine = platform.machine().lower() or "unknown"
    system = platform.system().lower()
    if system == "darwin":
        return f"{machine}-apple-darwin"
    if system == "windows":
        return f"{machine}-pc-windows-msvc"
    return f"{machine}-unknown-{system or 'unknown'}-gnu"


class Config(BaseModel):
    """Configuration for one compiletest run.

    Test closures keep a deep copy taken when they are built; changes made
    to this object afterwards are not seen by them.
    """

    compile_lib_path: Path = Path()
    run_lib_path: Path = Path()
    rustc_path: Path = Path("rustc")
    rustdoc_path: Path | None = None
    lldb_python: str = "python"
    docck_python: str = "python"
    valgrind_path: str | None = None
    force_valgrind: bool = False
    llvm_filecheck: Path | None = None

    src_base: Path = Field(
        default=Path("tests/run-pass"), description="Root of the test sources"
    )
    build_base: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        description="Root of the mirrored build tree",
    )
    stage_id: str = "stage-id"
    mode: Mode = Mode.RUN_PASS

    run_ignored: bool = False
    filter: str | None = None
    filter_exact: bool = False
    logfile: Path | None = None
    quiet: bool = False
    verbose: bool = False

    runtool: str | None = None
    host_rustcflags: str | None = None
    target_rustcflags: str | None = None
    target: str = Field(default_factory=host_triple)
    host: str = Field(default_factory=host_triple)

    gdb_version: str | None = Field(
        default=None, description="Version extracted from the gdb banner"
    )
    lldb_version: str | None = Field(
        default=None, description="Major version extracted from the lldb banner"
    )
    llvm_version: str | None = None
    lldb_python_dir: str | None = None

    android_cross_path: Path = Path("android-cross-path")
    adb_path: str = "adb"
    adb_test_dir: str = "/data/tmp/work"
    adb_device_status: bool = False

    cc: str = "cc"
    cxx: str = "c++"
    cflags: str = ""
    llvm_components: str = ""
    llvm_cxxflags: str = ""
    nodejs: str | None = None


def default_config() -> Config:
    """Return a configuration with every field at its default."""
    return Config()
