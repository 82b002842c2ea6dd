"""Shared test fixtures for elmpress."""

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

from elmpress_core.config.models import BuildConfig, CompilerConfig, ElmPressConfig

_STUB_TEMPLATE = """\
import json
import sys
from pathlib import Path

source, mode, output_flag, output = sys.argv[1:5]
with open(source, encoding="utf-8", errors="surrogateescape", newline="") as f:
    content = f.read()
Path({record!r}).write_text(json.dumps({{
    "argv": sys.argv[1:],
    "cwd": str(Path.cwd()),
    "content": content,
    "content_hex": Path(source).read_bytes().hex(),
}}))
if {exit_code!r} != 0:
    sys.stderr.write("-- COMPILE ERROR --\\n")
    sys.exit({exit_code!r})
payload = {output_bytes!r}
if payload is not None:
    Path(output).write_bytes(payload)
else:
    with open(output, "w", encoding="utf-8", newline="") as f:
        f.write({output_text!r})
"""


@dataclass
class StubCompiler:
    """A Python script standing in for the external compiler."""

    script: Path
    record_path: Path

    @property
    def command(self) -> list[str]:
        return [sys.executable, str(self.script)]

    @property
    def record(self) -> dict:
        return json.loads(self.record_path.read_text())

    @property
    def called(self) -> bool:
        return self.record_path.exists()

    @property
    def source_path(self) -> Path:
        return Path(self.record["argv"][0])

    @property
    def output_path(self) -> Path:
        return Path(self.record["argv"][3])


@pytest.fixture
def make_stub_compiler(tmp_path):
    """Factory: make_stub_compiler(output_text="...", exit_code=0, output_bytes=None).

    *output_bytes*, when given, is written raw in place of *output_text*.
    """
    counter = iter(range(1000))

    def _make(
        output_text: str = "var x = 1;",
        exit_code: int = 0,
        output_bytes: bytes | None = None,
    ) -> StubCompiler:
        n = next(counter)
        stub_dir = tmp_path / "stubs"
        stub_dir.mkdir(exist_ok=True)
        script = stub_dir / f"compiler_{n}.py"
        record = stub_dir / f"record_{n}.json"
        script.write_text(
            _STUB_TEMPLATE.format(
                record=str(record),
                exit_code=exit_code,
                output_text=output_text,
                output_bytes=output_bytes,
            )
        )
        return StubCompiler(script=script, record_path=record)

    return _make


@pytest.fixture
def stub_compiler(make_stub_compiler):
    return make_stub_compiler()


@pytest.fixture
def failing_compiler(make_stub_compiler):
    return make_stub_compiler(exit_code=1)


@pytest.fixture
def site_dir(tmp_path):
    """A temp site source directory with an elm.json marker."""
    site = tmp_path / "site"
    site.mkdir()
    (site / "elm.json").write_text('{"type": "application"}')
    return site


@pytest.fixture
def make_config(site_dir):
    """Factory: ElmPressConfig pointed at *site_dir* and the given compiler."""

    def _make(compiler=None, **build_kwargs) -> ElmPressConfig:
        compiler_cfg = CompilerConfig(command=compiler.command) if compiler else CompilerConfig()
        build_kwargs.setdefault("source_dir", str(site_dir))
        build_kwargs.setdefault("destination", str(site_dir.parent / "_site"))
        return ElmPressConfig(compiler=compiler_cfg, build=BuildConfig(**build_kwargs))

    return _make


@pytest.fixture
def sample_config():
    return ElmPressConfig()
