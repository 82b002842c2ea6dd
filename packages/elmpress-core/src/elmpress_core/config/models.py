from pydantic import BaseModel, Field, field_validator
from typing import Literal


class CompilerConfig(BaseModel):
    command: list[str] = Field(default_factory=lambda: ["npx", "elm", "make"], min_length=1)
    input_ext: str = ".elm"
    output_ext: str = ".js"
    output_flag: str = "--output"
    mode: Literal["debug", "optimize"] | None = None
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("input_ext", "output_ext")
    @classmethod
    def validate_ext(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"extension must start with '.': {v!r}")
        return v


class BuildConfig(BaseModel):
    source_dir: str = "."
    destination: str = "_site"
    environment_var: str = "ELMPRESS_ENV"
    development_value: str = "development"
    safe_mode: bool = False
    fail_fast: bool = True
    exclude: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "elm-stuff", "__pycache__", ".venv"
    ])


class PluginsConfig(BaseModel):
    transforms: list[str] = Field(default_factory=lambda: ["elm"])


class ElmPressConfig(BaseModel):
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
