"""SiteBuilder: routes source files through transform plugins into an output tree."""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path

from elmpress_core.config.models import BuildConfig
from elmpress_core.converter.converter import read_verbatim, write_verbatim
from elmpress_core.converter.models import BuildFailure
from elmpress_core.interfaces.transform import TransformPlugin
from elmpress_core.site.models import BuildError, BuildReport

logger = logging.getLogger(__name__)


@dataclass
class PlannedFile:
    """One source file and where it ends up."""

    source: Path
    destination: Path
    transform: TransformPlugin | None = None


def _matches_any(path: Path, patterns: set[str]) -> bool:
    """Check whether any component of *path* matches one of *patterns*."""
    return any(part in patterns for part in path.parts)


class SiteBuilder:
    """Sequential host driver for transform plugins.

    Files claimed by a plugin are converted and renamed with the plugin's
    output extension; every other file is copied unchanged.
    """

    def __init__(self, config: BuildConfig, transforms: list[TransformPlugin]):
        self.config = config
        self.source_dir = Path(config.source_dir)
        self.destination = Path(config.destination)
        self.transforms = self._active(transforms)

    def _active(self, transforms: list[TransformPlugin]) -> list[TransformPlugin]:
        if not self.config.safe_mode:
            return list(transforms)
        active = []
        for t in transforms:
            if getattr(t, "safe", False):
                active.append(t)
            else:
                logger.warning("Safe mode: skipping unsafe plugin %s", type(t).__name__)
        return active

    # -- Public API ----------------------------------------------------------

    def route(self, ext: str) -> TransformPlugin | None:
        """First active plugin that claims *ext*, or None."""
        for t in self.transforms:
            if t.matches(ext):
                return t
        return None

    def plan(self) -> list[PlannedFile]:
        """List every source file with its destination and routed plugin."""
        source_root = self.source_dir.resolve()
        dest_root = self.destination.resolve()
        ignore = set(self.config.exclude)
        planned: list[PlannedFile] = []

        for p in sorted(source_root.rglob("*")):
            if not p.is_file():
                continue
            if p.is_relative_to(dest_root):
                continue
            rel = p.relative_to(source_root)
            if _matches_any(rel, ignore):
                continue

            transform = self.route(p.suffix)
            target = dest_root / rel
            if transform is not None:
                target = target.with_suffix(transform.output_ext(p.suffix))
            planned.append(PlannedFile(source=p, destination=target, transform=transform))

        return planned

    def build(self) -> BuildReport:
        """Convert or copy every planned file into the destination tree.

        With ``fail_fast`` a BuildFailure aborts the build; otherwise it is
        recorded in the report and the build moves on.
        """
        start = time.monotonic()
        report = BuildReport()

        for item in self.plan():
            rel = str(item.source.relative_to(self.source_dir.resolve()))

            if item.transform is None:
                item.destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(item.source, item.destination)
                report.copied += 1
                continue

            try:
                output = item.transform.convert(read_verbatim(item.source))
            except BuildFailure as exc:
                if self.config.fail_fast:
                    logger.debug(f"Aborting build at {rel}: {exc}")
                    raise
                logger.error(f"Build failed for {rel}: {exc}")
                report.errors.append(BuildError(file=rel, error=str(exc)))
                continue

            item.destination.parent.mkdir(parents=True, exist_ok=True)
            write_verbatim(item.destination, output)
            report.converted += 1
            logger.info(f"Converted: {rel}")

        report.duration = time.monotonic() - start
        return report
