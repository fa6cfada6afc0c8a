"""High-level orchestration for turning framework output into bundles.

:class:`Builder` consumes a :class:`~edge_bundles.config.BuildConfig` and
runs the whole pipeline:

1. run the framework's production build (unless skipped),
2. read the pages manifest and public assets,
3. classify pages and compile route patterns,
4. assemble the default and API manifests,
5. plan the partition, then empty and populate each bundle directory,
6. remove the designated intermediate framework output, keeping its
   cache and static assets.

Steps 2 to 5's planning half are pure, so :meth:`Builder.prepare` can be
used on its own as a dry run.

Example
-------
>>> from pathlib import Path
>>> from edge_bundles.builder import Builder
>>> from edge_bundles.config import resolve_build_config
>>> builder = Builder(resolve_build_config(Path("my-app")))  # doctest: +SKIP
>>> result = builder.build()  # doctest: +SKIP
>>> sorted(result.written)  # doctest: +SKIP
['api', 'default']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from edge_bundles.framework import run_framework_build
from edge_bundles.handlers import HandlerRenderer
from edge_bundles.manifest import BuildManifests, assemble_manifests
from edge_bundles.metadata import BuildMetadata, load_build_metadata
from edge_bundles.partition import (
    PartitionPlan,
    apply_partition,
    cleanup_framework_output,
    plan_partition,
)
from edge_bundles.routes.classifier import Classification, classify_pages

if typ.TYPE_CHECKING:
    from pathlib import Path

    from edge_bundles.config import BuildConfig

log = logging.getLogger("edge_bundles.builder")


@dc.dataclass(slots=True)
class PreparedBuild:
    """Everything decided about a build before the filesystem is touched."""

    metadata: BuildMetadata
    classification: Classification
    manifests: BuildManifests
    plan: PartitionPlan


@dc.dataclass(slots=True)
class BuildResult:
    """Outcome of a completed build."""

    prepared: PreparedBuild
    written: dict[str, list[Path]]
    removed: list[Path] = dc.field(default_factory=list)

    @property
    def manifests(self) -> BuildManifests:
        return self.prepared.manifests


class Builder:
    """Build deployable bundles for one framework project."""

    def __init__(
        self, config: BuildConfig, *, renderer: HandlerRenderer | None = None
    ) -> None:
        self.config = config
        self.renderer = renderer or HandlerRenderer(templates_dir=config.templates_dir)

    def prepare(self) -> PreparedBuild:
        """Read framework output and decide manifests and file placement.

        Raises
        ------
        BuildMetadataError
            If the framework's pages manifest is missing or invalid.
        ClassificationConflict
            If two files resolve to the same route.
        MalformedRoutePath
            If a page's route has invalid bracket syntax.
        """
        layout = self.config.layout
        metadata = load_build_metadata(layout)
        classification = classify_pages(metadata.page_files)
        manifests = assemble_manifests(classification, metadata.public_files)
        plan = plan_partition(
            serverless_dir=layout.serverless_dir,
            output_dir=self.config.output_dir,
            classification=classification,
            shim_path=self.config.shim_path,
        )
        return PreparedBuild(
            metadata=metadata,
            classification=classification,
            manifests=manifests,
            plan=plan,
        )

    def build(self) -> BuildResult:
        """Run the full pipeline and return what was written and removed.

        Any exception leaves the output directory in an undefined state; it
        must not be deployed.
        """
        if self.config.skip_build:
            log.info("skipping framework build")
        else:
            run_framework_build(self.config.build, project_dir=self.config.project_dir)

        prepared = self.prepare()
        written = apply_partition(prepared.plan, prepared.manifests, renderer=self.renderer)

        removed: list[Path] = []
        if self.config.cleanup:
            removed = cleanup_framework_output(
                self.config.framework_dir,
                remove=self.config.cleanup_dirs,
                keep=self.config.keep_dirs,
            )
        return BuildResult(prepared=prepared, written=written, removed=removed)


__all__ = ["BuildResult", "Builder", "PreparedBuild"]
