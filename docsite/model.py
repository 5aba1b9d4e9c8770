from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterable, Optional

from .artifacts import (
    ROBOTS_PATH,
    SITEMAP_PATH,
    compute_manifest,
    compute_robots_txt,
    compute_sitemap_xml,
)
from .config import SiteConfig, check_site_config, load_config_text
from .content import Page, load_page
from .errors import BuildError, ConfigError, OutputDirError
from .paths import (
    CONFIG_RESOURCE_PATHS,
    compute_canonical_path,
    compute_content_repo_path,
    compute_output_path,
    compute_resource_path,
    should_include_in_output,
)
from .render import render_page, write_text
from .repo import InputFileInfo
from .router import SiteResponse, route
from .sidebar import SidebarInputItem, SidebarNode, compute_sidebar, sidebar_path_for
from .utils import copy_file, empty_output_dir

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSION = ".md"
SITEMAP_EXTENSIONS = {".md", ".html"}

Renderer = Callable[..., str]


@dataclass(frozen=True)
class Resource:
    resource_path: str
    input_path: Optional[Path]
    extension: str
    include_in_output: bool
    canonical_path: str
    content_repo_path: Optional[str] = None
    page: Optional[Page] = None
    output_text: Optional[str] = None

    @property
    def is_markdown(self) -> bool:
        return self.extension == MARKDOWN_EXTENSION


@dataclass(frozen=True)
class SiteSnapshot:
    resources: dict[str, Resource]
    config: SiteConfig
    sidebar: SidebarNode
    manifest_path: str
    canonical_index: dict[str, Resource] = field(default_factory=dict)

    def find_canonical(self, canonical_path: str) -> Optional[Resource]:
        return self.canonical_index.get(canonical_path)


def build_canonical_index(resources: dict[str, Resource]) -> dict[str, Resource]:
    index: dict[str, Resource] = {}
    for resource in resources.values():
        index.setdefault(resource.canonical_path, resource)
    return index


def generated_resource(resource_path: str, text: str) -> Resource:
    return Resource(
        resource_path=resource_path,
        input_path=None,
        extension=Path(resource_path).suffix,
        include_in_output=True,
        canonical_path=compute_canonical_path(resource_path),
        output_text=text,
    )


def compute_config(resources: dict[str, Resource]) -> SiteConfig:
    for path in CONFIG_RESOURCE_PATHS:
        resource = resources.get(path)
        if resource is not None:
            text = resource.input_path.read_text(encoding="utf-8")
            raw = load_config_text(text, resource.extension, str(resource.input_path))
            return check_site_config(raw)
    names = " or ".join(CONFIG_RESOURCE_PATHS)
    raise ConfigError(f"Site config not found: {names}")


class SiteModel:
    """Registry of every resource derived from one content directory.

    Each call to :meth:`set_input_files` builds a complete new
    :class:`SiteSnapshot` and publishes it with a single assignment, so
    :meth:`handle` never observes a half-built site. Rebuilds are serialized.
    """

    def __init__(
        self,
        input_dir: Path,
        *,
        local_origin: Optional[str] = None,
        renderer: Renderer = render_page,
    ) -> None:
        input_dir = Path(input_dir)
        if not input_dir.is_absolute():
            raise BuildError(f"Bad input dir: {input_dir}, must be absolute")
        if not input_dir.is_dir():
            raise BuildError(f"Bad input dir: {input_dir}, must exist")
        self.input_dir = input_dir
        self.local_origin = local_origin
        self.renderer = renderer
        self._rebuild_lock = threading.Lock()
        self._snapshot: Optional[SiteSnapshot] = None

    @property
    def snapshot(self) -> Optional[SiteSnapshot]:
        return self._snapshot

    @property
    def resources(self) -> dict[str, Resource]:
        snapshot = self._snapshot
        return snapshot.resources if snapshot else {}

    @property
    def manifest_path(self) -> Optional[str]:
        snapshot = self._snapshot
        return snapshot.manifest_path if snapshot else None

    def set_input_files(self, files: Iterable[InputFileInfo]) -> SiteSnapshot:
        with self._rebuild_lock:
            snapshot = self._build_snapshot(list(files))
            self._snapshot = snapshot
        logger.info("Published %d resources", len(snapshot.resources))
        return snapshot

    def _new_resource(self, resource_path: str, input_path: Path) -> Resource:
        extension = input_path.suffix
        return Resource(
            resource_path=resource_path,
            input_path=input_path,
            extension=extension,
            include_in_output=should_include_in_output(resource_path, extension),
            canonical_path=compute_canonical_path(resource_path),
            content_repo_path=compute_content_repo_path(input_path, self.input_dir),
        )

    def _build_snapshot(self, files: list[InputFileInfo]) -> SiteSnapshot:
        previous = self.resources
        resources: dict[str, Resource] = {}

        for file in files:
            input_path = Path(file.path)
            if not input_path.is_absolute():
                raise BuildError(f"Bad input path: {input_path}, must be absolute")
            resource_path = compute_resource_path(input_path, self.input_dir)
            if resource_path in resources:
                continue
            resource = previous.get(resource_path)
            if resource is None or resource.input_path != input_path:
                resource = self._new_resource(resource_path, input_path)
            resources[resource_path] = resource
        evicted = [path for path, old in previous.items() if old.input_path and path not in resources]
        if evicted:
            logger.debug("Dropping %d resources without input files: %s", len(evicted), evicted)

        config = compute_config(resources)

        previous_manifest_path = self.manifest_path
        manifest_path, manifest_text = compute_manifest(config)
        if manifest_path != previous_manifest_path:
            logger.debug("Manifest path %s -> %s", previous_manifest_path, manifest_path)
        sitemap_paths = [
            resource.canonical_path
            for resource in resources.values()
            if resource.include_in_output and resource.extension in SITEMAP_EXTENSIONS
        ]
        resources[manifest_path] = generated_resource(manifest_path, manifest_text)
        resources[ROBOTS_PATH] = generated_resource(ROBOTS_PATH, compute_robots_txt(config, self.local_origin))
        resources[SITEMAP_PATH] = generated_resource(
            SITEMAP_PATH, compute_sitemap_xml(sitemap_paths, config, self.local_origin)
        )

        for path, resource in list(resources.items()):
            if resource.is_markdown:
                resources[path] = replace(resource, page=load_page(resource.input_path))

        sidebar = compute_sidebar(
            SidebarInputItem(
                title=resource.page.title_resolved,
                path=sidebar_path_for(resource.canonical_path),
                hidden=resource.page.front_matter.hidden,
                hide_children=resource.page.front_matter.hide_children,
                order=resource.page.front_matter.order,
            )
            for resource in resources.values()
            if resource.is_markdown and resource.include_in_output
        )

        for path, resource in list(resources.items()):
            if resource.is_markdown:
                output_text = self.renderer(
                    resource.page,
                    path=resource.canonical_path,
                    config=config,
                    sidebar=sidebar,
                    content_repo_path=resource.content_repo_path,
                    manifest_path=manifest_path,
                    local_origin=self.local_origin,
                )
                resources[path] = replace(resource, output_text=output_text)

        return SiteSnapshot(
            resources=resources,
            config=config,
            sidebar=sidebar,
            manifest_path=manifest_path,
            canonical_index=build_canonical_index(resources),
        )

    def _require_snapshot(self) -> SiteSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise BuildError("Site has not been built, call set_input_files first")
        return snapshot

    def compute_output_path(self, resource: Resource, output_dir: Path) -> Path:
        if resource.input_path is not None:
            return compute_output_path(resource.input_path, self.input_dir, output_dir)
        return output_dir / resource.resource_path.lstrip("/")

    def write_output(self, output_dir: Path) -> list[Path]:
        output_dir = Path(output_dir)
        if not output_dir.is_absolute():
            raise BuildError(f"Bad output dir: {output_dir}, must be absolute")
        snapshot = self._require_snapshot()
        if not snapshot.config.site_metadata.origin:
            raise BuildError("siteMetadata.origin is required to write output")
        if output_dir.exists() and not output_dir.is_dir():
            raise OutputDirError(f"Bad output dir, exists as file: {output_dir}")

        logger.info("Writing output to %s", output_dir)
        empty_output_dir(output_dir, self.input_dir)
        written = []
        for resource in snapshot.resources.values():
            if not resource.include_in_output:
                continue
            output_path = self.compute_output_path(resource, output_dir)
            logger.debug("Writing %s", output_path)
            if resource.output_text is not None:
                write_text(output_path, resource.output_text)
            else:
                copy_file(resource.input_path, output_path)
            written.append(output_path)
        return written

    def handle(self, path: str) -> SiteResponse:
        snapshot = self._snapshot
        if snapshot is None:
            return SiteResponse(
                status=503,
                body=b"site not built yet",
                headers={"content-type": "text/plain; charset=utf-8"},
            )
        return route(snapshot, path)
