"""Site build: load the dataset once, build every diagram, render the page.

The d3-sankey layout and SVG drawing run in the browser. This module writes
the graph payloads they consume and the HTML page that wires them together.
"""

import asyncio
import json
import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from jmu_sankey import __version__
from jmu_sankey.config import Config
from jmu_sankey.dataset import Dataset, MissingCollectionError, load_dataset
from jmu_sankey.graph import DIAGRAM_SLOTS, DiagramKind, build
from jmu_sankey.storage.paths import SitePaths

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
ASSETS_DIR = Path(__file__).parent / "assets"


def build_site(config: Config, paths: SitePaths | None = None) -> dict[str, Any]:
    """Build the complete static site.

    Args:
        config: Application configuration.
        paths: Path manager for output locations. Derived from config if None.

    Returns:
        Dictionary with build statistics.

    Raises:
        DatasetLoadError: If the dataset cannot be loaded. Nothing is written.
    """
    paths = paths or SitePaths(config)
    dataset = asyncio.run(
        load_dataset(config.dataset.source, timeout=config.dataset.timeout_seconds)
    )
    return render_site(dataset, config, paths)


def render_site(dataset: Dataset, config: Config, paths: SitePaths) -> dict[str, Any]:
    """Build every diagram from a loaded dataset and write the site.

    A diagram whose collection is missing gets a placeholder payload; the
    others are unaffected.
    """
    start_time = datetime.now(UTC)
    logger.info("Starting site build into %s", paths.site_root)
    paths.ensure_directories()

    stats: dict[str, Any] = {
        "start_time": start_time.isoformat(),
        "diagrams_built": [],
        "diagrams_failed": [],
        "data_files_written": 0,
        "assets_copied": 0,
        "templates_rendered": [],
        "graphs": {},
        "errors": [],
    }

    diagrams: list[dict[str, Any]] = []
    for kind, container in DIAGRAM_SLOTS:
        payload = build_diagram_payload(dataset, kind, container, config)
        if payload["error"]:
            stats["diagrams_failed"].append(kind.value)
            stats["errors"].append(payload["error"])
        else:
            stats["diagrams_built"].append(kind.value)
        stats["graphs"][kind.value] = {
            "nodes": len(payload["nodes"]),
            "links": len(payload["links"]),
            "skipped": len(payload["skipped"]),
        }

        _write_json(paths.diagram_data_path(kind), payload)
        stats["data_files_written"] += 1
        diagrams.append(payload)

    stats["assets_copied"] = _copy_assets(ASSETS_DIR, paths.assets_path)

    context = {
        "title": config.report.title,
        "version": __version__,
        "generated_at": start_time.strftime("%Y-%m-%d %H:%M UTC"),
        "layout": config.layout.model_dump(),
        "diagrams": diagrams,
    }
    stats["templates_rendered"] = _render_templates(TEMPLATES_DIR, paths.site_root, context)

    end_time = datetime.now(UTC)
    stats["end_time"] = end_time.isoformat()
    stats["duration_seconds"] = (end_time - start_time).total_seconds()

    logger.info(
        "Site build complete: %d diagrams built, %d failed",
        len(stats["diagrams_built"]),
        len(stats["diagrams_failed"]),
    )
    return stats


def build_diagram_payload(
    dataset: Dataset, kind: DiagramKind, container: str, config: Config
) -> dict[str, Any]:
    """Build one diagram's JSON payload, or a placeholder if its collection is missing."""
    payload: dict[str, Any] = {
        "kind": kind.value,
        "container": container,
        "nodes": [],
        "links": [],
        "skipped": [],
        "error": None,
    }
    try:
        graph = build(dataset, kind, revenue_year=config.dataset.revenue_year)
    except MissingCollectionError as e:
        logger.error("Cannot build %s diagram: %s", kind.value, e)
        payload["error"] = str(e)
        return payload

    payload.update(graph.to_dict())
    payload["skipped"] = list(graph.skipped)
    return payload


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.debug("Wrote %s", path)


def _render_templates(templates_dir: Path, output_dir: Path, context: dict[str, Any]) -> list[str]:
    """Render Jinja2 templates with the page context."""
    rendered_templates = []
    output_dir.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )

    for template_path in sorted(templates_dir.glob("*.html")):
        template = env.get_template(template_path.name)
        output_path = output_dir / template_path.name
        output_path.write_text(template.render(**context), encoding="utf-8")
        rendered_templates.append(template_path.name)
        logger.info("Rendered %s", template_path.name)

    return rendered_templates


def _copy_assets(src: Path, dest: Path) -> int:
    """Copy static assets to output directory."""
    files_copied = 0

    if dest.exists():
        shutil.rmtree(dest)
    dest.mkdir(parents=True, exist_ok=True)

    for item in src.rglob("*"):
        if item.is_file():
            dest_path = dest / item.relative_to(src)
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest_path)
            files_copied += 1

    logger.info("Copied %d asset files", files_copied)
    return files_copied
