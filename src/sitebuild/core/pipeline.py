"""Page generation step: discover sources, build each page, write the output tree"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from sitebuild.config import Settings
from sitebuild.core.models import RenderOptions
from sitebuild.core.page import build_page, write_page
from sitebuild.core.parse import discover_files, read_document
from sitebuild.core.template import load_template
from sitebuild.errors import PageError


logger = logging.getLogger(__name__)


def render_options(settings: Settings) -> RenderOptions:
    """Renderer configuration for one build invocation."""
    return RenderOptions(
        parser_config=settings.parser_config,
        highlight=settings.highlight,
        toc_max=settings.toc_max,
    )


def process_file(
    source_root: Path,
    relative: Path,
    output_root: Path,
    template: str,
    options: RenderOptions,
    ) -> Path:
    """read -> split -> render -> anchor -> template -> write for a single document."""
    try:
        doc = read_document(source_root, relative)
        out = write_page(build_page(doc, template, options), relative, output_root)
    except Exception as e:
        raise PageError(source_root / relative, e) from e
    logger.debug("Built %s -> %s", relative, out)
    return out


def run_pages(settings: Settings) -> list[tuple[Path, Path]]:
    """Build every page under settings.source_dir. Returns sorted (source, output) pairs.

    The template is read before any document so a missing template fails fast.
    Documents build concurrently; failures are logged, and the first one (by
    source path) is raised after every document has been attempted.
    """
    template = load_template(Path(settings.template))
    source_root = settings.source_path
    output_root = settings.output_path
    files = discover_files(source_root, settings.markdown_ext, settings.exclude_dirs)
    if not files:
        logger.info("No %s files under %s", settings.markdown_ext, source_root)
        return []

    options = render_options(settings)
    workers = settings.workers or min(8, os.cpu_count() or 1)
    results: list[tuple[Path, Path]] = []
    errors: list[PageError] = []

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(process_file, source_root, rel, output_root, template, options): rel
            for rel in files
        }
        for future in as_completed(futures):
            try:
                results.append((source_root / futures[future], future.result()))
            except PageError as e:
                logger.error("%s", e)
                errors.append(e)

    if errors:
        raise min(errors, key=lambda e: str(e.path))
    return sorted(results)
