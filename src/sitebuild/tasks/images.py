"""Image optimization stage"""

import io
import logging
import shutil
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from sitebuild.config import Settings
from sitebuild.core.utils.fs import is_stale, write_atomic
from sitebuild.errors import StageError


logger = logging.getLogger(__name__)

IMAGES_DIR = "images"
OPTIMIZABLE = {".png", ".jpg", ".jpeg", ".gif"}


def optimize_image(data: bytes, suffix: str) -> bytes:
    """Re-encode image bytes losslessly in the same format; keep the input if that is smaller."""
    with Image.open(io.BytesIO(data)) as img:
        fmt = img.format
        out = io.BytesIO()
        if fmt == "JPEG":
            img.save(out, fmt, optimize=True, progressive=True, quality="keep")
        elif fmt == "PNG":
            img.save(out, fmt, optimize=True)
        elif fmt == "GIF":
            img.save(out, fmt, optimize=True, interlace=True, save_all=getattr(img, "is_animated", False))
        else:
            logger.debug("No optimizer for %s (%s); copying", suffix, fmt)
            return data
    optimized = out.getvalue()
    return optimized if len(optimized) < len(data) else data


def run_images(settings: Settings, force: bool = False) -> list[Path]:
    """Optimize app/images/** into dist/images/, copying formats Pillow does not handle."""
    src_root = settings.source_path / IMAGES_DIR
    out_root = settings.output_path / IMAGES_DIR
    written = []
    for src in sorted(p for p in src_root.rglob("*") if p.is_file()) if src_root.is_dir() else []:
        dest = out_root / src.relative_to(src_root)
        if not force and not is_stale(src, dest):
            continue
        try:
            if src.suffix.lower() in OPTIMIZABLE:
                data = src.read_bytes()
                optimized = optimize_image(data, src.suffix.lower())
                write_atomic(dest, optimized)
                logger.info("images: %s (%d -> %d bytes)", src, len(data), len(optimized))
            else:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, dest)
                logger.debug("images: copied %s", src)
        except (OSError, ValueError, UnidentifiedImageError) as e:
            raise StageError("images", f"{src}: {e}") from e
        written.append(dest)
    return written
