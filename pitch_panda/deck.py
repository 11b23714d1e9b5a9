"""Pitch deck loading: PDF pages or image files to slide images."""

import base64
import os
from pathlib import Path
from typing import Iterable, List

import fitz  # PyMuPDF

from . import config
from .schemas import SlideImage

logger = config.logger

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.standard_b64encode(data).decode('utf-8')}"


def pdf_to_slides(pdf_path: str | os.PathLike, zoom: float = 1.5) -> List[SlideImage]:
    """Render every PDF page to PNG."""
    slides: List[SlideImage] = []
    doc = fitz.open(pdf_path)
    try:
        matrix = fitz.Matrix(zoom, zoom)
        for index, page in enumerate(doc):
            pix = page.get_pixmap(matrix=matrix)
            slides.append(
                SlideImage(
                    page=index + 1,
                    image_data_url=to_data_url(pix.tobytes("png"), "image/png"),
                    file_name=f"{Path(pdf_path).name}#page={index + 1}",
                )
            )
    finally:
        doc.close()
    logger.info(f"[OK] Rendered {len(slides)} pages from {pdf_path}")
    return slides


def images_to_slides(image_paths: Iterable[str | os.PathLike]) -> List[SlideImage]:
    """One slide per image, numbered in the given order."""
    slides: List[SlideImage] = []
    for path in map(Path, image_paths):
        mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower())
        if mime_type is None:
            raise ValueError(f"Unsupported image type: {path.name}")
        slides.append(
            SlideImage(
                page=len(slides) + 1,
                image_data_url=to_data_url(path.read_bytes(), mime_type),
                file_name=path.name,
            )
        )
    return slides


def load_deck(path: str | os.PathLike) -> List[SlideImage]:
    """Load a deck from a PDF, a single image, or a directory of images."""
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Deck not found: {path}")
    if path.is_dir():
        images = sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_MIME_TYPES)
        if not images:
            raise ValueError(f"No slide images found in {path}")
        return images_to_slides(images)
    if path.suffix.lower() == ".pdf":
        return pdf_to_slides(path)
    if path.suffix.lower() in IMAGE_MIME_TYPES:
        return images_to_slides([path])
    raise ValueError(f"Unsupported deck format: {path.suffix or path.name}")


def validate_slides(slides: Iterable) -> List[SlideImage]:
    """Keep slides with a positive page and an image data URL."""
    slides = list(slides or [])
    valid: List[SlideImage] = []
    for slide in slides:
        if isinstance(slide, dict):
            page = slide.get("page")
            data_url = slide.get("image_data_url") or slide.get("imageDataUrl") or ""
            if not isinstance(page, int) or page < 1 or not data_url.startswith("data:image/"):
                continue
            slide = SlideImage(page=page, image_data_url=data_url, file_name=slide.get("file_name"))
        elif not slide.image_data_url.startswith("data:image/"):
            continue
        valid.append(slide)

    if len(valid) != len(slides):
        logger.warning(f"Filtered out {len(slides) - len(valid)} invalid slides")
    return valid
