"""Turn raster images into single-page documents."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from PIL import Image
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from ..core.document import Document
from ..core.objects import TYPE_KEY, reference
from ..core.utils import PathLike
from .exceptions import ImageConversionError
from .pagesize import A4, MM_PER_INCH, PageSizeInMm, mm_to_points

LOGGER = logging.getLogger("pdfbinder.images")

DEFAULT_DPI = 300.0
MIN_WIDTH_IN_MM = A4.width
MIN_HEIGHT_IN_MM = A4.height

IMAGE_NAME = "/Im0"


@dataclass(slots=True)
class ImagePlacement:
    """Position and size of an image on a page, in points."""

    x: float
    y: float
    width: float
    height: float

    def content(self) -> bytes:
        return (
            f"q {self.width:.4f} 0 0 {self.height:.4f} {self.x:.4f} {self.y:.4f} cm "
            f"{IMAGE_NAME} Do Q\n"
        ).encode("ascii")


def remove_alpha(image: Image.Image) -> Image.Image:
    """Return *image* in ``RGB`` or ``L`` mode, compositing alpha on white."""

    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode in ("RGB", "L"):
        return image.copy()
    if image.mode == "1":
        return image.convert("L")
    return image.convert("RGB")


def _dpi(image: Image.Image) -> tuple[float, float]:
    dpi = image.info.get("dpi")
    try:
        x_dpi, y_dpi = float(dpi[0]), float(dpi[1])  # type: ignore[index]
    except (TypeError, ValueError, IndexError):
        return DEFAULT_DPI, DEFAULT_DPI
    if x_dpi <= 1 or y_dpi <= 1:
        return DEFAULT_DPI, DEFAULT_DPI
    return x_dpi, y_dpi


def read_image(path: PathLike) -> tuple[Image.Image, tuple[float, float]]:
    """Load *path* and return the flattened image and its resolution."""

    try:
        with Image.open(path) as image:
            image.load()
            return remove_alpha(image), _dpi(image)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        LOGGER.error("Cannot read image %s: %s", path, exc)
        raise ImageConversionError(f"Cannot read image: {path}") from exc


def image_dimension_in_mm(
    image: Image.Image, dpi: tuple[float, float] = (DEFAULT_DPI, DEFAULT_DPI)
) -> tuple[float, float]:
    return image.width / dpi[0] * MM_PER_INCH, image.height / dpi[1] * MM_PER_INCH


def fit_to_page(
    image_size: tuple[float, float], page_size: tuple[float, float]
) -> ImagePlacement:
    """Scale *image_size* into *page_size* keeping its aspect ratio, centred."""

    image_width, image_height = image_size
    page_width, page_height = page_size
    scale = min(page_width / image_width, page_height / image_height)
    width = image_width * scale
    height = image_height * scale
    return ImagePlacement(
        x=(page_width - width) / 2,
        y=(page_height - height) / 2,
        width=width,
        height=height,
    )


def scaled_page_size(image_size_mm: tuple[float, float]) -> PageSizeInMm:
    """Image-sized page enlarged by an integer factor towards A4."""

    width, height = image_size_mm
    scale = max(1, int(MIN_WIDTH_IN_MM / width), int(MIN_HEIGHT_IN_MM / height))
    return PageSizeInMm(width * scale, height * scale)


def _image_xobject(image: Image.Image) -> DictionaryObject:
    stream = DecodedStreamObject()
    stream.set_data(image.tobytes())
    stream[TYPE_KEY] = NameObject("/XObject")
    stream[NameObject("/Subtype")] = NameObject("/Image")
    stream[NameObject("/Width")] = NumberObject(image.width)
    stream[NameObject("/Height")] = NumberObject(image.height)
    stream[NameObject("/ColorSpace")] = NameObject(
        "/DeviceGray" if image.mode == "L" else "/DeviceRGB"
    )
    stream[NameObject("/BitsPerComponent")] = NumberObject(8)
    return stream.flate_encode()


def image_to_document(
    path: PathLike,
    *,
    page_size: PageSizeInMm | None = A4,
) -> Document:
    """Return a one-page document showing the image at *path*.

    With a *page_size* the image is fitted and centred on a page of that
    size.  With ``None`` the page takes the physical size of the image,
    enlarged by the integer part of the A4-to-image ratio (at least 1).

    Raises:
        ImageConversionError: If the image cannot be read.
    """

    source = Path(path)
    image, dpi = read_image(source)
    size_mm = image_dimension_in_mm(image, dpi)

    if page_size is None:
        page_size = scaled_page_size(size_mm)
        page_points = page_size.to_points()
        placement = ImagePlacement(0.0, 0.0, *page_points)
    else:
        page_points = page_size.to_points()
        image_points = (mm_to_points(size_mm[0]), mm_to_points(size_mm[1]))
        placement = fit_to_page(image_points, page_points)

    document = Document()
    xobject_id = document.add_object(_image_xobject(image))
    content = DecodedStreamObject()
    content.set_data(placement.content())
    content_id = document.add_object(content)

    pages = DictionaryObject({TYPE_KEY: NameObject("/Pages")})
    pages_id = document.add_object(pages)

    resources = DictionaryObject()
    resources[NameObject("/XObject")] = DictionaryObject(
        {NameObject(IMAGE_NAME): reference(xobject_id)}
    )
    page = DictionaryObject()
    page[TYPE_KEY] = NameObject("/Page")
    page[NameObject("/Parent")] = reference(pages_id)
    page[NameObject("/MediaBox")] = ArrayObject(
        [NumberObject(0), NumberObject(0), FloatObject(page_points[0]), FloatObject(page_points[1])]
    )
    page[NameObject("/Resources")] = resources
    page[NameObject("/Contents")] = reference(content_id)
    page_id = document.add_object(page)

    pages[NameObject("/Kids")] = ArrayObject([reference(page_id)])
    pages[NameObject("/Count")] = NumberObject(1)

    catalog = DictionaryObject({TYPE_KEY: NameObject("/Catalog")})
    catalog[NameObject("/Pages")] = reference(pages_id)
    catalog_id = document.add_object(catalog)

    info = DictionaryObject()
    info[NameObject("/Title")] = TextStringObject(source.stem)
    info[NameObject("/Producer")] = TextStringObject("pdfbinder")
    info_id = document.add_object(info)

    document.trailer[NameObject("/Root")] = reference(catalog_id)
    document.trailer[NameObject("/Info")] = reference(info_id)

    LOGGER.debug(
        "Converted image %s (%dx%d px) onto a %.1f x %.1f mm page",
        source,
        image.width,
        image.height,
        page_size.width,
        page_size.height,
    )
    return document


__all__ = [
    "ImagePlacement",
    "image_to_document",
    "read_image",
    "remove_alpha",
    "fit_to_page",
    "scaled_page_size",
    "image_dimension_in_mm",
]
