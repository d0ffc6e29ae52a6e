"""Text width fitting and image cover-fit placement."""

from .image import FitTransform, ImageFitter, cover_fit
from .text import fit_width, set_content

__all__ = ["FitTransform", "ImageFitter", "cover_fit", "fit_width", "set_content"]
