"""
SVG post-processing utilities.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging

import lxml.etree as ET

LOGGER = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

ElementType = ET._Element  # pyright: ignore [reportPrivateUsage]


class SvgError(ValueError):
    "Raised when image markup is not an SVG document."


def parse_svg(image: str) -> ElementType:
    """
    Parses SVG markup into an element tree.

    Rendering engines may emit HTML fragments (e.g. in `<foreignObject>` labels) that are not strictly well-formed;
    the parser recovers from such errors.

    :param image: SVG markup.
    :returns: The root `<svg>` element.
    """

    parser = ET.XMLParser(recover=True, remove_comments=True, resolve_entities=False)
    root = ET.fromstring(image.encode("utf-8"), parser=parser)
    if root is None or root.tag not in (f"{{{SVG_NAMESPACE}}}svg", "svg"):
        raise SvgError("expected: `<svg>` as the root element")
    return root


def fit_canvas(root: ElementType, *, width: int, height: int, background_color: str) -> ElementType:
    """
    Assigns a fixed canvas size and an opaque background to an SVG image.

    The image scales into the canvas by means of its `viewBox`, so that the exported image looks the same regardless
    of the surface it is displayed on.
    """

    root.set("width", str(width))
    root.set("height", str(height))
    root.set("style", f"background-color: {background_color};")
    return root


def svg_to_document(root: ElementType) -> bytes:
    "Serializes an SVG element tree into a standalone image file with an XML declaration."

    return ET.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=False)
