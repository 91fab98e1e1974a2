"""
shpstream
Reads the geometry of ESRI Shapefiles (.shp) as a stream of shapes.
Compatible with Python versions >=3.9
"""

from __future__ import annotations

import logging
import sys

from .__version__ import __version__
from ._doctest_runner import _test
from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NULL,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
    SHAPETYPENUM_LOOKUP,
)
from .exceptions import (
    ShapefileException,
    ShapefileInvalidFile,
    ShapefileInvalidShapeType,
    ShapefileRecordLengthError,
    ShapefileTruncatedError,
)
from .helpers import (
    read_exact,
    read_float64_le,
    read_float64_le_array,
    read_int32_be,
    read_int32_le,
    read_int32_le_array,
)
from .reader import Reader, Shapes, ShpHeader
from .shapes import (
    DECODABLE_SHAPETYPES,
    SHAPE_CLASS_FROM_SHAPETYPE,
    BoundingBox,
    MultiPatch,
    MultiPoint,
    MultiPointM,
    MultiPointZ,
    NullShape,
    Point,
    PointM,
    PointZ,
    Polygon,
    PolygonM,
    PolygonZ,
    Polyline,
    PolylineM,
    PolylineZ,
    Shape,
    shape_class_from_type,
)
from .types import BBox, MBox, ReadableBinStream, ZBox

__all__ = [
    "__version__",
    "NULL",
    "POINT",
    "POLYLINE",
    "POLYGON",
    "MULTIPOINT",
    "POINTZ",
    "POLYLINEZ",
    "POLYGONZ",
    "MULTIPOINTZ",
    "POINTM",
    "POLYLINEM",
    "POLYGONM",
    "MULTIPOINTM",
    "MULTIPATCH",
    "SHAPETYPE_LOOKUP",
    "SHAPETYPENUM_LOOKUP",
    "Reader",
    "Shapes",
    "ShpHeader",
    "BoundingBox",
    "Shape",
    "NullShape",
    "Point",
    "Polyline",
    "Polygon",
    "MultiPoint",
    "PointZ",
    "PolylineZ",
    "PolygonZ",
    "MultiPointZ",
    "PointM",
    "PolylineM",
    "PolygonM",
    "MultiPointM",
    "MultiPatch",
    "SHAPE_CLASS_FROM_SHAPETYPE",
    "DECODABLE_SHAPETYPES",
    "shape_class_from_type",
    "read_exact",
    "read_int32_be",
    "read_int32_le",
    "read_float64_le",
    "read_int32_le_array",
    "read_float64_le_array",
    "BBox",
    "MBox",
    "ZBox",
    "ReadableBinStream",
    "ShapefileException",
    "ShapefileInvalidFile",
    "ShapefileInvalidShapeType",
    "ShapefileTruncatedError",
    "ShapefileRecordLengthError",
]

logger = logging.getLogger(__name__)


def main() -> None:
    """
    Doctests are contained in the file 'README.md', and are tested using the built-in
    testing libraries.
    """
    failure_count = _test()
    sys.exit(failure_count)
