from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, NamedTuple, Union

from .constants import (
    M_CONTENT_BYTES_WITHOUT_MEASURES,
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NULL,
    POINT,
    POINTM,
    POINTZ,
    POLY_CONTENT_BYTES,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
)
from .exceptions import ShapefileInvalidShapeType, ShapefileRecordLengthError
from .helpers import (
    read_float64_le,
    read_float64_le_array,
    read_int32_le,
    read_int32_le_array,
)
from .types import MBox, ReadableBinStream


class BoundingBox(NamedTuple):
    """The xmin, ymin, xmax, ymax of a whole file or of a single record.
    Values are passed through from the file as they are, so callers
    must not assume xmin <= xmax or ymin <= ymax.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def load(cls, b_io: ReadableBinStream) -> BoundingBox:
        return cls(*read_float64_le_array(b_io, 4))


# Helpers shared by the multi-point record decoders.
# Every count and offset below follows the layout in the ESRI
# whitepaper: bbox (32 bytes), counts (4 bytes each), part indexes
# (4 bytes each), then x,y pairs (16 bytes each).


def _read_count(b_io: ReadableBinStream, name: str) -> int:
    n = read_int32_le(b_io)
    if n < 0:
        raise ShapefileRecordLengthError(f"Negative number of {name} in record: {n}")
    return n


def _read_points(b_io: ReadableBinStream, nPoints: int) -> tuple[Point, ...]:
    flat = read_float64_le_array(b_io, 2 * nPoints)
    return tuple(Point(x, y) for x, y in zip(*(iter(flat),) * 2))


def _check_poly_content_length(content_length: int, nParts: int, nPoints: int) -> None:
    expected = POLY_CONTENT_BYTES + 4 * nParts + 16 * nPoints
    if 2 * content_length != expected:
        raise ShapefileRecordLengthError(
            f"Record content length of {content_length} words does not match "
            f"{nParts} parts and {nPoints} points ({expected} bytes)."
        )


def _check_counts_fit(content_length: int, nParts: int, nPoints: int) -> None:
    # Checked before any array is read
    needed = 4 * nParts + 16 * nPoints
    if needed > 2 * content_length:
        raise ShapefileRecordLengthError(
            f"Record content length of {content_length} words is too short for "
            f"{nParts} parts and {nPoints} points ({needed} bytes)."
        )


def _read_bbox_parts_and_points(
    b_io: ReadableBinStream,
    content_length: int,
    exact: bool = False,
) -> tuple[BoundingBox, tuple[int, ...], tuple[Point, ...]]:
    """Reads the bbox, parts and points of a polyline or polygon. With
    exact, the content length must match the counts exactly."""
    bbox = BoundingBox.load(b_io)
    nParts = _read_count(b_io, "parts")
    nPoints = _read_count(b_io, "points")
    if exact:
        _check_poly_content_length(content_length, nParts, nPoints)
    else:
        _check_counts_fit(content_length, nParts, nPoints)
    parts = read_int32_le_array(b_io, nParts)
    points = _read_points(b_io, nPoints)
    return bbox, parts, points


def _read_bbox_and_points(
    b_io: ReadableBinStream,
    content_length: int,
) -> tuple[BoundingBox, tuple[Point, ...]]:
    bbox = BoundingBox.load(b_io)
    nPoints = _read_count(b_io, "points")
    _check_counts_fit(content_length, 0, nPoints)
    return bbox, _read_points(b_io, nPoints)


def _read_optional_measures(
    b_io: ReadableBinStream,
    content_length: int,
    no_measures_bytes: int,
    nPoints: int,
) -> tuple[MBox, tuple[float, ...]]:
    """Measures are optional in M records. Writers that have no
    measures leave them out, and the only trace of that is the
    record's content length. The comparison must be kept exactly as
    it is, as it matches what those writers produce.
    """
    if content_length * 2 == no_measures_bytes:
        return (0.0, 0.0), (0.0,) * nPoints
    mmin, mmax = read_float64_le_array(b_io, 2)
    return (mmin, mmax), read_float64_le_array(b_io, nPoints)


class _ShapeTypeName:
    shapeType: ClassVar[int]

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.shapeType]


class _HasPoints(_ShapeTypeName):
    points: tuple[Point, ...]

    @property
    def num_points(self) -> int:
        return len(self.points)


class _HasParts(_HasPoints):
    parts: tuple[int, ...]

    @property
    def num_parts(self) -> int:
        return len(self.parts)

    @property
    def lines(self) -> list[tuple[Point, ...]]:
        """The points of each part, i.e. the points split at each
        index in parts."""
        ends = list(self.parts[1:]) + [len(self.points)]
        return [self.points[start:end] for start, end in zip(self.parts, ends)]


@dataclass(frozen=True)
class NullShape(_ShapeTypeName):
    shapeType: ClassVar[int] = NULL

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> NullShape:
        return cls()


@dataclass(frozen=True)
class Point(_ShapeTypeName):
    shapeType: ClassVar[int] = POINT

    x: float
    y: float

    @classmethod
    def from_byte_stream(cls, b_io: ReadableBinStream, content_length: int) -> Point:
        x, y = read_float64_le_array(b_io, 2)
        return cls(x, y)


@dataclass(frozen=True)
class Polyline(_HasParts):
    shapeType: ClassVar[int] = POLYLINE

    bbox: BoundingBox
    parts: tuple[int, ...]  # index of start point of each part
    points: tuple[Point, ...]

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> Polyline:
        bbox, parts, points = _read_bbox_parts_and_points(
            b_io, content_length, exact=True
        )
        return cls(bbox, parts, points)


@dataclass(frozen=True)
class Polygon(_HasParts):
    shapeType: ClassVar[int] = POLYGON

    bbox: BoundingBox
    parts: tuple[int, ...]
    points: tuple[Point, ...]

    @classmethod
    def from_byte_stream(cls, b_io: ReadableBinStream, content_length: int) -> Polygon:
        bbox, parts, points = _read_bbox_parts_and_points(
            b_io, content_length, exact=True
        )
        return cls(bbox, parts, points)


@dataclass(frozen=True)
class MultiPoint(_HasPoints):
    shapeType: ClassVar[int] = MULTIPOINT

    bbox: BoundingBox
    points: tuple[Point, ...]

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> MultiPoint:
        bbox, points = _read_bbox_and_points(b_io, content_length)
        return cls(bbox, points)


@dataclass(frozen=True)
class PointZ(_ShapeTypeName):
    shapeType: ClassVar[int] = POINTZ

    x: float
    y: float
    z: float
    m: float

    @classmethod
    def from_byte_stream(cls, b_io: ReadableBinStream, content_length: int) -> PointZ:
        x, y, z, m = read_float64_le_array(b_io, 4)
        return cls(x, y, z, m)


# Z variants of the multi-point shapes and multipatches are recognised
# by their shape type only. Their records are not decoded.


@dataclass(frozen=True)
class PolylineZ(_ShapeTypeName):
    shapeType: ClassVar[int] = POLYLINEZ


@dataclass(frozen=True)
class PolygonZ(_ShapeTypeName):
    shapeType: ClassVar[int] = POLYGONZ


@dataclass(frozen=True)
class MultiPointZ(_ShapeTypeName):
    shapeType: ClassVar[int] = MULTIPOINTZ


@dataclass(frozen=True)
class PointM(_ShapeTypeName):
    shapeType: ClassVar[int] = POINTM

    x: float
    y: float
    m: float

    @classmethod
    def from_byte_stream(cls, b_io: ReadableBinStream, content_length: int) -> PointM:
        x = read_float64_le(b_io)
        y = read_float64_le(b_io)
        m = read_float64_le(b_io)
        return cls(x, y, m)


@dataclass(frozen=True)
class PolylineM(_HasParts):
    shapeType: ClassVar[int] = POLYLINEM

    bbox: BoundingBox
    parts: tuple[int, ...]
    points: tuple[Point, ...]
    mbox: MBox
    m: tuple[float, ...]

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> PolylineM:
        bbox, parts, points = _read_bbox_parts_and_points(b_io, content_length)
        mbox, m = _read_optional_measures(
            b_io,
            content_length,
            M_CONTENT_BYTES_WITHOUT_MEASURES + 4 * len(parts) + 16 * len(points),
            len(points),
        )
        return cls(bbox, parts, points, mbox, m)


@dataclass(frozen=True)
class PolygonM(_HasParts):
    shapeType: ClassVar[int] = POLYGONM

    bbox: BoundingBox
    parts: tuple[int, ...]
    points: tuple[Point, ...]
    mbox: MBox
    m: tuple[float, ...]

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> PolygonM:
        bbox, parts, points = _read_bbox_parts_and_points(b_io, content_length)
        mbox, m = _read_optional_measures(
            b_io,
            content_length,
            M_CONTENT_BYTES_WITHOUT_MEASURES + 4 * len(parts) + 16 * len(points),
            len(points),
        )
        return cls(bbox, parts, points, mbox, m)


@dataclass(frozen=True)
class MultiPointM(_HasPoints):
    shapeType: ClassVar[int] = MULTIPOINTM

    bbox: BoundingBox
    points: tuple[Point, ...]
    mbox: MBox
    m: tuple[float, ...]

    @classmethod
    def from_byte_stream(
        cls, b_io: ReadableBinStream, content_length: int
    ) -> MultiPointM:
        bbox, points = _read_bbox_and_points(b_io, content_length)
        mbox, m = _read_optional_measures(
            b_io,
            content_length,
            M_CONTENT_BYTES_WITHOUT_MEASURES + 16 * len(points),
            len(points),
        )
        return cls(bbox, points, mbox, m)


@dataclass(frozen=True)
class MultiPatch(_ShapeTypeName):
    shapeType: ClassVar[int] = MULTIPATCH


Shape = Union[
    NullShape,
    Point,
    Polyline,
    Polygon,
    MultiPoint,
    PointZ,
    PolylineZ,
    PolygonZ,
    MultiPointZ,
    PointM,
    PolylineM,
    PolygonM,
    MultiPointM,
    MultiPatch,
]

SHAPE_CLASS_FROM_SHAPETYPE: dict[int, type[Shape]] = {
    NULL: NullShape,
    POINT: Point,
    POLYLINE: Polyline,
    POLYGON: Polygon,
    MULTIPOINT: MultiPoint,
    POINTZ: PointZ,
    POLYLINEZ: PolylineZ,
    POLYGONZ: PolygonZ,
    MULTIPOINTZ: MultiPointZ,
    POINTM: PointM,
    POLYLINEM: PolylineM,
    POLYGONM: PolygonM,
    MULTIPOINTM: MultiPointM,
    MULTIPATCH: MultiPatch,
}

# Shape types whose records can be decoded from a .shp file
DECODABLE_SHAPETYPES = frozenset(
    [
        NULL,
        POINT,
        POLYLINE,
        POLYGON,
        MULTIPOINT,
        POINTZ,
        POINTM,
        POLYLINEM,
        POLYGONM,
        MULTIPOINTM,
    ]
)


def shape_class_from_type(shapeType: int) -> type[Shape]:
    """Returns the shape class for a shape type code."""
    try:
        return SHAPE_CLASS_FROM_SHAPETYPE[shapeType]
    except KeyError:
        raise ShapefileInvalidShapeType(f"Unknown shape type: {shapeType}")
