from __future__ import annotations

import logging
from collections.abc import Iterator
from types import TracebackType
from typing import NamedTuple

from . import constants
from .constants import (
    FILE_CODE,
    FILE_VERSION,
    HEADER_LENGTH_WORDS,
    NULL,
    NUM_RESERVED_FIELDS,
    RECORD_HEADER_LENGTH_WORDS,
    SHAPETYPE_LOOKUP,
)
from .exceptions import (
    ShapefileInvalidFile,
    ShapefileInvalidShapeType,
    ShapefileRecordLengthError,
)
from .helpers import (
    read_exact,
    read_float64_le_array,
    read_int32_be,
    read_int32_le,
    unpack_2_int32_be,
)
from .shapes import (
    DECODABLE_SHAPETYPES,
    SHAPE_CLASS_FROM_SHAPETYPE,
    BoundingBox,
    Shape,
)
from .types import MBox, ReadableBinStream, ZBox

logger = logging.getLogger(__name__)


class ShpHeader(NamedTuple):
    fileLength: int  # in 16-bit words, header included
    shapeType: int
    bbox: BoundingBox
    zbox: ZBox
    mbox: MBox


class Shapes(list[Shape]):
    """A class to hold a list of Shape objects. Subclasses list to ensure
    compatibility with former work and to reuse all the optimizations
    of the builtin list."""

    def __repr__(self) -> str:
        return f"Shapes: {list(self)}"


class Reader:
    """Reads the geometry records of a .shp file from a byte stream.

    The 100 byte header is read and checked as soon as the Reader is
    created. The records are then decoded one at a time, in file order,
    each time the Reader is iterated. The stream is only ever read
    forwards, so it does not need to be seekable.

    The header's file length is the only thing that decides when the
    records end. Each record read takes its own content length (plus
    the record header) off what remains. Any error while decoding a
    record is raised to the caller. The records returned before it
    are still valid.
    """

    def __init__(self, shp: ReadableBinStream):
        self.shp = shp
        self.recNum: int | None = None
        self.__warnedShapeType = False
        self.__shpHeader()

    def __shpHeader(self) -> None:
        """Reads the header information from a .shp file."""
        shp = self.shp
        fileCode = read_int32_be(shp)
        if fileCode != FILE_CODE:
            raise ShapefileInvalidFile(
                f"Not a shapefile: file code is {fileCode}, expected {FILE_CODE}."
            )
        for i in range(NUM_RESERVED_FIELDS):
            reserved = read_int32_be(shp)
            if reserved != 0:
                raise ShapefileInvalidFile(
                    f"Not a shapefile: reserved header field {i} is {reserved}, expected 0."
                )
        # File length, in 16-bit words
        self.__fileLength = read_int32_be(shp)
        version = read_int32_le(shp)
        if version != FILE_VERSION:
            raise ShapefileInvalidFile(
                f"Unsupported shapefile version {version}, expected {FILE_VERSION}."
            )
        # The nominal shape type of the file. Each record carries its own.
        self.__shapeType = read_int32_le(shp)
        # The shapefile's bounding box (lower left, upper right)
        self.__bbox = BoundingBox.load(shp)
        # Elevation
        zmin, zmax = read_float64_le_array(shp, 2)
        self.__zbox: ZBox = (zmin, zmax)
        # Measure
        mmin, mmax = read_float64_le_array(shp, 2)
        self.__mbox: MBox = (mmin, mmax)

        self.__remaining = self.__fileLength - HEADER_LENGTH_WORDS
        logger.debug(
            "Read shapefile header: length %d words, shape type %s, bbox %s",
            self.__fileLength,
            SHAPETYPE_LOOKUP.get(self.__shapeType, self.__shapeType),
            self.__bbox,
        )

    @property
    def bbox(self) -> BoundingBox:
        return self.__bbox

    @property
    def zbox(self) -> ZBox:
        return self.__zbox

    @property
    def mbox(self) -> MBox:
        return self.__mbox

    @property
    def shapeType(self) -> int:
        return self.__shapeType

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.__shapeType]

    @property
    def fileLength(self) -> int:
        """Length of the whole .shp file in 16-bit words, as in its header."""
        return self.__fileLength

    @property
    def shpLength(self) -> int:
        """Length of the whole .shp file in bytes, as in its header."""
        return self.__fileLength * 2

    @property
    def remaining(self) -> int:
        """16-bit words of records still to be read. 0 once all records
        have been read or a record had an unknown shape type."""
        return self.__remaining

    @property
    def header(self) -> ShpHeader:
        return ShpHeader(
            fileLength=self.__fileLength,
            shapeType=self.__shapeType,
            bbox=self.__bbox,
            zbox=self.__zbox,
            mbox=self.__mbox,
        )

    def __str__(self) -> str:
        """
        Use some general info on the shapefile as __str__
        """
        info = ["shapefile Reader"]
        info.append(
            f"    {self.__fileLength} words (type '{SHAPETYPE_LOOKUP.get(self.__shapeType, self.__shapeType)}')"
        )
        info.append(f"    {self.__remaining} words of records left to read")
        return "\n".join(info)

    def __enter__(self) -> Reader:
        """
        Enter phase of context manager.
        """
        return self

    def __exit__(
        self,
        exc_type: BaseException | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """
        Exit phase of context manager, close the stream.
        """
        self.close()
        return None

    def close(self) -> None:
        if hasattr(self.shp, "close"):
            self.shp.close()

    def __shape(self) -> Shape:
        """Reads the record header and geometry for a single shape."""
        f = self.shp

        (recNum, recLength) = unpack_2_int32_be(read_exact(f, 8))
        self.recNum = recNum

        # Taken off before the content is read, so the count stays in
        # step with the stream even if decoding the content fails.
        self.__remaining -= recLength + RECORD_HEADER_LENGTH_WORDS

        if recLength < 0:
            raise ShapefileRecordLengthError(
                f"Record {recNum} has a negative content length: {recLength}"
            )

        shapeType = read_int32_le(f)

        if shapeType not in DECODABLE_SHAPETYPES:
            # The remaining records can't be found reliably, so stop here.
            self.__remaining = 0
            logger.debug(
                "Record %d has shape type %d, which cannot be decoded", recNum, shapeType
            )
            raise ShapefileInvalidShapeType(
                f"Record {recNum} has an invalid shape type: {shapeType}"
            )

        if shapeType != self.__shapeType and shapeType != NULL:
            # Only the first mismatch in a file is reported
            if constants.VERBOSE and not self.__warnedShapeType:
                self.__warnedShapeType = True
                logger.warning(
                    "Record %d has shape type %s but the file's shape type is %s. "
                    "Further records of other shape types are not reported.",
                    recNum,
                    SHAPETYPE_LOOKUP[shapeType],
                    SHAPETYPE_LOOKUP.get(self.__shapeType, self.__shapeType),
                )

        ShapeClass = SHAPE_CLASS_FROM_SHAPETYPE[shapeType]
        try:
            return ShapeClass.from_byte_stream(f, recLength)  # type: ignore[union-attr]
        except ShapefileRecordLengthError:
            logger.debug("Record %d is corrupt", recNum)
            raise

    def __iter__(self) -> Iterator[Shape]:
        return self

    def __next__(self) -> Shape:
        if self.__remaining < 0:
            overrun = -self.__remaining
            self.__remaining = 0
            # Some writers get the file length in the header wrong. That
            # is only an error if the records carry on past it.
            if not self.shp.read(1):
                logger.debug(
                    "File length in the header is %d words short", overrun
                )
                raise StopIteration
            raise ShapefileRecordLengthError(
                f"Records are {overrun} words longer than the file length "
                "in the header."
            )
        if self.__remaining == 0:
            raise StopIteration
        return self.__shape()

    def iterShapes(self) -> Iterator[Shape]:
        """Returns a generator of the shapes not yet read. Useful
        for handling large shapefiles.
        """
        yield from self

    def shapes(self) -> Shapes:
        """Returns all the shapes not yet read."""
        shapes = Shapes()
        shapes.extend(self.iterShapes())
        return shapes
