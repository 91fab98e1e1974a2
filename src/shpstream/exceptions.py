class ShapefileException(Exception):
    """An exception to handle shapefile specific problems."""


class ShapefileInvalidFile(ShapefileException):
    """The main file header has a wrong file code, reserved field or version."""


class ShapefileInvalidShapeType(ShapefileException):
    """A record declares a shape type this package cannot decode."""


class ShapefileTruncatedError(ShapefileException, EOFError):
    """The byte stream ended in the middle of a value."""


class ShapefileRecordLengthError(ShapefileException):
    """A record's content length disagrees with what was actually read."""
