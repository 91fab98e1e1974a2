# Based on Taneli Hukkinen's https://github.com/hukkin/tomli-w/blob/master/benchmark/run.py

from __future__ import annotations

import functools
import io
import timeit
from collections.abc import Callable
from struct import pack

import shpstream


def benchmark(
    name: str,
    run_count: int,
    func: Callable,
    col_widths: tuple,
    compare_to: float | None = None,
) -> float:
    placeholder = "Running..."
    print(f"{name:>{col_widths[0]}} | {placeholder}", end="", flush=True)
    time_taken = timeit.timeit(func, number=run_count)
    print("\b" * len(placeholder), end="")
    time_suffix = " s"
    print(f"{time_taken:{col_widths[1] - len(time_suffix)}.3g}{time_suffix}", end="")
    print()
    return time_taken


def make_shp(shape_type: int, contents: list[bytes]) -> bytes:
    body = b""
    for rec_num, content in enumerate(contents, start=1):
        body += pack(">2i", rec_num, len(content) // 2) + content
    file_length = 50 + len(body) // 2
    header = (
        pack(">7i", 9994, 0, 0, 0, 0, 0, file_length)
        + pack("<2i", 1000, shape_type)
        + pack("<8d", 0, 0, 100, 100, 0, 0, 0, 0)
    )
    return header + body


def point_contents(n: int) -> list[bytes]:
    return [pack("<i2d", shpstream.POINT, i, i) for i in range(n)]


def polygonm_contents(n: int, n_points: int = 200) -> list[bytes]:
    coords = [float(i % 100) for i in range(2 * n_points)]
    ms = [float(i) for i in range(n_points)]
    content = (
        pack("<i4d2i", shpstream.POLYGONM, 0, 0, 100, 100, 1, n_points)
        + pack("<i", 0)
        + pack(f"<{2 * n_points}d", *coords)
        + pack("<2d", 0, n_points - 1)
        + pack(f"<{n_points}d", *ms)
    )
    return [content] * n


SHAPEFILES = {
    "Points 100k": make_shp(shpstream.POINT, point_contents(100_000)),
    "PolygonM 5k x 200": make_shp(shpstream.POLYGONM, polygonm_contents(5_000)),
}


def read_shapefile_with_shpstream(data: bytes) -> None:
    for __shape in shpstream.Reader(io.BytesIO(data)):
        pass


reader_benchmarks = [
    functools.partial(
        benchmark,
        name=f"Read {test_name}",
        func=functools.partial(read_shapefile_with_shpstream, data=data),
    )
    for test_name, data in SHAPEFILES.items()
]


def run(run_count: int, benchmarks: list[Callable[[], None]]) -> None:
    col_widths = (22, 10)
    col_head = ("parser", "exec time", "performance (more is better)")
    print(f"Running benchmarks {run_count} times:")
    print("-" * col_widths[0] + "---" + "-" * col_widths[1])
    print(f"{col_head[0]:>{col_widths[0]}} | {col_head[1]:>{col_widths[1]}}")
    print("-" * col_widths[0] + "-+-" + "-" * col_widths[1])
    for benchmark in benchmarks:
        benchmark(  # type: ignore [call-arg]
            run_count=run_count,
            col_widths=col_widths,
        )


if __name__ == "__main__":
    print("Reader tests:")
    run(1, reader_benchmarks)  # type: ignore [arg-type]
