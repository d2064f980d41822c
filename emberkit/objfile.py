"""Inspection and normalisation of Wavefront OBJ files."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from emberkit.utility import log

PathLike = Union[str, Path]

_WHITESPACE = " \t\n\r\f\v"
_FLT_MIN = 1.1754943508222875e-38
_VERBOSE_VERTEX_LIMIT = 10

_HEX_PREFIX = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?"
)
_DEC_PREFIX = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


@dataclass
class ObjFileInfo:
    """Element counts of an OBJ file, plus its first vertex lines when asked for."""

    path: str
    vertices: int = 0
    normals: int = 0
    texcoords: int = 0
    faces: int = 0
    first_vertices: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"OBJ File Info: {self.path}\n"
            f"  Vertices: {self.vertices}\n"
            f"  Normals: {self.normals}\n"
            f"  TexCoords: {self.texcoords}\n"
            f"  Faces: {self.faces}\n"
        )


@dataclass
class FixReport:
    """Outcome of normalising an OBJ file."""

    lines_processed: int = 0
    fixed_issues: int = 0


def _to_float32(value: float) -> float | None:
    try:
        single = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return None
    if math.isfinite(value) and value != 0.0 and abs(single) < _FLT_MIN:
        return None
    return single


def _parse_token(token: str) -> float | None:
    match = _HEX_PREFIX.match(token)
    if match:
        value = float.fromhex(match.group())
    else:
        match = _DEC_PREFIX.match(token)
        if not match:
            return None
        value = float(match.group())
    return _to_float32(value)


def parse_floats(text: str) -> list[float]:
    """Parse the whitespace-separated numbers in ``text`` as single-precision floats.

    Each token is read by its longest numeric prefix; tokens with no numeric
    prefix, or out of single-precision range, are skipped.
    """
    values = []
    for token in text.split():
        value = _parse_token(token)
        if value is not None:
            values.append(value)
    return values


def _kind(line: str) -> str:
    return line[:2] if line.startswith("v") else line[:1]


def get_obj_file_info(path: PathLike, verbose: bool = False) -> ObjFileInfo:
    """Count vertices, normals, texture coordinates and faces in an OBJ file.

    With ``verbose``, the first ten vertex lines are kept as well.
    """
    info = ObjFileInfo(str(path))
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            lines = [line.rstrip("\n") for line in handle]
    except OSError:
        log(f"Failed to open file: {path}\n")
        raise

    for line in lines:
        if not line or line.startswith("#"):
            continue
        kind = _kind(line)
        if kind == "v ":
            info.vertices += 1
            if verbose and len(info.first_vertices) < _VERBOSE_VERTEX_LIMIT:
                info.first_vertices.append(line)
        elif kind == "vn":
            info.normals += 1
        elif kind == "vt":
            info.texcoords += 1
        elif kind.startswith("f"):
            info.faces += 1

    log(info.summary())
    if verbose:
        log("First vertices:\n" + "".join(f"  {v}\n" for v in info.first_vertices))
    return info


def _format_coords(prefix: str, coords: list[float]) -> str:
    return f"{prefix} " + " ".join(f"{c:g}" for c in coords[:3])


def verify_and_fix_obj_file(source_path: PathLike, dest_path: PathLike) -> FixReport:
    """Write a normalised copy of an OBJ file and report what was changed.

    Lines are trimmed and blank lines dropped. Vertex and normal lines with at
    least three numbers are rewritten with their first three; all other lines
    are copied unchanged.
    """
    try:
        source = open(source_path, encoding="utf-8", errors="replace")
    except OSError:
        log(f"Failed to open source file: {source_path}\n")
        raise

    report = FixReport()
    with source:
        try:
            dest = open(dest_path, "w", encoding="utf-8")
        except OSError:
            log(f"Failed to create destination file: {dest_path}\n")
            raise
        with dest:
            for raw in source:
                report.lines_processed += 1
                line = raw.strip(_WHITESPACE)
                if not line:
                    continue
                output = line
                kind = _kind(line)
                if kind == "v ":
                    coords = parse_floats(line[1:])
                    if len(coords) >= 3:
                        output = _format_coords("v", coords)
                        report.fixed_issues += 1
                elif kind == "vn":
                    coords = parse_floats(line[2:])
                    if len(coords) >= 3:
                        output = _format_coords("vn", coords)
                        report.fixed_issues += 1
                dest.write(output + "\n")

    log(
        f"Processed {report.lines_processed} lines, "
        f"fixed {report.fixed_issues} issues.\n"
    )
    return report