import io
import struct

import pytest

from model_builder import PAD_VERTEX, face, lod, model, normal, point, tags
from pbokit.errors import (
    E_BAD_MAGIC,
    E_VERTEX_COUNT,
    MalformedContainer,
    TruncatedInput,
)
from pbokit.model import decode_model, read_model


def _textured_lod(resolution: float = 1.0) -> bytes:
    return lod(
        points=[point(0, 0, 0), point(1, 0, 0, flags=4), point(0, 1, 0)],
        normals=[normal(0, 0, 1)],
        faces=[
            face(
                [(0, 0, 0.0, 0.0), (1, 0, 1.0, 0.0), (2, 0, 0.0, 1.0)],
                texture="data\\wall_co.paa",
                material="data\\wall.rvmat",
            ),
            face(
                [(0, 0, 0.0, 0.0), (1, 0, 1.0, 0.0), (2, 0, 0.0, 1.0), (1, 0, 1.0, 1.0)],
                flags=8,
            ),
        ],
        resolution=resolution,
        tag_block=tags([("#Mass#", struct.pack("<f", 10.0)), ("#Sharp#", b"")]),
    )


def test_full_decode():
    m = decode_model(model(257, [_textured_lod(1.0), _textured_lod(2.5)]))
    assert m.version == 257
    assert m.resolutions == [1.0, 2.5]
    level = m.find_lod(2.5)
    assert level is not None
    assert (level.version_major, level.version_minor) == (28, 256)
    assert len(level.points) == 3
    assert level.points[1].coords == (1.0, 0.0, 0.0)
    assert level.points[1].flags == 4
    assert level.face_normals == ((0.0, 0.0, 1.0),)
    tri, quad = level.faces
    assert tri.is_triangle and tri.vertex_count == 3
    assert tri.texture == "data\\wall_co.paa"
    assert tri.material == "data\\wall.rvmat"
    assert [v.point_index for v in tri.vertices] == [0, 1, 2]
    assert tri.vertices[1].uv == (1.0, 0.0)
    assert quad.vertex_count == 4 and quad.flags == 8
    assert quad.texture == "" and quad.material == ""
    assert level.tag_names == ["#Mass#", "#Sharp#", "#EndOfFile#"]
    assert level.tags[0].size == 4
    assert level.selections == {} and level.properties == {}
    assert m.find_lod(99.0) is None


def test_dependency_only_decode_skips_geometry():
    data = model(1, [lod(faces=[face([(0, 0, 0.0, 0.0)] * 3, texture="t.paa")])])
    m = decode_model(data, geometry=False)
    assert len(m.lods) == 1
    level = m.lods[0]
    assert level.resolution == 1.0
    assert level.points == () and level.face_normals == ()
    assert len(level.faces) == 1 and level.faces[0].is_triangle
    assert level.faces[0].texture == "t.paa"


def test_dependency_only_matches_full_decode_for_faces_and_tags():
    data = model(3, [_textured_lod(1.0), _textured_lod(1000.0)])
    full = decode_model(data)
    deps = decode_model(data, geometry=False)
    for a, b in zip(full.lods, deps.lods):
        assert a.faces == b.faces
        assert a.tags == b.tags
        assert a.resolution == b.resolution
    assert deps.lods[0].points == ()


def test_triangle_padding_slot_is_consumed_and_ignored():
    data = model(1, [lod(faces=[face([(1, 2, 0.25, 0.75)] * 3)] * 2)])
    level = decode_model(data).lods[0]
    assert len(level.faces) == 2
    pad_indices = (PAD_VERTEX[0], PAD_VERTEX[1])
    for f in level.faces:
        assert len(f.vertices) == 3
        assert all((v.point_index, v.normal_index) != pad_indices for v in f.vertices)
        assert f.vertices[0].uv == (0.25, 0.75)


def test_stream_is_left_after_model():
    data = model(1, [_textured_lod()]) + b"TRAILER"
    for geometry in (True, False):
        stream = io.BytesIO(data)
        read_model(stream, geometry=geometry)
        assert stream.read() == b"TRAILER"


class _Pipe:
    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)

    def read(self, size=-1):
        return self._inner.read(size)

    def seekable(self):
        return False


def test_dependency_only_on_sequential_stream():
    data = model(1, [_textured_lod()]) + b"!"
    stream = _Pipe(data)
    m = read_model(stream, geometry=False)
    assert m.lods[0].tag_names[-1] == "#EndOfFile#"
    assert stream.read() == b"!"


@pytest.mark.parametrize("count", [0, 2, 5])
def test_bad_vertex_count(count):
    data = model(1, [lod(faces=[face([(0, 0, 0.0, 0.0)] * 3, count=count)])])
    with pytest.raises(MalformedContainer) as exc:
        decode_model(data)
    assert exc.value.code == E_VERTEX_COUNT
    assert exc.value.context["vertex_count"] == count


def test_bad_model_magic():
    with pytest.raises(MalformedContainer) as exc:
        decode_model(b"ODOL" + b"\x00" * 8)
    assert exc.value.code == E_BAD_MAGIC
    assert exc.value.context["offset"] == 0
    assert exc.value.context["found"] == b"ODOL".hex()


def test_bad_lod_magic_reports_offset():
    data = model(1, [b"XXXX" + _textured_lod()[4:]])
    with pytest.raises(MalformedContainer) as exc:
        decode_model(data)
    assert exc.value.code == E_BAD_MAGIC
    assert exc.value.context["offset"] == 12


def test_bad_tag_block_magic():
    data = model(1, [lod(tag_block=b"GATT" + tags()[4:])])
    with pytest.raises(MalformedContainer) as exc:
        decode_model(data)
    assert exc.value.code == E_BAD_MAGIC


def test_missing_end_tag_is_truncated():
    block = b"TAGG" + b"\x01" + b"#Mass#\x00" + struct.pack("<I", 0)
    data = model(1, [b"P3DM" + struct.pack("<5I", 1, 1, 0, 0, 0) + b"\x00" * 4 + block])
    with pytest.raises(TruncatedInput):
        decode_model(data)


def test_truncated_geometry():
    data = model(1, [_textured_lod()])
    with pytest.raises(TruncatedInput):
        decode_model(data[:40])
