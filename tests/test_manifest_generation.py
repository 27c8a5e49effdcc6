import hashlib
import json
from pathlib import Path

from pbokit.api import PackOptions, pack_directory


def test_manifest_opt_in(tmp_path: Path):
    src = tmp_path / "mod"
    (src / "data").mkdir(parents=True)
    (src / "z.txt").write_bytes(b"zz")
    (src / "data" / "A.bin").write_bytes(b"\x01\x02\x03")

    out = tmp_path / "out" / "mod.pbo"
    res = pack_directory(PackOptions(source=src, output_path=out))
    assert res.entry_count == 2
    assert not (tmp_path / "out" / "manifest.json").exists()

    manifest_path = tmp_path / "out" / "manifest.json"
    res = pack_directory(
        PackOptions(source=src, output_path=out, manifest_path=manifest_path)
    )
    data = json.loads(manifest_path.read_text())
    raw = out.read_bytes()

    assert data["version"] == 1
    assert data["prefix"] == "mod"
    assert data["file_size"] == len(raw) == res.bytes_written
    assert data["digest"] == raw[-20:].hex() == res.digest.hex()
    assert data["counts"] == {"entries": 2, "metadata": 1}
    names = [e["name"] for e in data["entries"]]
    assert names == ["data\\A.bin", "z.txt"]
    for e in data["entries"]:
        payload = raw[e["offset"] : e["offset"] + e["size"]]
        assert hashlib.sha1(payload).hexdigest() == e["sha1"]
