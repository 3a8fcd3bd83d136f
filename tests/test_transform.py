import os

import pytest

import xorfile
from xorfile import (
    Direction,
    ProgressState,
    TransformWorker,
    ValidationError,
    bytes_to_hex,
    make_job,
    make_output_path,
    pretty_bytes,
    read_sample_bytes,
    xor_bytes,
)


SAMPLES = [b"", b"\x00", b"hello world", bytes(range(256)), os.urandom(4097)]


@pytest.mark.parametrize("key", [0, 1, 0x5A, 0xFF])
def test_xor_is_self_inverse_and_length_preserving(key):
    for data in SAMPLES:
        once = xor_bytes(data, key)
        assert len(once) == len(data)
        assert xor_bytes(once, key) == data


def test_zero_key_is_identity():
    for data in SAMPLES:
        assert xor_bytes(data, 0) == data


def test_xor_known_values():
    assert xor_bytes(b"\x00\xff\x10", 0xFF) == b"\xff\x00\xef"


@pytest.mark.parametrize("key", [-1, 256, True])
def test_xor_rejects_out_of_range_key(key):
    with pytest.raises(ValidationError):
        xor_bytes(b"abc", key)


def test_worker_output_does_not_depend_on_chunk_size(tmp_path):
    data = os.urandom(200_000)
    src = tmp_path / "in.bin"
    src.write_bytes(data)

    outputs = []
    for chunk_size in (1, 7, 4096, 81920, 1_000_000):
        job = make_job(src, 0x3C, Direction.ENCRYPT, overwrite=False)
        state = ProgressState()
        worker = TransformWorker(job, state, chunk_size=chunk_size)
        assert worker.run() is True
        outputs.append(worker.artifact_path.read_bytes())
        assert state.snapshot().processed == len(data)
        worker.artifact_path.unlink()

    assert all(o == outputs[0] for o in outputs)
    assert outputs[0] == xor_bytes(data, 0x3C)


def test_worker_stops_at_chunk_boundary_when_cancelled(tmp_path):
    src = tmp_path / "in.bin"
    src.write_bytes(b"x" * 10_000)

    class CancelAfterTwoChunks(ProgressState):
        def advance(self, nbytes):
            super().advance(nbytes)
            if self.snapshot().processed >= 2000:
                self.request_cancel()

    state = CancelAfterTwoChunks()
    worker = TransformWorker(make_job(src, 1, Direction.ENCRYPT, False), state, chunk_size=1000)
    assert worker.run() is False
    assert worker.artifact_path.read_bytes() == xor_bytes(b"x" * 2000, 1)
    assert state.snapshot() == xorfile.ProgressSnapshot(total=10_000, processed=2000)


def test_worker_rejects_non_positive_chunk_size(tmp_path):
    src = tmp_path / "in.bin"
    src.write_bytes(b"abc")
    with pytest.raises(ValidationError):
        TransformWorker(make_job(src, 1, Direction.ENCRYPT, False), ProgressState(), chunk_size=0)


def test_artifact_is_hidden_next_to_destination(tmp_path):
    src = tmp_path / "report.txt"
    src.write_bytes(b"abc")
    worker = TransformWorker(make_job(src, 9, Direction.ENCRYPT, False), ProgressState())
    worker.run()
    assert worker.artifact_path.parent == tmp_path
    assert worker.artifact_path.name.startswith(".report.txt.enc.xortmp.")


def test_make_output_path_uses_direction_suffix(tmp_path):
    src = tmp_path / "foo.txt"
    src.write_bytes(b"")
    assert make_output_path(src, Direction.ENCRYPT) == tmp_path / "foo.txt.enc"
    assert make_output_path(src, Direction.DECRYPT) == tmp_path / "foo.txt.dec"


def test_make_output_path_deduplicates_before_final_extension(tmp_path):
    src = tmp_path / "foo.txt"
    src.write_bytes(b"")
    (tmp_path / "foo.txt.enc").write_bytes(b"")
    assert make_output_path(src, Direction.ENCRYPT) == tmp_path / "foo.txt(1).enc"

    (tmp_path / "foo.txt(1).enc").write_bytes(b"")
    assert make_output_path(src, Direction.ENCRYPT) == tmp_path / "foo.txt(2).enc"


def test_make_job_overwrite_targets_input(tmp_path):
    src = tmp_path / "a.bin"
    src.write_bytes(b"1")
    job = make_job(src, 5, Direction.DECRYPT, overwrite=True)
    assert job.output_path == src
    assert job.overwrite is True


def test_pretty_bytes():
    assert pretty_bytes(0) == "0 B"
    assert pretty_bytes(1023) == "1023 B"
    assert pretty_bytes(1024) == "1.0 KB"
    assert pretty_bytes(1536) == "1.5 KB"
    assert pretty_bytes(1024 * 1024) == "1.00 MB"
    assert pretty_bytes(5 * 1024 * 1024 + 512 * 1024) == "5.50 MB"
    assert pretty_bytes(1024 ** 3) == "1.00 GB"


def test_bytes_to_hex_and_sample(tmp_path):
    assert bytes_to_hex(b"") == "(empty)"
    assert bytes_to_hex(b"\x00\xff\x10") == "00 FF 10"

    p = tmp_path / "s.bin"
    p.write_bytes(bytes(range(40)))
    assert read_sample_bytes(p, 16) == bytes(range(16))
    assert read_sample_bytes(tmp_path / "missing.bin", 16) == b""
