#!/usr/bin/env python3
# xorfile.py
#
# Single-byte XOR file transformer with live progress and Enter-to-cancel.
# XOR with one repeating key byte is an obfuscation, not encryption: it offers no confidentiality.
#
# Run model: the transform runs on the calling thread while a progress reporter and a cancel
# watcher run as daemon threads around one ProgressState. Output goes to a hidden temporary
# artifact next to the destination and is promoted only when the whole input was transformed.
#
# Dependencies: stdlib + cryptography (SHA-256 fingerprints)

from __future__ import annotations

import argparse
import os
import secrets
import select
import shutil
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Sequence, TextIO, Tuple

from cryptography.hazmat.primitives import hashes


# =========================
# Constants / Limits
# =========================

DEFAULT_CHUNK_SIZE = 81920  # 80 KiB
MIN_CHUNK_SIZE = 1024
MAX_CHUNK_SIZE = 16_777_216

PROGRESS_REFRESH_SEC = 0.15
CANCEL_POLL_SEC = 0.05
REPORTER_JOIN_SEC = 5.0
WATCHER_JOIN_SEC = 1.0

SAMPLE_LEN = 16
ARTIFACT_SUFFIX = ".xortmp"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


# =========================
# Errors
# =========================

class XorFileError(Exception):
    pass


class ValidationError(XorFileError):
    pass


class TransformIOError(XorFileError):
    def __init__(self, message: str, *, keep_artifact: bool = False) -> None:
        super().__init__(message)
        # Set when the original is already gone and the artifact is the only copy of the data.
        self.keep_artifact = keep_artifact


class CleanupError(XorFileError):
    pass


# =========================
# Enums / Data
# =========================

class Direction(Enum):
    ENCRYPT = "e"
    DECRYPT = "d"

    @staticmethod
    def from_cli(choice: str) -> "Direction":
        c = choice.strip().lower()
        if c in ("e", "encrypt"):
            return Direction.ENCRYPT
        if c in ("d", "decrypt"):
            return Direction.DECRYPT
        raise ValidationError("Invalid choice. Enter 'e' or 'd'.")

    @property
    def suffix(self) -> str:
        return ".enc" if self is Direction.ENCRYPT else ".dec"

    def past_tense(self) -> str:
        return "Encrypted" if self is Direction.ENCRYPT else "Decrypted"


class Outcome(Enum):
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class TransformJob:
    input_path: Path
    output_path: Path
    key: int
    direction: Direction
    overwrite: bool

    def __post_init__(self) -> None:
        _ensure_key_ok(self.key)


@dataclass(frozen=True)
class ProgressSnapshot:
    total: Optional[int]  # None until the worker has published the input size
    processed: int

    @property
    def percent(self) -> float:
        if not self.total:
            return 0.0
        return min(100.0, max(0.0, self.processed * 100.0 / self.total))


@dataclass(frozen=True)
class RunResult:
    outcome: Outcome
    job: TransformJob
    destination: Optional[Path] = None
    artifact_path: Optional[Path] = None
    error: Optional[BaseException] = None
    cleanup_error: Optional[CleanupError] = None
    # False when the destination was replaced by delete-then-move instead of os.replace().
    atomic: bool = True


# =========================
# Helpers
# =========================

def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def _ensure_key_ok(key: int) -> None:
    if isinstance(key, bool) or not isinstance(key, int) or not (0 <= key <= 255):
        raise ValidationError(f"Key must be an integer in [0 .. 255], got {key!r}")


def _ensure_chunk_size_ok(chunk_size: int) -> None:
    if not (MIN_CHUNK_SIZE <= chunk_size <= MAX_CHUNK_SIZE):
        raise ValidationError(
            f"--chunk-size must be in [{MIN_CHUNK_SIZE} .. {MAX_CHUNK_SIZE}], got {chunk_size}"
        )


def pretty_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024.0:.1f} KB"
    if n < 1024 * 1024 * 1024:
        return f"{n / (1024.0 * 1024.0):.2f} MB"
    return f"{n / (1024.0 * 1024.0 * 1024.0):.2f} GB"


def bytes_to_hex(data: bytes) -> str:
    if not data:
        return "(empty)"
    return " ".join(f"{b:02X}" for b in data)


def read_sample_bytes(path: Path, count: int = SAMPLE_LEN) -> bytes:
    # Preview only: an unreadable file shows as empty rather than aborting the run.
    try:
        with open(path, "rb") as f:
            return f.read(count)
    except OSError:
        return b""


def iter_chunks(f: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            return
        yield chunk


def file_sha256(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    h = hashes.Hash(hashes.SHA256())
    try:
        with open(path, "rb") as f:
            for chunk in iter_chunks(f, chunk_size):
                h.update(chunk)
    except OSError as ex:
        raise TransformIOError(f"Failed to read {path} for fingerprint ({ex})") from ex
    return h.finalize().hex()


def _fsync_fileobj_best_effort(f: BinaryIO) -> None:
    try:
        os.fsync(f.fileno())
    except OSError:
        pass


def _fsync_dir_best_effort(dir_path: Path) -> None:
    if os.name != "posix":
        return
    try:
        fd = os.open(str(dir_path), os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


def _copy_mode_best_effort(src: Path, dst: Path) -> None:
    try:
        shutil.copymode(src, dst)
    except OSError:
        pass


def _random_token(nbytes: int = 8) -> str:
    return secrets.token_hex(nbytes)


def _secure_open_exclusive(path: Path, *, mode: int = 0o600) -> int:
    flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
    if os.name == "posix":
        flags |= getattr(os, "O_NOFOLLOW", 0)
    return os.open(str(path), flags, mode)


def _secure_create_tmp_file(
    parent_dir: Path,
    base_name: str,
    *,
    prefix: str = "",
    suffix: str = "",
) -> Tuple[Path, BinaryIO]:
    for _ in range(128):
        token = _random_token(8)
        tmp_path = parent_dir / f"{prefix}{base_name}{suffix}.{token}"
        try:
            fd = _secure_open_exclusive(tmp_path, mode=0o600 if os.name == "posix" else 0o666)
        except FileExistsError:
            continue
        except OSError as ex:
            raise TransformIOError(f"Failed to create temporary file in {parent_dir}: {ex}") from ex

        try:
            f = os.fdopen(fd, "wb", closefd=True)
        except OSError:
            os.close(fd)
            tmp_path.unlink(missing_ok=True)
            raise
        return tmp_path, f

    raise TransformIOError(f"Failed to create a unique temporary file in {parent_dir} (too many collisions).")


# =========================
# Paths
# =========================

def parse_input_path(raw: str) -> Path:
    text = raw.strip()
    # Terminals quote dragged-in paths that contain spaces.
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        text = text[1:-1]
    if not text:
        raise ValidationError("File not found. Try again.")
    path = Path(text).expanduser()
    if not path.is_file():
        raise ValidationError("File not found. Try again.")
    return path


def make_output_path(input_path: Path, direction: Direction) -> Path:
    """
    Sibling destination: "<name><ext>.enc" / "<name><ext>.dec".
    Taken names get a counter before the final extension: foo.txt(1).enc, foo.txt(2).enc, ...
    """
    candidate = input_path.with_name(input_path.name + direction.suffix)
    unique = candidate
    counter = 1
    while unique.exists():
        unique = candidate.with_name(f"{candidate.stem}({counter}){candidate.suffix}")
        counter += 1
    return unique


def make_job(input_path: Path, key: int, direction: Direction, overwrite: bool) -> TransformJob:
    output_path = input_path if overwrite else make_output_path(input_path, direction)
    return TransformJob(
        input_path=input_path,
        output_path=output_path,
        key=key,
        direction=direction,
        overwrite=overwrite,
    )


# =========================
# XOR transform
# =========================

@lru_cache(maxsize=256)
def xor_table(key: int) -> bytes:
    _ensure_key_ok(key)
    return bytes(b ^ key for b in range(256))


def xor_bytes(data: bytes, key: int) -> bytes:
    return data.translate(xor_table(key))


# =========================
# Shared progress state
# =========================

class ProgressState:
    """
    State shared by the worker, the reporter and the cancel watcher for one job.

    Writers: begin/advance belong to the worker, snap_to_total and mark_done/mark_failed
    to the orchestrator after the worker returned, request_cancel to the watcher (or Ctrl+C).
    Readers take snapshots and must tolerate slightly stale values.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total: Optional[int] = None
        self._processed = 0
        self._done = threading.Event()
        self._cancel = threading.Event()
        self._failed = threading.Event()

    def begin(self, total: int) -> None:
        if total < 0:
            raise ValueError("total must be non-negative")
        with self._lock:
            self._total = total
            self._processed = 0

    def advance(self, nbytes: int) -> None:
        with self._lock:
            self._processed += nbytes

    def snap_to_total(self) -> None:
        with self._lock:
            if self._total is not None:
                self._processed = self._total

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            total, processed = self._total, self._processed
        # The input can grow while it is read; never report past the published size.
        if total is not None and processed > total:
            processed = total
        return ProgressSnapshot(total=total, processed=processed)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def mark_done(self) -> None:
        self._done.set()

    def wait_done(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    def request_cancel(self) -> bool:
        """Returns True only for the call that actually flipped the flag."""
        with self._lock:
            if self._cancel.is_set():
                return False
            self._cancel.set()
            return True

    @property
    def failed(self) -> bool:
        return self._failed.is_set()

    def mark_failed(self) -> None:
        self._failed.set()


# =========================
# Transform worker
# =========================

class TransformWorker:
    def __init__(self, job: TransformJob, state: ProgressState, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValidationError(f"chunk size must be positive, got {chunk_size}")
        self.job = job
        self.state = state
        self.chunk_size = chunk_size
        self.artifact_path: Optional[Path] = None

    def run(self) -> bool:
        """
        Stream input -> XOR -> artifact. Returns True when the whole input was consumed,
        False when a cancel request stopped it at a chunk boundary. I/O errors propagate;
        artifact_path is set as soon as the artifact exists so the caller can clean it up.
        """
        job = self.job
        table = xor_table(job.key)

        with open(job.input_path, "rb") as src:
            total = os.fstat(src.fileno()).st_size
            self.artifact_path, out = _secure_create_tmp_file(
                job.output_path.parent,
                base_name=job.output_path.name,
                prefix=".",
                suffix=ARTIFACT_SUFFIX,
            )
            with out:
                self.state.begin(total)
                completed = True
                for chunk in iter_chunks(src, self.chunk_size):
                    if self.state.cancel_requested:
                        completed = False
                        break
                    out.write(chunk.translate(table))
                    self.state.advance(len(chunk))
                out.flush()
                _fsync_fileobj_best_effort(out)
        return completed


# =========================
# Progress reporter
# =========================

def format_progress_line(snapshot: ProgressSnapshot, *, final: bool = False) -> str:
    percent = 100.0 if final else snapshot.percent
    processed = pretty_bytes(snapshot.processed)
    total = pretty_bytes(snapshot.total) if snapshot.total is not None else "(unknown)"
    return f"Progress: {percent:.1f}% ({processed} / {total})"


class ProgressReporter(threading.Thread):
    def __init__(
        self,
        state: ProgressState,
        stream: Optional[TextIO] = None,
        refresh: float = PROGRESS_REFRESH_SEC,
    ) -> None:
        super().__init__(name="xorfile-progress", daemon=True)
        self.state = state
        self.stream = stream
        self.refresh = refresh
        self.last_line = ""
        self._width = 0

    def run(self) -> None:
        while not self.state.done:
            self._render(format_progress_line(self.state.snapshot()))
            if self.state.wait_done(self.refresh):
                break

        snapshot = self.state.snapshot()
        if self.state.failed:
            line = format_progress_line(snapshot) + " (failed)"
        elif self.state.cancel_requested:
            line = format_progress_line(snapshot) + " (cancelled)"
        else:
            line = format_progress_line(snapshot, final=True)
        self._render(line)

    def _render(self, line: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        # Pad so a shorter line fully covers the previous one.
        self._width = max(self._width, len(line))
        stream.write("\r" + line.ljust(self._width))
        stream.flush()
        self.last_line = line


# =========================
# Cancel watcher
# =========================

KeySource = Callable[[float], bool]


def enter_pressed(timeout: float) -> bool:
    """Wait up to `timeout` seconds for Enter on the console. Raises EOFError once stdin is closed."""
    if os.name == "nt":
        import msvcrt

        if msvcrt.kbhit():
            return msvcrt.getwch() in ("\r", "\n")
        time.sleep(timeout)
        return False

    ready, _, _ = select.select([sys.stdin], [], [], timeout)
    if not ready:
        return False
    if sys.stdin.readline() == "":
        raise EOFError("stdin closed")
    return True


@contextmanager
def echo_suppressed(stream: Optional[TextIO]) -> Iterator[None]:
    """Turn off terminal echo on a POSIX tty so a cancelling Enter does not break the progress line."""
    if os.name != "posix" or stream is None or not stream.isatty():
        yield
        return

    import termios

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    quiet = termios.tcgetattr(fd)
    quiet[3] &= ~termios.ECHO
    termios.tcsetattr(fd, termios.TCSANOW, quiet)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved)


class CancelWatcher(threading.Thread):
    def __init__(
        self,
        state: ProgressState,
        key_source: Optional[KeySource] = None,
        poll: float = CANCEL_POLL_SEC,
    ) -> None:
        super().__init__(name="xorfile-cancel", daemon=True)
        self.state = state
        self.key_source = key_source if key_source is not None else enter_pressed
        self.poll = poll
        self.signalled = False

    def run(self) -> None:
        console = sys.stdin if self.key_source is enter_pressed else None
        with echo_suppressed(console):
            self._watch()

    def _watch(self) -> None:
        while not self.state.done and not self.state.cancel_requested:
            try:
                pressed = self.key_source(self.poll)
            except (EOFError, OSError, ValueError):
                # Console went away: there is nothing left to watch.
                return
            if pressed:
                self.signalled = self.state.request_cancel()
                return


# =========================
# Finalize
# =========================

def classify(error: Optional[BaseException], cancel_requested: bool) -> Outcome:
    # An I/O error wins even when a cancel was requested first.
    if error is not None:
        return Outcome.FAILED
    if cancel_requested:
        return Outcome.CANCELLED
    return Outcome.SUCCEEDED


def discard_artifact(path: Optional[Path]) -> None:
    if path is None:
        return
    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError as ex:
        raise CleanupError(f"Failed to delete partial output file: {path} ({ex})") from ex


def promote_artifact(artifact: Path, destination: Path) -> bool:
    """
    Replace `destination` (the original input) with a finished artifact. Overwrite policy only.

    Tier 1: os.replace(), atomic where the platform and filesystem support it. Returns True.
    Tier 2: if that fails while the destination exists, delete the destination and then
    rename the artifact. NOT crash-atomic: for a moment neither file is at the destination.
    Returns False. If the rename fails after the delete, the raised error has keep_artifact set.
    """
    try:
        os.replace(artifact, destination)
    except OSError as ex:
        if not destination.exists():
            raise TransformIOError(f"Failed to move output into place: {destination} ({ex})") from ex
        try:
            destination.unlink()
        except OSError as ex2:
            raise TransformIOError(f"Failed to replace {destination}: {ex2}") from ex2
        try:
            os.rename(artifact, destination)
        except OSError as ex3:
            raise TransformIOError(
                f"Original {destination} was removed but the output could not be moved into place; "
                f"the transformed data is kept at {artifact} ({ex3})",
                keep_artifact=True,
            ) from ex3
        _fsync_dir_best_effort(destination.parent)
        return False

    _fsync_dir_best_effort(destination.parent)
    return True


def promote_sibling(artifact: Path, job: TransformJob) -> Path:
    """
    Publish a finished artifact under a free sibling name without ever replacing an existing file.

    os.link() fails with FileExistsError when the name was taken since the job was created; a
    fresh name is chosen then. The artifact stays linked; the caller discards it afterwards.
    Filesystems without hard links get an exists-check plus os.replace(), which leaves a small race.
    """
    destination = job.output_path
    for _ in range(128):
        try:
            os.link(artifact, destination)
        except FileExistsError:
            destination = make_output_path(job.input_path, job.direction)
            continue
        except OSError as ex:
            if destination.exists():
                destination = make_output_path(job.input_path, job.direction)
                continue
            try:
                os.replace(artifact, destination)
            except OSError as ex2:
                raise TransformIOError(f"Failed to move output into place: {destination} ({ex2})") from ex2
        _fsync_dir_best_effort(destination.parent)
        return destination

    raise TransformIOError(f"Failed to find a free output name next to {job.input_path} (too many collisions).")


# =========================
# Run
# =========================

def run_job(
    job: TransformJob,
    *,
    state: Optional[ProgressState] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    stream: Optional[TextIO] = None,
    key_source: Optional[KeySource] = None,
    watch_cancel: bool = True,
) -> RunResult:
    state = state if state is not None else ProgressState()
    worker = TransformWorker(job, state, chunk_size=chunk_size)
    reporter = ProgressReporter(state, stream=stream)
    watcher = CancelWatcher(state, key_source=key_source) if watch_cancel else None

    reporter.start()
    if watcher is not None:
        watcher.start()

    error: Optional[BaseException] = None
    # Anything escaping below counts as a failure for cleanup purposes.
    outcome = Outcome.FAILED
    destination: Optional[Path] = None
    atomic = True
    cleanup_error: Optional[CleanupError] = None

    try:
        try:
            worker.run()
        except KeyboardInterrupt:
            state.request_cancel()
        except (OSError, XorFileError) as ex:
            error = ex

        outcome = classify(error, state.cancel_requested)

        if outcome is Outcome.SUCCEEDED:
            assert worker.artifact_path is not None
            try:
                _copy_mode_best_effort(job.input_path, worker.artifact_path)
                if job.overwrite:
                    atomic = promote_artifact(worker.artifact_path, job.output_path)
                    destination = job.output_path
                else:
                    destination = promote_sibling(worker.artifact_path, job)
            except TransformIOError as ex:
                outcome, error = Outcome.FAILED, ex
            else:
                state.snap_to_total()
    finally:
        if outcome is Outcome.FAILED:
            state.mark_failed()
        state.mark_done()

        keep = isinstance(error, TransformIOError) and error.keep_artifact
        # After a sibling promotion the artifact is a second link to the output; drop it too.
        if not keep:
            try:
                discard_artifact(worker.artifact_path)
            except CleanupError as ex:
                cleanup_error = ex

        reporter.join(REPORTER_JOIN_SEC)
        if watcher is not None:
            watcher.join(WATCHER_JOIN_SEC)
        out = stream if stream is not None else sys.stdout
        out.write("\n")
        out.flush()

    return RunResult(
        outcome=outcome,
        job=job,
        destination=destination,
        artifact_path=worker.artifact_path,
        error=error,
        cleanup_error=cleanup_error,
        atomic=atomic,
    )


# =========================
# Prompts
# =========================

Ask = Callable[[str], str]


def parse_key(text: str) -> int:
    try:
        key = int(text.strip(), 10)
    except ValueError:
        key = -1
    if not (0 <= key <= 255):
        raise ValidationError("Invalid key. Please enter a number between 0 and 255.")
    return key


def _ask_until_valid(ask: Ask, question: str, parse: Callable[[str], object]):
    while True:
        try:
            return parse(ask(question))
        except ValidationError as ex:
            print(ex)


def parse_yes_no(text: str) -> bool:
    c = text.strip().lower()
    if c == "y":
        return True
    if c == "n":
        return False
    raise ValidationError("Enter 'y' or 'n'.")


def prompt_input_path(ask: Ask = input) -> Path:
    return _ask_until_valid(ask, "Enter input file path: ", parse_input_path)


def prompt_key(ask: Ask = input) -> int:
    return _ask_until_valid(ask, "Enter key (integer 0-255): ", parse_key)


def prompt_direction(ask: Ask = input) -> Direction:
    return _ask_until_valid(ask, "Type 'e' to encrypt or 'd' to decrypt: ", Direction.from_cli)


def prompt_overwrite(ask: Ask = input) -> bool:
    return _ask_until_valid(ask, "Overwrite the original file? (y/n): ", parse_yes_no)


def confirm_zero_key(ask: Ask = input) -> bool:
    print("Warning: key = 0 will NOT change the file (XOR with 0 is identity).")
    return ask("Do you want to continue with key 0? (y/n): ").strip().lower() == "y"


# =========================
# Report
# =========================

def report_result(result: RunResult, *, digest: bool = False) -> int:
    if result.cleanup_error is not None:
        eprint(f"Warning: {result.cleanup_error}")

    if result.outcome is Outcome.CANCELLED:
        if result.cleanup_error is None:
            print("Operation cancelled by user. Partial output removed; original file left unchanged.")
        else:
            print("Operation cancelled by user. Original file left unchanged.")
        return EXIT_CANCELLED

    if result.outcome is Outcome.FAILED:
        eprint(f"Error processing file: {result.error}")
        return EXIT_FAILED

    assert result.destination is not None
    if not result.atomic:
        eprint(
            "Warning: atomic replace was unavailable; the original was deleted before the output "
            "was moved into place."
        )
    print(f"{result.job.direction.past_tense()} file saved to: {result.destination}")
    print("First bytes of output (hex): " + bytes_to_hex(read_sample_bytes(result.destination, SAMPLE_LEN)))
    print("If the hex above differs from the first-hex printed earlier, the file changed.")
    if digest:
        # The output is already in place; a fingerprint failure must not turn this into an error exit.
        try:
            print(f"SHA-256 of output: {file_sha256(result.destination)}")
        except TransformIOError as ex:
            eprint(f"Warning: {ex}")
    return EXIT_OK


# =========================
# CLI
# =========================

def _key_arg(text: str) -> int:
    try:
        return parse_key(text)
    except ValidationError as ex:
        raise argparse.ArgumentTypeError(str(ex)) from ex


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="xorfile",
        description=(
            "XOR every byte of a file with a one-byte key, with live progress.\n"
            "Press Enter while it runs to cancel; the original file is never modified on cancel or error.\n"
            "Options that are not given are asked for interactively."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )

    p.add_argument("--file", default=None, help="Input file path.")
    p.add_argument("--key", type=_key_arg, default=None, help="Key byte, integer 0-255.")

    g = p.add_mutually_exclusive_group()
    g.add_argument("--encrypt", dest="direction", action="store_const", const=Direction.ENCRYPT, help="Encrypt.")
    g.add_argument("--decrypt", dest="direction", action="store_const", const=Direction.DECRYPT, help="Decrypt.")

    o = p.add_mutually_exclusive_group()
    o.add_argument("--overwrite", dest="overwrite", action="store_const", const=True, help="Replace the original file.")
    o.add_argument(
        "--no-overwrite",
        dest="overwrite",
        action="store_const",
        const=False,
        help="Write a sibling file (<name>.enc / <name>.dec, de-duplicated with (1), (2), ...).",
    )

    p.add_argument("--yes", action="store_true", help="Do not ask for confirmation when key is 0.")
    p.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Chunk size in bytes (default {DEFAULT_CHUNK_SIZE}). Range [{MIN_CHUNK_SIZE}..{MAX_CHUNK_SIZE}].",
    )
    p.add_argument("--digest", action="store_true", help="Print SHA-256 of input and output.")
    p.add_argument(
        "--no-cancel-watch",
        action="store_true",
        help="Do not watch the console for Enter (cancel with Ctrl+C instead).",
    )
    return p


def main(argv: Optional[Sequence[str]] = None, ask: Ask = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _ensure_chunk_size_ok(args.chunk_size)

    print("=== XOR File Encryptor/Decryptor (with progress + cancel) ===")

    input_path = parse_input_path(args.file) if args.file is not None else prompt_input_path(ask)
    print("First bytes of input (hex): " + bytes_to_hex(read_sample_bytes(input_path, SAMPLE_LEN)))
    if args.digest:
        print(f"SHA-256 of input: {file_sha256(input_path)}")

    key = args.key if args.key is not None else prompt_key(ask)
    if key == 0 and not args.yes:
        if not confirm_zero_key(ask):
            print("Aborted.")
            return EXIT_CANCELLED

    direction = args.direction if args.direction is not None else prompt_direction(ask)
    overwrite = args.overwrite if args.overwrite is not None else prompt_overwrite(ask)

    job = make_job(input_path, key, direction, overwrite)

    watch_cancel = not args.no_cancel_watch and sys.stdin is not None and sys.stdin.isatty()
    if watch_cancel:
        print("Press Enter to cancel.")

    result = run_job(job, chunk_size=args.chunk_size, watch_cancel=watch_cancel)
    return report_result(result, digest=args.digest)


def cli() -> None:
    try:
        raise SystemExit(main())
    except XorFileError as ex:
        eprint(f"Error: {ex}")
        raise SystemExit(EXIT_USAGE)
    except (KeyboardInterrupt, EOFError):
        eprint("Interrupted.")
        raise SystemExit(EXIT_CANCELLED)


if __name__ == "__main__":
    cli()
