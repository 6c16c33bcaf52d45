"""Low-level JSON file I/O operations with locking."""
import json
import os
import shutil
import tempfile
import time
from contextlib import contextmanager
from typing import Any
import sys

if sys.platform != "win32":
    import fcntl


def load_json(file_path: str, retry_count: int = 3, retry_delay: float = 0.1) -> Any:
    """
    Load and parse JSON file with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        retry_count: Number of retry attempts for permission errors (default: 3)
        retry_delay: Delay in seconds between retries (default: 0.1)

    Returns:
        Parsed JSON content

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        PermissionError: If file not readable after retries
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    for attempt in range(retry_count):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except PermissionError:
            if attempt < retry_count - 1:
                time.sleep(retry_delay)
                continue
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(
                f"Malformed JSON in {file_path}: {e.msg}",
                e.doc,
                e.pos
            )

    raise PermissionError(f"Cannot read file after {retry_count} attempts: {file_path}")


def save_json(file_path: str, data: Any, backup: bool = True) -> None:
    """
    Save data to JSON file atomically with UTF-8 encoding.

    The data is serialized before anything touches the disk, written to a
    temporary file in the same directory and renamed over the target, so
    readers see either the old or the new content.

    Args:
        file_path: Path to JSON file
        data: JSON-serializable value to save
        backup: If True, create backup before overwriting (default True)

    Raises:
        TypeError / ValueError: If data is not JSON-serializable
        IOError: If write operation fails
    """
    payload = json.dumps(data, ensure_ascii=False, indent=2)

    dir_path = os.path.dirname(file_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        backup_path = f"{file_path}.backup"
        try:
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            raise IOError(f"Failed to create backup: {e}")

    temp_fd, temp_path = tempfile.mkstemp(
        dir=dir_path if dir_path else ".",
        prefix=".tmp_",
        suffix=".json"
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

        # Windows may hold the target briefly after a read
        if sys.platform == "win32":
            retry_count = 3
            for attempt in range(retry_count):
                try:
                    os.replace(temp_path, file_path)
                    break
                except PermissionError:
                    if attempt < retry_count - 1:
                        time.sleep(0.1)
                        continue
                    raise
        else:
            os.replace(temp_path, file_path)

    except OSError as e:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                pass
        raise IOError(f"Failed to write file {file_path}: {e}")


def delete_file(file_path: str) -> None:
    """Remove a file; a missing file is not an error."""
    try:
        os.remove(file_path)
    except FileNotFoundError:
        pass


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Context manager for file locking with retry mechanism.

    The lock is held on a sibling "<file_path>.lock" file, so the data file
    itself does not need to exist yet.

    Args:
        file_path: Path to file to lock
        timeout: Maximum seconds to wait for lock acquisition (default: 5.0)

    Usage:
        with lock_file('data/registrations.json'):
            records = load_json('data/registrations.json')
            records.append(new_record)
            save_json('data/registrations.json', records)

    Raises:
        TimeoutError: If unable to acquire lock within timeout
    """
    lock_file_path = f"{file_path}.lock"
    dir_path = os.path.dirname(lock_file_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    if sys.platform == "win32":
        start_time = time.time()
        lock_fd = None

        while True:
            try:
                lock_fd = os.open(
                    lock_file_path,
                    os.O_CREAT | os.O_EXCL | os.O_RDWR
                )
                break
            except FileExistsError:
                if time.time() - start_time > timeout:
                    raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                time.sleep(0.05)

        try:
            yield
        finally:
            try:
                os.close(lock_fd)
            except OSError:
                pass
            delete_file(lock_file_path)
    else:
        lock_fd = open(lock_file_path, "a")
        try:
            start_time = time.time()
            while True:
                try:
                    fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if time.time() - start_time > timeout:
                        raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                    time.sleep(0.05)

            yield

        finally:
            try:
                fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
            except OSError:
                pass
            lock_fd.close()
