import os
import re
import fcntl
import json
import time
import logging
from typing import Optional, Dict

logger = logging.getLogger(__name__)

LOCK_DIR = "."


def lock_path_for_user(user_id, lock_dir: str = LOCK_DIR) -> str:
    safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", str(user_id))
    return os.path.join(lock_dir, f"status-check-{safe_id}.lock")


class StatusCheckLock:
    """
    Per-user exclusive lock around status reconciliation runs.

    Backed by fcntl.flock on a lock file, so two processes (e.g. the
    scheduled loop and a manual `track` run) never reconcile the same
    user's applications at the same time.
    """
    def __init__(self, user_id, lock_dir: str = LOCK_DIR):
        self.user_id = str(user_id)
        self.lock_file = lock_path_for_user(user_id, lock_dir)
        self.file_handle = None

    def _open_file(self):
        if not self.file_handle:
            os.makedirs(os.path.dirname(self.lock_file) or ".", exist_ok=True)
            self.file_handle = open(self.lock_file, "a+")

    def acquire(self, source: str, metadata: Optional[Dict] = None) -> bool:
        """
        Attempt to acquire the lock without blocking.

        Args:
            source: Identifier for the caller ('cli' or 'loop')
            metadata: Additional info to store alongside the pid

        Returns:
            True if lock acquired, False if another process holds it.
        """
        try:
            self._open_file()
            fcntl.flock(self.file_handle, fcntl.LOCK_EX | fcntl.LOCK_NB)

            self.file_handle.truncate(0)
            self.file_handle.seek(0)

            info = {
                "source": source,
                "user_id": self.user_id,
                "pid": os.getpid(),
                "timestamp": time.time(),
                **(metadata or {})
            }
            json.dump(info, self.file_handle)
            self.file_handle.flush()

            return True
        except BlockingIOError:
            self.file_handle.close()
            self.file_handle = None
            return False

    def release(self):
        """Release the lock and clear the owner info."""
        if self.file_handle:
            try:
                self.file_handle.truncate(0)
                self.file_handle.seek(0)
                fcntl.flock(self.file_handle, fcntl.LOCK_UN)
            finally:
                self.file_handle.close()
                self.file_handle = None

    def get_lock_info(self) -> Optional[Dict]:
        """
        Read information about the current lock owner.
        Returns None if file doesn't exist or is empty/corrupt.
        """
        if not os.path.exists(self.lock_file):
            return None

        try:
            with open(self.lock_file, "r") as f:
                content = f.read().strip()
                if not content:
                    return None
                return json.loads(content)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read lock info: {e}")
            return None

    def __enter__(self):
        if not self.acquire("cli"):
            raise RuntimeError(f"Status check already running for user {self.user_id}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
