"""Fetch the answer file from a labeled partition."""

import logging
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from autoinst.errors import FileReadError, MountError, PartitionNotFoundError
from autoinst.fetch.base import BaseFetcher
from autoinst.models.fetch import AutoInstSettings
from autoinst.utils.command import run_command


logger = logging.getLogger(__name__)

PARTITION_LABEL = "autoinst"
ANSWER_FILE_NAME = "answer.toml"
DISK_BY_LABEL_DIR = Path("/dev/disk/by-label")
MOUNT_TIMEOUT = 60


class PartitionFetcher(BaseFetcher):
    """Mounts the partition carrying the answer label and reads the answer file."""

    def __init__(
        self,
        label: str = PARTITION_LABEL,
        by_label_dir: Optional[Path] = None,
        answer_file: str = ANSWER_FILE_NAME,
    ):
        self.label = label
        self.by_label_dir = Path(by_label_dir) if by_label_dir else DISK_BY_LABEL_DIR
        self.answer_file = answer_file

    def fetch(self, settings: AutoInstSettings) -> str:
        device = self.find_device()
        logger.info(f"Found answer partition {device}")

        with mounted(device) as mount_point:
            answer_path = mount_point / self.answer_file
            try:
                return answer_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise FileReadError(answer_path, e) from e

    def find_device(self) -> Path:
        """Resolve the block device for the label, trying lower and upper case."""
        for candidate in _label_candidates(self.label):
            path = self.by_label_dir / candidate
            if path.exists():
                return path.resolve()

        raise PartitionNotFoundError(
            f"No partition labeled '{self.label}' found in {self.by_label_dir}"
        )


def _label_candidates(label: str) -> Sequence[str]:
    candidates = [label.lower(), label.upper()]
    if label not in candidates:
        candidates.insert(0, label)
    return candidates


@contextmanager
def mounted(device: Path) -> Iterator[Path]:
    """Mount ``device`` read-only on a temporary directory for the block.

    The device is unmounted and the directory removed when the block exits,
    whether or not it raised.
    """
    mount_point = Path(tempfile.mkdtemp(prefix="autoinst-answer-"))
    try:
        try:
            run_command(
                ["mount", "-o", "ro", str(device), str(mount_point)],
                timeout=MOUNT_TIMEOUT,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            detail = (getattr(e, "stderr", None) or str(e)).strip()
            raise MountError(f"Failed to mount {device} on {mount_point}: {detail}") from e

        logger.debug(f"Mounted {device} on {mount_point}")
        try:
            yield mount_point
        finally:
            _unmount(mount_point)
    finally:
        try:
            mount_point.rmdir()
        except OSError as e:
            logger.warning(f"Could not remove mount point {mount_point}: {e}")


def _unmount(mount_point: Path) -> None:
    try:
        run_command(["umount", str(mount_point)], timeout=MOUNT_TIMEOUT)
        logger.debug(f"Unmounted {mount_point}")
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        logger.warning(f"Failed to unmount {mount_point}: {e}")
