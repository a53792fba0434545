from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_KB_PER_GB = 1024 * 1024


@dataclass(frozen=True)
class HostSnapshot:
    mem_total_kb: Optional[int]
    disk_free_kb: Optional[int]
    disk_path: str

    @property
    def mem_gb(self) -> Optional[int]:
        if self.mem_total_kb is None:
            return None
        return self.mem_total_kb // _KB_PER_GB

    @property
    def disk_free_gb(self) -> Optional[int]:
        if self.disk_free_kb is None:
            return None
        return self.disk_free_kb // _KB_PER_GB


def parse_meminfo_total_kb(text: str) -> Optional[int]:
    for line in text.splitlines():
        if line.startswith("MemTotal:"):
            return int(line.split()[1])
    return None


def read_mem_total_kb(meminfo: Path = Path("/proc/meminfo")) -> Optional[int]:
    # Best-effort: containers and non-Linux hosts may not expose meminfo.
    try:
        return parse_meminfo_total_kb(meminfo.read_text(encoding="utf-8"))
    except OSError as e:
        logger.warning("Could not read %s: %s", meminfo, e)
        return None


def read_disk_free_kb(path: str = "/") -> Optional[int]:
    try:
        return shutil.disk_usage(path).free // 1024
    except OSError as e:
        logger.warning("Could not read free space of %s: %s", path, e)
        return None


def snapshot_host(*, disk_path: str = "/", meminfo: Path = Path("/proc/meminfo")) -> HostSnapshot:
    return HostSnapshot(
        mem_total_kb=read_mem_total_kb(meminfo),
        disk_free_kb=read_disk_free_kb(disk_path),
        disk_path=disk_path,
    )
