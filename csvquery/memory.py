"""Pre-load check that a file will fit in memory once fully resident."""
import os
from typing import Optional, Tuple

import psutil

from .constants import (DEFAULT_MEM_BUDGET, DEFAULT_SAMPLE_ROWS, GB, MB, OBJECT_OVERHEAD,
                        ROW_OVERHEAD)
from .errors import MemoryBudgetError


def human(n: int) -> str:
    if n >= GB: return f"{n/GB:.1f} GB"
    if n >= MB: return f"{n/MB:.1f} MB"
    return f"{n} B"


def total_ram_bytes() -> int:
    return int(psutil.virtual_memory().total)


def sample_avg_row_bytes(path: str, n: int = DEFAULT_SAMPLE_ROWS) -> Tuple[float, int]:
    """Average byte length over the first n lines, and how many were sampled."""
    total = 0
    rows = 0
    with open(path, "rb") as f:
        for line in f:
            total += len(line)
            rows += 1
            if rows >= n:
                break
    if rows == 0:
        return (0.0, 0)
    return (total / rows, rows)


def check_memory_budget(path: str, mem_pct: float = DEFAULT_MEM_BUDGET,
                        hard_cap_bytes: Optional[int] = None) -> Tuple[bool, str]:
    size = os.stat(path).st_size
    if hard_cap_bytes is not None and size > hard_cap_bytes:
        return (False, f"file {human(size)} > hard cap ({human(hard_cap_bytes)})")

    avg_row, _ = sample_avg_row_bytes(path)
    if avg_row <= 0:
        return (True, "empty file")

    est_rows = size / avg_row
    est_mem = int(size * OBJECT_OVERHEAD + est_rows * ROW_OVERHEAD)
    budget = int(total_ram_bytes() * mem_pct)
    if est_mem <= budget:
        return (True, f"est_mem {human(est_mem)} ≤ budget {human(budget)}")
    return (False, f"est_mem {human(est_mem)} > budget {human(budget)}")


def ensure_fits(path: str, mem_pct: float = DEFAULT_MEM_BUDGET,
                hard_cap_bytes: Optional[int] = None) -> str:
    try:
        fits, why = check_memory_budget(path, mem_pct, hard_cap_bytes)
    except OSError as e:
        # missing/unreadable files are reported by the reader itself
        return f"not checked ({e.strerror})"
    if not fits:
        raise MemoryBudgetError(f"{path} will not fit in memory: {why}")
    return why
