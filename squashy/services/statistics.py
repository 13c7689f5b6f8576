from typing import Dict, Optional

from squashy.core.media_types import MediaKind


# ============================================================================
# Statistics Tracker
# ============================================================================

PROCESSED = "processed"
SKIPPED = "skipped"
UNSUPPORTED = "unsupported"
ERROR = "error"

_COUNTERS = {PROCESSED: "processed", SKIPPED: "skipped", UNSUPPORTED: "unsupported", ERROR: "errors"}


class StatisticsTracker:
    """Tracks the outcome of one batch run. Nothing is persisted."""

    def __init__(self):
        self.stats = {
            "total_files": 0,
            "processed": 0,
            "skipped": 0,
            "unsupported": 0,
            "errors": 0,
            "total_original_size": 0,
            "total_compressed_size": 0,
            "space_saved": 0,
            "total_processing_time": 0.0,
            "processed_by_kind": {kind.value: 0 for kind in MediaKind if kind is not MediaKind.UNSUPPORTED},
            "files": [],
        }

    def record(
        self,
        name: str,
        status: str,
        kind: Optional[MediaKind] = None,
        original_size: int = 0,
        compressed_size: int = 0,
        processing_time: float = 0.0,
        message: Optional[str] = None,
    ) -> Dict:
        """
        Record one file's outcome.

        Sizes only count towards the totals for processed files.

        Returns:
            The per-file record that was appended
        """
        if status not in _COUNTERS:
            raise ValueError(f"Unknown status: {status}")

        self.stats["total_files"] += 1
        self.stats[_COUNTERS[status]] += 1

        space_saved = original_size - compressed_size if status == PROCESSED else 0
        ratio = (space_saved / original_size * 100) if status == PROCESSED and original_size > 0 else 0.0

        if status == PROCESSED:
            self.stats["total_original_size"] += original_size
            self.stats["total_compressed_size"] += compressed_size
            self.stats["space_saved"] += space_saved
            if kind is not None and kind.value in self.stats["processed_by_kind"]:
                self.stats["processed_by_kind"][kind.value] += 1

        file_info = {
            "name": name,
            "kind": kind.value if kind is not None else None,
            "status": status,
            "original_size": original_size,
            "compressed_size": compressed_size,
            "space_saved": space_saved,
            "compression_ratio": ratio,
            "processing_time": processing_time,
        }
        if message:
            file_info["message"] = message
        self.stats["files"].append(file_info)
        return file_info

    def set_total_processing_time(self, total_time: float) -> None:
        self.stats["total_processing_time"] = total_time

    @property
    def has_errors(self) -> bool:
        return self.stats["errors"] > 0

    def get_stats(self) -> Dict:
        return self.stats
