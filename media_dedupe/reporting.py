import csv
import logging
from pathlib import Path
from typing import List, Optional

from .models import FileCandidate, QualityDescriptor, RunStats

REPORT_HEADERS = [
    "Group",
    "Path",
    "Action",
    "Quality",
    "Destination",
]


class ReportGenerator:
    """Collects per-file decisions during a run and renders the summary."""

    def __init__(self):
        self.rows: List[list] = []

    def record(self,
               group_name: str,
               candidate: FileCandidate,
               action: str,
               quality: QualityDescriptor,
               destination: Optional[Path] = None):
        self.rows.append([
            group_name,
            str(candidate.path),
            action,
            str(quality),
            str(destination) if destination else "",
        ])

    def write_csv(self, output_csv: Path):
        output_csv.parent.mkdir(parents=True, exist_ok=True)
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(REPORT_HEADERS)
            writer.writerows(self.rows)
        logging.info(f"Report written: {output_csv} ({len(self.rows)} rows)")

    def format_summary(self, stats: RunStats) -> str:
        moved_label = "Files to move:" if stats.simulated else "Files moved:"
        lines = [
            "",
            "=" * 50,
            "                  STATISTICS",
            "=" * 50,
            f"Files scanned:          {stats.files_scanned}",
            f"Duplicate groups found: {stats.groups_found}",
            f"Files kept (best):      {stats.files_kept}",
            f"{moved_label:<24}{stats.files_moved}",
            f"Failures:               {stats.failed}",
            f"Duplicates folder:      {stats.quarantine_root}",
            "=" * 50,
        ]
        if stats.simulated:
            lines += [
                "",
                "This was a DRY RUN - no files were actually moved.",
                "Run without -n flag to perform the actual operation.",
            ]
        return "\n".join(lines)
