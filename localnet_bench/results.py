from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

from .models import RunRecord


def save_run_record(record: RunRecord, output_folder: Path) -> Optional[Path]:
    """
    Write ``record`` as ``ft_benchmark_<timestamp>.json`` under ``output_folder``.

    Returns the written path, or None if the file could not be written.
    """
    if not record.timestamp:
        record.timestamp = int(time.time())
    output_path = Path(output_folder) / f"ft_benchmark_{record.timestamp}.json"
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as file:
            json.dump(record.to_dict(), file, indent=4)
    except OSError as exc:
        logging.warning("Failed to write run record to %s: %s", output_path, exc)
        return None
    logging.info("Run record saved to %s", output_path)
    return output_path
