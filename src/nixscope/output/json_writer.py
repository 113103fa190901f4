"""JSON output writer for inspection results."""

import json
from pathlib import Path

from nixscope.session import InspectionResult


def write_inspection(result: InspectionResult, output_path: Path) -> None:
    """Write a full inspection pass to JSON, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)


def load_inspection(input_path: Path) -> dict:
    """Load a previously exported inspection."""
    with open(input_path, "r", encoding="utf-8") as f:
        return json.load(f)
