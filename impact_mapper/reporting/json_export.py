"""JSON writers for the scan, impact and graph output contracts."""
import json
from pathlib import Path
from typing import Dict


def dumps(data: Dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_json(data: Dict, output_path: str | Path) -> Path:
    """Write JSON to disk atomically.

    Args:
        data: JSON-serialisable dictionary
        output_path: Destination file

    Returns:
        The resolved destination path
    """
    output_path = Path(output_path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file first for atomic operation
    temp_path = output_path.with_suffix(output_path.suffix + '.tmp')
    with open(temp_path, 'w', encoding='utf-8') as f:
        f.write(dumps(data))

    temp_path.replace(output_path)
    return output_path
