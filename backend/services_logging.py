"""
Structured log helpers.
Request logs are emitted as single-line JSON so they can be grepped or shipped as-is.
"""
import json
from typing import Any, Dict


def structured_log_line(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)
