import json
from typing import Any

from pydantic import BaseModel


def format_output(data: Any, output_format: str = "plain") -> str:
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if output_format == "json":
        return json.dumps(data, indent=2)
    return format_plain(data)


def format_plain(data: Any) -> str:
    if data is None:
        return ""

    if isinstance(data, str):
        return data

    if isinstance(data, dict):
        if "removed" in data and data["removed"] is not None:
            count = data["removed"]
            if count == 0:
                return f"{data['key']} not found in {data['file']}"
            return f"Removed {count} line(s) for {data['key']} from {data['file']}"

        if "file" in data and "key" in data:
            if data.get("value") is not None:
                return f"{data['key']}={data['value']}"
            if data.get("changed"):
                return f"Added {data['key']} to {data['file']}"
            return f"{data['key']} already present in {data['file']}"

        if "pid" in data:
            return str(data["pid"])

        if "pid_file" in data:
            return data["pid_file"]

        if "key" in data:
            return data.get("value") or ""

        return json.dumps(data, indent=2)

    if isinstance(data, list):
        return "\n".join(format_plain(item) for item in data)

    return str(data)
