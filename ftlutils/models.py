"""Result models for ftlutils commands."""

from pydantic import BaseModel


class KeyEditResult(BaseModel):
    file: str
    key: str
    value: str | None = None
    changed: bool = True
    removed: int | None = None


class PidFileResult(BaseModel):
    pid_file: str


class PidResult(BaseModel):
    pid_file: str
    pid: int


class ConfigValueResult(BaseModel):
    key: str
    value: str | None = None
