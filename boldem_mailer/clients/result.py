"""Outcome values: `TokenManager.acquire()` returns `Result[AccessToken]`,
`BoldemTransport.send_with_result()` returns `Result[int]` (recipient count),
both carrying the HTTP status code and raw response body."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Any

T = TypeVar('T')

@dataclass
class Result(Generic[T]):
    ok: bool
    value: T | None = None
    error: str | None = None
    status_code: int | None = None
    raw: Any | None = None

    def __bool__(self) -> bool:
        return self.ok

def success(val: T, *, raw: Any | None = None, status_code: int | None = 200) -> Result[T]:
    return Result(ok=True, value=val, status_code=status_code, raw=raw)

def failure(msg: str, *, status_code: int | None = None, raw: Any | None = None) -> Result[Any]:
    return Result(ok=False, error=msg, status_code=status_code, raw=raw)

__all__ = ['Result','success','failure']
