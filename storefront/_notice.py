"""
Notices — transient, non-blocking messages for the user (toasts).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class NoticeKind(Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    kind: NoticeKind
    message: str


type NoticeSink = Callable[[Notice], None]
"""Receives notices; the UI decides how to show them."""


def ignore_notice(notice: Notice) -> None:
    pass


__all__ = (
    "NoticeKind",
    "Notice",
    "NoticeSink",
    "ignore_notice",
)
