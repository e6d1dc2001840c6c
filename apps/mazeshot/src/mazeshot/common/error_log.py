from __future__ import annotations

import logging
import time
import traceback
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class ErrorItem:
    ts: float
    context: str
    message: str
    tb: str | None
    count: int = 1

    def summary_line(self) -> str:
        base = f"{self.context}: {self.message}".strip()
        if self.count > 1:
            base += f" (x{self.count})"
        return base


class ErrorLog:
    """
    Bounded error feed for a headless run.

    A failure that repeats back to back (one tick raising every frame) stays a single
    item whose counter goes up. Only new items reach `logging`; every occurrence is
    appended to `persist_path` when one is given.
    """

    def __init__(self, *, max_items: int = 30, persist_path: Path | None = None) -> None:
        self._max_items = max(1, int(max_items))
        self._items: list[ErrorItem] = []
        self._persist_path = Path(persist_path) if persist_path is not None else None

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> list[ErrorItem]:
        return list(self._items)

    def log_message(self, *, context: str, message: str) -> None:
        self.record(context=context, message=str(message or "").strip() or "Unknown error", tb=None)

    def log_exception(self, *, context: str, exc: BaseException) -> None:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self.record(context=context, message=f"{type(exc).__name__}: {exc}".strip(), tb=tb)

    def record(self, *, context: str, message: str, tb: str | None) -> ErrorItem:
        context = str(context or "unknown")
        last = self._items[-1] if self._items else None
        if last is not None and (last.context, last.message) == (context, message):
            last.ts = time.time()
            last.count += 1
            item = last
        else:
            item = ErrorItem(ts=time.time(), context=context, message=message, tb=tb)
            self._items.append(item)
            del self._items[: -self._max_items]
            if tb:
                logger.error("%s: %s\n%s", context, message, tb.rstrip())
            else:
                logger.error("%s: %s", context, message)
        self._persist(item)
        return item

    def _persist(self, item: ErrorItem) -> None:
        p = self._persist_path
        if p is None:
            return
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(item.ts))
        text = f"[{stamp}] {item.context}: {item.message}\n"
        if item.tb and item.tb.strip():
            text += item.tb.rstrip() + "\n"
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with p.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            logger.warning("Could not write error log %s: %s", p, exc)


__all__ = ["ErrorItem", "ErrorLog"]
