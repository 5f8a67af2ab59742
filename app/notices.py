"""User-facing notifications raised by the auth gateway and the request board."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Notice:
    level: str      # "success" | "info" | "warning" | "error"
    message: str


@dataclass
class NoticeQueue:
    """Notices waiting to be shown; the UI drains them once per render."""

    items: list[Notice] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.items.append(Notice("success", message))

    def info(self, message: str) -> None:
        self.items.append(Notice("info", message))

    def warning(self, message: str) -> None:
        self.items.append(Notice("warning", message))

    def error(self, message: str) -> None:
        self.items.append(Notice("error", message))

    def drain(self) -> list[Notice]:
        items, self.items = self.items, []
        return items

    def __len__(self) -> int:
        return len(self.items)
