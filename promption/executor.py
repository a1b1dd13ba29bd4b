from pathlib import Path
from typing import Optional, Protocol

from promption.errors import ProjectionFileError
from promption.models import PlannedWrite, WriteMode


class WriteHandler(Protocol):
    def handle(self, write: PlannedWrite) -> None: ...


class WriteTextHandler:
    def handle(self, write: PlannedWrite) -> None:
        write.path.parent.mkdir(parents=True, exist_ok=True)
        write.path.write_text(write.content, encoding="utf-8")


class AppendTextHandler:
    def handle(self, write: PlannedWrite) -> None:
        write.path.parent.mkdir(parents=True, exist_ok=True)
        with write.path.open("a", encoding="utf-8") as handle:
            handle.write(write.content)


class WriteExecutor:
    """Apply planned writes in order.

    The first failure aborts the batch; files written before it stay on disk.
    """

    def __init__(
        self, handlers: Optional[dict[WriteMode, WriteHandler]] = None
    ) -> None:
        self.handlers: dict[WriteMode, WriteHandler] = handlers or {
            WriteMode.WRITE: WriteTextHandler(),
            WriteMode.APPEND: AppendTextHandler(),
        }

    def execute(self, planned: list[PlannedWrite]) -> list[Path]:
        written: list[Path] = []
        for write in planned:
            handler = self.handlers.get(write.mode)
            if handler is None:
                raise ProjectionFileError(
                    write.path, f"Unsupported write mode: {write.mode.value}"
                )
            try:
                handler.handle(write)
            except OSError as exc:
                raise ProjectionFileError(
                    write.path, f"Could not write file ({exc.strerror or exc})"
                ) from exc
            written.append(write.path)
        return written
