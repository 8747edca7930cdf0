from typing import Protocol, runtime_checkable


@runtime_checkable
class ExportLogPort(Protocol):
    """Protocol for the append-only export task log (progress side channel)."""
    
    def log(self, message: str, cause: BaseException | None = None) -> None:
        """
        Append a log entry.
        
        Args:
            message: Human-readable progress or failure message
            cause: Exception associated with a failure entry (optional)
        """
        ...
