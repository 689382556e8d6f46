"""Exception hierarchy for the transcription relay.

Every error raised by this package derives from ``SmartMinutesError`` so the
entrypoint can log failures at one boundary while keeping the specific kind.
"""

from typing import Optional


class SmartMinutesError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, uid: Optional[str] = None) -> None:
        self.uid = uid
        super().__init__(message)

    def __str__(self) -> str:
        if self.uid:
            return f"[uid={self.uid}] {super().__str__()}"
        return super().__str__()


class MalformedTokenSequence(SmartMinutesError):
    """Raised when word tokens handed to the assembler break its contract."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        self.index = index
        if index is not None:
            message = f"token {index}: {message}"
        super().__init__(message)


class MalformedRuleTable(SmartMinutesError):
    """Raised when a correction table entry lacks a pattern or replacement."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        self.index = index
        if index is not None:
            message = f"rule {index}: {message}"
        super().__init__(message)


class TranscodeError(SmartMinutesError):
    """Raised when audio cannot be decoded or re-encoded."""

    def __init__(
        self,
        message: str,
        uid: Optional[str] = None,
        source_format: Optional[str] = None,
    ) -> None:
        self.source_format = source_format
        super().__init__(message, uid)


class TranscriptionError(SmartMinutesError):
    """Raised when the speech recognition job fails or times out."""

    def __init__(
        self, message: str, uid: Optional[str] = None, gcs_uri: Optional[str] = None
    ) -> None:
        self.gcs_uri = gcs_uri
        super().__init__(message, uid)


class SummarisationError(SmartMinutesError):
    """Raised when the generative model cannot produce a summary."""

    def __init__(
        self, message: str, uid: Optional[str] = None, template: Optional[str] = None
    ) -> None:
        self.template = template
        super().__init__(message, uid)


class StorageError(SmartMinutesError):
    """Raised when a Cloud Storage read or write fails."""

    def __init__(
        self, message: str, uid: Optional[str] = None, operation: Optional[str] = None
    ) -> None:
        self.operation = operation
        super().__init__(message, uid)
