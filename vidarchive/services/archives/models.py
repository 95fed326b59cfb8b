"""Data models for archive records returned by the recording service."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .errors import ArchiveClientError, ArchiveOperationError

if TYPE_CHECKING:
    from .manager import Archives


class ArchiveOptions(BaseModel):
    """Options accepted when starting an archive."""

    name: str = Field("", description="Label used to identify the archive")

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_str(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @classmethod
    def coerce(
        cls, options: Union["ArchiveOptions", Mapping[str, Any], None]
    ) -> "ArchiveOptions":
        """Build options from an ArchiveOptions, a mapping or None."""
        if options is None:
            return cls()
        if isinstance(options, ArchiveOptions):
            return options
        return cls(name=options.get("name"))


class Archive(BaseModel):
    """Metadata for one recording, as reported by the service.

    Field values are passed through as received; ``status`` is one of the
    service's lifecycle strings (started, stopped, available, uploaded,
    deleted, failed...) and is not validated here.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    status: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    created_at: Optional[int] = Field(
        None, alias="createdAt", description="Creation time, epoch milliseconds"
    )
    duration: Optional[float] = Field(None, description="Length in seconds")
    name: Optional[str] = None
    url: Optional[str] = Field(None, description="Download URL once available")
    partner_id: Optional[str] = Field(None, alias="partnerId")
    size: Optional[int] = Field(None, description="File size in bytes")
    reason: Optional[str] = None
    has_audio: Optional[bool] = Field(None, alias="hasAudio")
    has_video: Optional[bool] = Field(None, alias="hasVideo")
    output_mode: Optional[str] = Field(None, alias="outputMode")

    _manager: Optional["Archives"] = PrivateAttr(default=None)

    @field_validator("partner_id", mode="before")
    @classmethod
    def _partner_id_as_str(cls, value: Any) -> Any:
        # The service reports partnerId as a number
        return str(value) if isinstance(value, int) else value

    @classmethod
    def from_json(
        cls,
        payload: Mapping[str, Any],
        manager: Optional["Archives"] = None,
        operation: str = "retrieve",
    ) -> "Archive":
        """Build a record from a service payload, bound to ``manager``.

        Raises:
            ArchiveOperationError: The payload is not a usable archive record
        """
        try:
            archive = cls.model_validate(dict(payload))
        except (TypeError, ValueError, ValidationError) as e:
            raise ArchiveOperationError(
                f"The service returned an unreadable archive record: {e}", operation
            ) from e
        archive._manager = manager
        return archive

    @property
    def created_at_datetime(self) -> Optional[datetime]:
        """Creation time as an aware UTC datetime."""
        if self.created_at is None:
            return None
        return datetime.fromtimestamp(self.created_at / 1000, tz=timezone.utc)

    def to_json(self) -> dict[str, Any]:
        """Return the record in the service's wire format."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def _bound_manager(self) -> "Archives":
        if self._manager is None:
            raise ArchiveClientError(f"Archive {self.id} is not bound to a manager")
        return self._manager

    def stop(self) -> "Archive":
        """Stop this archive and return the refreshed record.

        The record itself is left unchanged.
        """
        return self._bound_manager().stop_by_id(self.id)

    def delete(self) -> bool:
        """Delete this archive. Returns True on a 2xx response."""
        return self._bound_manager().delete_by_id(self.id)


class ArchiveList(Sequence):
    """A page of archives plus the total number held by the service.

    Attributes:
        total: Number of archives the service holds for this API key,
            independent of how many were returned in this page
    """

    def __init__(self, archives: Iterable[Archive], total: int):
        self._archives: tuple[Archive, ...] = tuple(archives)
        self.total = total

    @classmethod
    def from_json(
        cls, payload: Mapping[str, Any], manager: Optional["Archives"] = None
    ) -> "ArchiveList":
        """Build a list from a ``{"count": ..., "items": [...]}`` payload."""
        if not isinstance(payload, Mapping):
            raise ArchiveOperationError(
                f"The service returned an unreadable archive list: {payload!r}", "list"
            )
        items = payload.get("items") or []
        archives = [Archive.from_json(item, manager, "list") for item in items]
        total = payload.get("count")
        return cls(archives, total if total is not None else len(archives))

    @overload
    def __getitem__(self, index: int) -> Archive: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Archive, ...]: ...

    def __getitem__(self, index):
        return self._archives[index]

    def __len__(self) -> int:
        return len(self._archives)

    def __repr__(self) -> str:
        return f"ArchiveList(total={self.total}, archives={list(self._archives)!r})"
