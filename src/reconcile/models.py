"""Options, report and row-level errors for reconciliation runs."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from logging import Logger

from rich.markup import escape

from common.constants import DEFAULT_ALLOWED_EXTENSIONS, TIMESTAMP_FORMAT


class UpsertPolicy(str, Enum):
    """How an existing list item is treated when its title reappears."""

    UNCONDITIONAL = "unconditional"
    CHANGE_GATED = "change_gated"


class SyncMode(str, Enum):
    """Reconciliation strategy."""

    PATCH = "patch"
    REBUILD = "rebuild"


class MalformedTimestamp(ValueError):
    """A LastModified value does not match TIMESTAMP_FORMAT."""

    pass


def parse_timestamp(value: str | None, side: str) -> datetime:
    """Parse a list timestamp.

    Args:
        value: Timestamp string, e.g. '01/02/2024 00:00:00'
        side: 'existing' or 'incoming', used in the error message

    Raises:
        MalformedTimestamp: If the value is empty or in another format
    """
    try:
        return datetime.strptime((value or "").strip(), TIMESTAMP_FORMAT)
    except ValueError as e:
        raise MalformedTimestamp(
            f"Cannot parse {side} timestamp {value!r} (expected {TIMESTAMP_FORMAT})"
        ) from e


@dataclass
class SyncOptions:
    """Behaviour switches for one run.

    Attributes:
        upsert_policy: Overwrite always, or only when the incoming timestamp is newer
        mode: Diff-and-patch, or clear the list and rebuild it
        allowed_extensions: Lowercase suffixes a document URL must end with
        dry_run: Compute the report without writing to the list
    """

    upsert_policy: UpsertPolicy | str = UpsertPolicy.CHANGE_GATED
    mode: SyncMode | str = SyncMode.PATCH
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS
    dry_run: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.upsert_policy, str):
            try:
                self.upsert_policy = UpsertPolicy(self.upsert_policy.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported upsert policy: {self.upsert_policy}. "
                    f"Must be one of: {', '.join(p.value for p in UpsertPolicy)}"
                ) from e

        if isinstance(self.mode, str):
            try:
                self.mode = SyncMode(self.mode.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported sync mode: {self.mode}. "
                    f"Must be one of: {', '.join(m.value for m in SyncMode)}"
                ) from e

        if not self.allowed_extensions:
            raise ValueError("At least one allowed extension is required")
        self.allowed_extensions = tuple(ext.lower() for ext in self.allowed_extensions)


@dataclass
class RowError:
    """A failure confined to one document or list item."""

    title: str
    stage: str
    message: str


@dataclass
class SyncReport:
    """Counts and errors from one reconciliation run."""

    target_list: str
    started_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    completed_at: str = ""
    dry_run: bool = False
    results_seen: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    deleted: int = 0
    skipped_extension: int = 0
    skipped_department: int = 0
    deleted_titles: list[str] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    @property
    def upserts(self) -> int:
        return self.created + self.updated

    @property
    def deletions(self) -> int:
        return self.deleted

    @property
    def skipped(self) -> int:
        return self.skipped_extension + self.skipped_department

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_error(self, title: str, stage: str, message: str) -> None:
        self.errors.append(RowError(title=title, stage=stage, message=message))

    def finish(self) -> None:
        self.completed_at = datetime.now().isoformat(timespec="seconds")

    def to_dict(self) -> dict:
        data = asdict(self)
        data.update(upserts=self.upserts, deletions=self.deletions, skipped=self.skipped)
        return data

    def log_summary(self, logger: Logger) -> None:
        """Log a human-readable summary of the run."""
        prefix = "(dry run) " if self.dry_run else ""
        logger.info(f"{prefix}Reconciliation of [bold]{escape(self.target_list)}[/bold]")
        logger.info(f"  Search results:       {self.results_seen}")
        logger.info(f"  Created:              {self.created}")
        logger.info(f"  Updated:              {self.updated}")
        logger.info(f"  Unchanged:            {self.unchanged}")
        logger.info(f"  Deleted:              {self.deleted}")
        logger.info(f"  Skipped (extension):  {self.skipped_extension}")
        logger.info(f"  Skipped (department): {self.skipped_department}")
        if self.errors:
            logger.error(f"  Errors:               {len(self.errors)}")
            for row_error in self.errors:
                logger.error(
                    f"    {row_error.stage}: {escape(row_error.title)}: "
                    f"{escape(row_error.message)}"
                )
