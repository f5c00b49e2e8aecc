# models.py
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Generic, List, Optional, Tuple, TypeVar

from .enums import FailurePolicy, ProcessingStatus

T = TypeVar("T")


@dataclass(frozen=True)
class FewShotExample:
    """One sample exchange prepended to a request."""
    input: str
    output: str

    @classmethod
    def of(cls, input: str, payload: Any) -> "FewShotExample":
        return cls(input=input, output=json.dumps(payload))


@dataclass(frozen=True)
class LLMRequest:
    """A single call to the text-generation service. Value type."""
    system: str
    user_input: str
    examples: Tuple[FewShotExample, ...] = ()

    def cache_key(self) -> str:
        """Canonical serialization; two requests share a key iff they are structurally equal."""
        payload = [self.system, self.user_input, [[ex.input, ex.output] for ex in self.examples]]
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class EpisodeDetails:
    """Extracted episode metadata. season/episode are always in 1..99."""
    series: str
    season: int
    episode: int

    @property
    def season_code(self) -> str:
        return f"S{self.season:02d}"

    @property
    def episode_code(self) -> str:
        return f"S{self.season:02d}E{self.episode:02d}"


@dataclass(frozen=True)
class DirectoryNode:
    """Snapshot of one directory: its files and its child directories."""
    path: Path
    files: Tuple[Path, ...] = ()
    subfolders: Tuple["DirectoryNode", ...] = ()


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the error that prevented it."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def resolve(self, policy: FailurePolicy, default: T) -> T:
        """Value on success; on failure either re-raise or fall back to `default`."""
        if self.ok:
            return self.value  # type: ignore[return-value]
        if policy is FailurePolicy.FAIL_CLOSED:
            return default
        raise self.error  # type: ignore[misc]


async def capture(awaitable: Awaitable[T]) -> Outcome[T]:
    try:
        return Outcome(value=await awaitable)
    except Exception as e:
        return Outcome(error=e)


@dataclass
class RenameAction:
    """Represents a single file system action taken (or planned) by the driver."""
    original_path: Path
    new_path: Optional[Path]
    action_type: str  # 'rename', 'move'
    status: ProcessingStatus = ProcessingStatus.DRY_RUN
    message: Optional[str] = None


@dataclass
class RunSummary:
    """Counters and actions for one driver run."""
    strategy: str
    live: bool = False
    directories_visited: int = 0
    directories_conformant: int = 0
    files_seen: int = 0
    changed: int = 0
    skipped: int = 0
    failed: int = 0
    actions: List[RenameAction] = field(default_factory=list)

    def record(self, action: RenameAction) -> None:
        self.actions.append(action)
        if action.status in (ProcessingStatus.RENAMED, ProcessingStatus.MOVED, ProcessingStatus.DRY_RUN):
            self.changed += 1
        elif action.status is ProcessingStatus.FAILED:
            self.failed += 1
        else:
            self.skipped += 1
