# llm_renamer/enums.py
from enum import Enum


class Classification(Enum):
    """Categorical judgment of a path, as returned by the classifier."""
    MOVIE = "Movie"
    EPISODE = "Episode"
    UNRELATED = "Unrelated"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, raw) -> "Classification":
        # Accepts the label the model returns, case-insensitively
        if isinstance(raw, str):
            for member in cls:
                if member.value.lower() == raw.strip().lower():
                    return member
        raise ValueError(f"Unknown classification: {raw!r}")


class RenameStrategy(Enum):
    """How the driver rewrites episode paths."""
    FLAT = "flat"       # rename in place: Series SxxEyy.ext
    NESTED = "nested"   # move under Series/Season xx/, keeping the file name

    def __str__(self):
        return self.value


class BatchCheckStrategy(Enum):
    """How a directory of siblings is judged already canonical."""
    REGEX = "regex"
    MODEL = "model"

    def __str__(self):
        return self.value


class FailurePolicy(Enum):
    """What a gating call does with an error."""
    PROPAGATE = "propagate"
    FAIL_CLOSED = "fail_closed"


class ProcessingStatus(Enum):
    """
    Status or reason attached to a single file outcome.
    Used for standardized logging and for the run summary.
    """
    RENAMED = "renamed"
    MOVED = "moved"
    DRY_RUN = "dry_run"
    SKIPPED_NOT_EPISODE = "skipped_not_episode"
    SKIPPED_ALREADY_CORRECT = "skipped_already_correct"
    SKIPPED_CONFLICT = "skipped_conflict"
    FAILED = "failed"

    def __str__(self):
        # Provides a more human-readable version of the enum member name
        return self.name.replace("_", " ").title()
