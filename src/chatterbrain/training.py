"""Training helpers for chatterbrain."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

from .brain import Brain
from .config import TrainerConfig
from .logging import get_logger
from .utils.io import iter_entries, save_json

LOGGER = get_logger(__name__)


@dataclass
class TrainingReport:
    lines_seen: int = 0
    lines_learned: int = 0
    total_root_count: int = 0
    source: Optional[str] = None

    @property
    def lines_skipped(self) -> int:
        return self.lines_seen - self.lines_learned

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["lines_skipped"] = self.lines_skipped
        return payload


@dataclass
class Trainer:
    brain: Brain
    config: TrainerConfig = field(default_factory=TrainerConfig)
    history: List[TrainingReport] = field(default_factory=list)

    def learn_lines(self, lines: Iterable[str], source: Optional[str] = None) -> TrainingReport:
        """Learn every line that is neither blank nor a ``#`` comment."""
        report = TrainingReport(source=source)
        for line in iter_entries(lines):
            report.lines_seen += 1
            if self.brain.learn_line(line, self.config.correct_spelling):
                report.lines_learned += 1
        report.total_root_count = self.brain.total_root_count
        self.history.append(report)
        LOGGER.info(
            "Learned %d of %d lines from %s",
            report.lines_learned,
            report.lines_seen,
            source or "input",
        )
        return report

    def learn_file(self, path: Path) -> TrainingReport:
        path = Path(path)
        with path.open("r", encoding="utf-8") as stream:
            return self.learn_lines(stream, source=str(path))

    def save_training_report(self, path: Optional[Path] = None) -> Path:
        path = Path(path or self.config.report_path or "training_report.json")
        payload = {"history": [report.to_dict() for report in self.history], "stats": self.brain.stats().to_dict()}
        save_json(path, payload)
        LOGGER.info("Wrote training report to %s", path)
        return path


__all__ = ["Trainer", "TrainingReport"]
