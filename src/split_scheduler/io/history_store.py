"""
JSONL-based storage for training logs, nutrition logs and programs.

Handles reading, writing, and managing the data files in one directory.
"""

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.models import DesignerProgram, NutritionDayLog, SmartProgram, TrainingLog
from .serializers import (
    ValidationError,
    designer_program_to_dict,
    dict_to_designer_program,
    dict_to_nutrition_log,
    dict_to_smart_program,
    dict_to_training_log,
    json_line_to_dict,
    nutrition_log_to_dict,
    smart_program_to_dict,
    to_json_line,
    training_log_to_dict,
)

T = TypeVar("T")

TRAINING_LOGS_FILE = "training_logs.jsonl"
NUTRITION_LOGS_FILE = "nutrition_logs.jsonl"
PROGRAMS_FILE = "programs.jsonl"


class HistoryStore:
    """
    Manages user data stored in JSONL format.

    The data directory contains:
    - training_logs.jsonl: one TrainingLog per line
    - nutrition_logs.jsonl: one NutritionDayLog per line
    - programs.jsonl: one DesignerProgram per line
    - smart_program_<user>.json: the user's current generated program

    Logs are keyed by id; saving a log with a known id replaces it.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.training_logs_path = self.data_dir / TRAINING_LOGS_FILE
        self.nutrition_logs_path = self.data_dir / NUTRITION_LOGS_FILE
        self.programs_path = self.data_dir / PROGRAMS_FILE

    def init(self) -> None:
        """
        Create the data directory and empty files if they don't exist.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.training_logs_path, self.nutrition_logs_path, self.programs_path):
            if not path.exists():
                path.touch()

    def _read_records(self, path: Path, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        """Parse every non-empty line of a JSONL file; a missing file is empty."""
        if not path.exists():
            return []

        records: list[T] = []
        with open(path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(parse(json_line_to_dict(line)))
                except ValidationError as e:
                    raise ValidationError(f"Error parsing line {line_num} in {path}: {e}") from e
        return records

    def _write_records(self, path: Path, records: list[dict[str, Any]]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(to_json_line(record) + "\n")

    # -------------------------------------------------------------------------
    # Training logs
    # -------------------------------------------------------------------------

    def _all_logs(self) -> list[TrainingLog]:
        return self._read_records(self.training_logs_path, dict_to_training_log)

    def list_logs(self, user_id: str) -> list[TrainingLog]:
        """
        Load all training logs of a user.

        Returns:
            List of TrainingLog, sorted by date

        Raises:
            ValidationError: If a line cannot be parsed
        """
        logs = [log for log in self._all_logs() if log.user_id == user_id]
        logs.sort(key=lambda log: log.date)
        return logs

    def get_log(self, log_id: str) -> TrainingLog | None:
        """Return the log with this id, or None."""
        for log in self._all_logs():
            if log.log_id == log_id:
                return log
        return None

    def get_log_by_date(self, user_id: str, date: str) -> TrainingLog | None:
        """Return the user's log for a date, or None."""
        for log in self._all_logs():
            if log.user_id == user_id and log.date == date:
                return log
        return None

    def save_log(self, log: TrainingLog) -> None:
        """
        Insert or replace a log (matched by log_id).

        Args:
            log: Log to save
        """
        logs = self._all_logs()
        for i, existing in enumerate(logs):
            if existing.log_id == log.log_id:
                logs[i] = log
                break
        else:
            logs.append(log)
        logs.sort(key=lambda l: (l.date, l.user_id))
        self._write_records(self.training_logs_path, [training_log_to_dict(l) for l in logs])

    def delete_log(self, log_id: str) -> None:
        """
        Delete a log by id.

        Raises:
            LookupError: If no log has this id
        """
        logs = self._all_logs()
        kept = [log for log in logs if log.log_id != log_id]
        if len(kept) == len(logs):
            raise LookupError(f"Log not found: {log_id}")
        self._write_records(self.training_logs_path, [training_log_to_dict(l) for l in kept])

    # -------------------------------------------------------------------------
    # Designer programs
    # -------------------------------------------------------------------------

    def _all_programs(self) -> list[DesignerProgram]:
        return self._read_records(self.programs_path, dict_to_designer_program)

    def list_programs(self, author_id: str) -> list[DesignerProgram]:
        """Designer programs authored by a user, in save order."""
        return [p for p in self._all_programs() if p.author_id == author_id]

    def get_program(self, program_id: str) -> DesignerProgram | None:
        for program in self._all_programs():
            if program.program_id == program_id:
                return program
        return None

    def save_program(self, program: DesignerProgram) -> None:
        """Insert or replace a designer program (matched by program_id)."""
        programs = self._all_programs()
        for i, existing in enumerate(programs):
            if existing.program_id == program.program_id:
                programs[i] = program
                break
        else:
            programs.append(program)
        self._write_records(self.programs_path, [designer_program_to_dict(p) for p in programs])

    def delete_program(self, program_id: str) -> None:
        """
        Delete a designer program by id.

        Raises:
            LookupError: If no program has this id
        """
        programs = self._all_programs()
        kept = [p for p in programs if p.program_id != program_id]
        if len(kept) == len(programs):
            raise LookupError(f"Program not found: {program_id}")
        self._write_records(self.programs_path, [designer_program_to_dict(p) for p in kept])

    # -------------------------------------------------------------------------
    # Generated program (one per user, superseded on regeneration)
    # -------------------------------------------------------------------------

    def smart_program_path(self, user_id: str) -> Path:
        return self.data_dir / f"smart_program_{user_id}.json"

    def load_smart_program(self, user_id: str) -> SmartProgram | None:
        """
        Load the user's current generated program.

        Returns:
            SmartProgram, or None if none was generated yet

        Raises:
            ValidationError: If the file is invalid
        """
        path = self.smart_program_path(user_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e
        return dict_to_smart_program(data)

    def save_smart_program(self, user_id: str, program: SmartProgram) -> None:
        """Store a generated program, replacing the previous one."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.smart_program_path(user_id), "w", encoding="utf-8") as f:
            json.dump(smart_program_to_dict(program), f, indent=2, ensure_ascii=False)

    # -------------------------------------------------------------------------
    # Nutrition logs
    # -------------------------------------------------------------------------

    def _all_nutrition_logs(self) -> list[NutritionDayLog]:
        return self._read_records(self.nutrition_logs_path, dict_to_nutrition_log)

    def list_nutrition_logs(self, user_id: str) -> list[NutritionDayLog]:
        """Nutrition logs of a user, sorted by date."""
        logs = [log for log in self._all_nutrition_logs() if log.user_id == user_id]
        logs.sort(key=lambda log: log.date)
        return logs

    def get_nutrition_log_by_date(self, user_id: str, date: str) -> NutritionDayLog | None:
        for log in self._all_nutrition_logs():
            if log.user_id == user_id and log.date == date:
                return log
        return None

    def save_nutrition_log(self, log: NutritionDayLog) -> None:
        """Insert or replace a nutrition log (matched by log_id)."""
        logs = self._all_nutrition_logs()
        for i, existing in enumerate(logs):
            if existing.log_id == log.log_id:
                logs[i] = log
                break
        else:
            logs.append(log)
        logs.sort(key=lambda l: (l.date, l.user_id))
        self._write_records(self.nutrition_logs_path, [nutrition_log_to_dict(l) for l in logs])


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    Returns:
        ~/.split-scheduler
    """
    return Path.home() / ".split-scheduler"
