import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Protocol

from pydantic import TypeAdapter, ValidationError

from models.goal import Goal

log = logging.getLogger(__name__)

_goal_list = TypeAdapter(List[Goal])


class GoalStore(Protocol):
    """Interface for per-player goal persistence."""

    def load(self, user_id: str) -> List[Goal]:
        """All goals for a player, in creation order. Unknown players have none."""
        ...

    def save(self, user_id: str, goals: List[Goal]) -> None:
        """Replace a player's goals."""
        ...


class InMemoryGoalStore:
    def __init__(self):
        self._goals: Dict[str, List[Goal]] = {}

    def load(self, user_id: str) -> List[Goal]:
        return list(self._goals.get(user_id, []))

    def save(self, user_id: str, goals: List[Goal]) -> None:
        self._goals[user_id] = list(goals)


class JsonFileGoalStore:
    """One JSON file per player under `directory`."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, user_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_-]", "_", user_id)
        return self.directory / f"{safe_id}.json"

    def load(self, user_id: str) -> List[Goal]:
        path = self._path(user_id)
        if not path.exists():
            return []
        try:
            return _goal_list.validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            log.error("Error loading goals for %s: %s", user_id, exc)
            return []

    def save(self, user_id: str, goals: List[Goal]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = [goal.model_dump(mode="json") for goal in goals]
        self._path(user_id).write_text(json.dumps(payload, indent=2), encoding="utf-8")
