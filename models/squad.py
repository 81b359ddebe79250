from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Iterable, List, Optional


class Squad(BaseModel):
    """An administrative grouping of players."""
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str


class SquadMember(BaseModel):
    squad_id: str
    user_id: str


class AdminSquad(BaseModel):
    """Which squads an admin is assigned to view."""
    id: Optional[str] = None
    admin_id: str
    squad_id: str
    created_at: Optional[datetime] = None


def squad_player_ids(squad_id: Optional[str], members: Iterable[SquadMember]) -> List[str]:
    """User ids belonging to a squad, in membership order. No squad selects nobody."""
    if not squad_id:
        return []
    return [m.user_id for m in members if m.squad_id == squad_id]
