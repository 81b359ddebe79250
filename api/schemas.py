"""API-specific response models for list views and aggregated data."""

from datetime import date
from pydantic import BaseModel
from typing import List, Optional

from analytics.reports import ReportRow
from analytics.simulator import PlayerProjection, TeamProjection
from services.email import EmailResult


class RoundSummaryResponse(BaseModel):
    """Lightweight round for list views."""
    id: str
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    date_of_round: Optional[date] = None
    total_strokes: Optional[int] = None
    total_par: Optional[int] = None
    score_to_par: Optional[int] = None
    holes_played: Optional[int] = None
    weather: Optional[str] = None
    temp_c: Optional[float] = None
    wind_speed_kph: Optional[float] = None


class CourseSummaryResponse(BaseModel):
    """Course for card/list views."""
    id: str
    name: Optional[str] = None
    location: Optional[str] = None
    par: Optional[int] = None
    rating: Optional[float] = None
    slope: Optional[int] = None
    course_type: Optional[str] = None
    tee_color: Optional[str] = None
    total_holes: int = 0


class BreakdownRow(BaseModel):
    label: str
    avg_score: float
    round_count: int
    color: str


class EnvironmentalBreakdownResponse(BaseModel):
    by_course_type: List[BreakdownRow]
    by_weather: List[BreakdownRow]


class DistributionRow(BaseModel):
    key: str
    label: str
    color: str
    count: int
    percentage: float


class ScoringStatsResponse(BaseModel):
    par3_avg: Optional[float] = None
    par4_avg: Optional[float] = None
    par5_avg: Optional[float] = None
    par3_rating: Optional[str] = None
    par4_rating: Optional[str] = None
    par5_rating: Optional[str] = None
    distribution: List[DistributionRow]
    total_holes: int


class VenuePerformanceRow(BaseModel):
    course_name: str
    avg_score: float
    round_count: int


class PerformanceSummaryResponse(BaseModel):
    average_score: Optional[float] = None
    best_score: Optional[int] = None
    worst_score: Optional[int] = None
    total_rounds: int
    trend: Optional[str] = None


class PlayerStatsResponse(BaseModel):
    """Everything the personal statistics page shows."""
    player_id: str
    full_name: str
    handicap_index: Optional[float] = None
    performance: PerformanceSummaryResponse
    scoring: ScoringStatsResponse
    environment: EnvironmentalBreakdownResponse
    venues: List[VenuePerformanceRow]


class LeaderboardEntry(BaseModel):
    rank: int
    player_id: str
    full_name: str
    handicap_index: Optional[float] = None
    rounds_played: int
    best_score: Optional[int] = None
    avg_score: Optional[float] = None
    trend: Optional[str] = None


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntry]
    ranked_players: int
    total_rounds: int
    best_score: Optional[int] = None


class RankingEntry(BaseModel):
    rank: int
    player_id: str
    full_name: str
    handicap_index: Optional[float] = None
    home_club: Optional[str] = None
    category: Optional[str] = None


class RankingsResponse(BaseModel):
    rankings: List[RankingEntry]
    players: int
    best_handicap: Optional[float] = None
    average_handicap: Optional[float] = None


class SimulatorResponse(BaseModel):
    players: List[PlayerProjection]
    selected: List[str]
    team: TeamProjection


class ReportInsights(BaseModel):
    total_rounds: int
    avg_score: Optional[float] = None
    best_score: Optional[int] = None
    worst_score: Optional[int] = None
    unique_players: int
    avg_temp: Optional[float] = None
    avg_wind: Optional[float] = None


class ReportResponse(BaseModel):
    rows: List[ReportRow]
    insights: ReportInsights
    filename: str


class GoalResponse(BaseModel):
    id: str
    type: str
    label: str
    target_value: float
    current_value: Optional[float] = None
    progress: float
    is_met: bool
    color: str


class DigestRunResponse(BaseModel):
    success: bool
    message: str
    total_rounds: int
    player_of_the_week: Optional[str] = None
    squad_stats: int
    recipients: int
    sent: int
    failed: int
    results: List[EmailResult] = []
