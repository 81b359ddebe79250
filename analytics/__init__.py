from .environment import environmental_breakdown, venue_performance
from .leaderboard import build_leaderboard, handicap_rankings, performance_summary, performance_trend
from .reports import ReportFilters, ReportRow, build_report_rows, export_to_csv, report_filename
from .scoring import scoring_distribution, scoring_stats
from .simulator import normalize_score, simulate_team, squad_projections

__all__ = [
    "scoring_stats",
    "scoring_distribution",
    "environmental_breakdown",
    "venue_performance",
    "build_leaderboard",
    "performance_trend",
    "performance_summary",
    "handicap_rankings",
    "normalize_score",
    "squad_projections",
    "simulate_team",
    "ReportFilters",
    "ReportRow",
    "build_report_rows",
    "export_to_csv",
    "report_filename",
]
