"""What would the coach tell you TODAY (2026-10-18)?

Runs the analytics engine on an in-memory training log (no database)
and prints readiness, per-exercise analysis and the ranked insights.

Usage:
    python scripts/simulate_today.py
"""

import datetime
import sys
from collections import defaultdict
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.coach.insights import generate_insights
from app.coach.one_rm import estimate_one_rep_max
from app.coach.plateau import analyze_plateau
from app.coach.progression import generate_progression
from app.coach.readiness import analyze_readiness
from app.schemas.daily_metrics import DailyMetricsRecord
from app.schemas.performance import PerformanceSampleBase
from app.schemas.progression import ProgressionSettingsBase

TODAY = datetime.date(2026, 10, 18)

# (date, exercise, weight kg, reps, sets, rpe)
RAW_SETS = [
    ("2026-09-07", "Back Squat", 100, 5, 3, 7.5),
    ("2026-09-10", "Back Squat", 102.5, 5, 3, 7.5),
    ("2026-09-14", "Back Squat", 105, 5, 3, 8.0),
    ("2026-09-17", "Back Squat", 107.5, 5, 3, 8.0),
    ("2026-09-21", "Back Squat", 110, 5, 3, 8.5),
    ("2026-09-24", "Back Squat", 110, 5, 3, 8.5),
    ("2026-09-28", "Back Squat", 110, 5, 3, 9.0),
    ("2026-10-01", "Back Squat", 110, 4, 3, 9.0),
    ("2026-10-05", "Back Squat", 110, 5, 3, 9.0),
    ("2026-10-08", "Back Squat", 110, 4, 3, 9.5),
    ("2026-10-12", "Back Squat", 110, 5, 3, 9.0),
    ("2026-10-15", "Back Squat", 110, 4, 3, 9.5),
    ("2026-09-08", "Bench Press", 70, 5, 3, 7.0),
    ("2026-09-15", "Bench Press", 71.25, 5, 3, 7.0),
    ("2026-09-22", "Bench Press", 72.5, 5, 3, 7.5),
    ("2026-09-29", "Bench Press", 73.75, 5, 3, 7.5),
    ("2026-10-06", "Bench Press", 75, 5, 3, 7.5),
    ("2026-10-13", "Bench Press", 76.25, 5, 3, 7.5),
]

# (date, sleep h, sleep quality, energy, soreness, stress, motivation)
RAW_CHECKINS = [
    ("2026-10-12", 7.5, 7, 7, 4, 4, 8),
    ("2026-10-13", 7.0, 7, 7, 5, 4, 7),
    ("2026-10-14", 6.5, 6, 6, 5, 5, 7),
    ("2026-10-15", 6.5, 6, 6, 6, 5, 6),
    ("2026-10-16", 6.0, 5, 5, 6, 6, 6),
    ("2026-10-17", 6.0, 5, 5, 7, 6, 6),
    ("2026-10-18", 5.5, 4, 5, 7, 7, 5),
]


def load_history():
    history = defaultdict(list)
    for date, exercise, weight, reps, sets, rpe in RAW_SETS:
        history[exercise].append(PerformanceSampleBase(
            exercise_name=exercise, date=datetime.date.fromisoformat(date),
            weight=weight, reps=reps, sets=sets, rpe=rpe,
        ))
    return history


def load_checkins():
    return [
        DailyMetricsRecord(
            date=datetime.date.fromisoformat(date), sleep_hours=sleep, sleep_quality=quality,
            energy_level=energy, soreness_level=soreness, stress_level=stress,
            motivation_level=motivation,
        )
        for date, sleep, quality, energy, soreness, stress, motivation in RAW_CHECKINS
    ]


def main():
    checkins = load_checkins()
    readiness = analyze_readiness(checkins, TODAY)
    settings = ProgressionSettingsBase()

    print()
    print("=" * 65)
    print(f"  RepCoach: {TODAY.strftime('%A %d %B %Y')}")
    print("=" * 65)

    if readiness is not None:
        print(f"  Readiness: {readiness.overall_score:.1f} ({readiness.level.value}), "
              f"baseline {readiness.baseline:.1f}, confidence {readiness.confidence:.2f}")
        for factor in readiness.factors:
            print(f"    {factor.name.value:<11} {factor.score:>6.1f}  {factor.trend.value}")
    print()

    plateaus = []
    progressions = []
    for exercise, history in load_history().items():
        one_rm = estimate_one_rep_max(exercise, history)
        plateau = analyze_plateau(exercise, history, TODAY)
        suggestions = generate_progression(
            exercise, history, one_rm, settings, plateau=plateau, readiness=readiness,
        )
        plateaus.append(plateau)
        progressions.extend(suggestions)

        print(f"  {exercise}")
        if one_rm is not None:
            print(f"    est. 1RM {one_rm.estimate:.1f} kg (confidence {one_rm.confidence:.2f})")
        if plateau.is_detected:
            print(f"    plateau: {plateau.severity.value} {plateau.type.value}, {plateau.duration} sessions")
        for suggestion in suggestions:
            print(f"    {suggestion.type.value}: {suggestion.suggested.weight:g} kg "
                  f"{suggestion.suggested.sets}x{suggestion.suggested.reps} [{suggestion.priority.value}]")
        print()

    print("  " + "-" * 63)
    print("  INSIGHTS:")
    print("  " + "-" * 63)
    for insight in generate_insights(readiness, checkins, plateaus, progressions):
        print(f"  [{insight.priority.value:>8}] {insight.title}")
        print(f"             {insight.message}")
    print()


if __name__ == "__main__":
    main()
