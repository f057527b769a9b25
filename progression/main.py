"""Command-line entry point for inspecting and updating a player's progress"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from progression.config import DATA_PATH, LOG_LEVEL, REDIS_URL, validate_config
from progression.models.catalog import Position, SkillCategory, SkillLevel
from progression.models.profile import PlayerProfile
from progression.services.container import ServiceContainer
from progression.services.progress_service import ProgressStore
from progression.storage.snapshot_store import (
    InMemoryStorage,
    JsonFileStorage,
    RedisSnapshotStorage,
    SnapshotStorage,
)

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Player progression engine")
    parser.add_argument("--user", required=True, help="Player id")
    parser.add_argument(
        "--storage",
        choices=["file", "redis", "memory"],
        default="file",
        help="Snapshot backend (default: file)",
    )
    parser.add_argument("--data-path", type=Path, default=DATA_PATH, help="Root for file storage")
    parser.add_argument("--redis-url", default=REDIS_URL, help="Redis URL for redis storage")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show the current snapshot and level progress")

    drill = sub.add_parser("complete-drill", help="Record a completed drill")
    drill.add_argument("drill_id")
    drill.add_argument("minutes", type=int)

    workout = sub.add_parser("complete-workout", help="Record a completed workout")
    workout.add_argument("workout_id")
    workout.add_argument("minutes", type=int)
    workout.add_argument("xp", type=int)

    enroll = sub.add_parser("enroll", help="Enroll in a training program")
    enroll.add_argument("program_id")

    unenroll = sub.add_parser("unenroll", help="Leave a training program")
    unenroll.add_argument("program_id")

    sub.add_parser("skills", help="Show mastery progress for every skill path")
    sub.add_parser("programs", help="Show enrolled programs")

    daily = sub.add_parser("daily-workout", help="Show today's recommended workout")
    daily.add_argument("--position", choices=[p.value for p in Position])
    daily.add_argument("--goal", action="append", choices=[c.value for c in SkillCategory], default=[])
    daily.add_argument("--skill-level", choices=[s.value for s in SkillLevel])

    sub.add_parser("reset-week", help="Zero this week's counters")
    sub.add_parser("reset-all", help="Discard all progress")

    return parser


def build_storage(args: argparse.Namespace) -> SnapshotStorage:
    if args.storage == "redis":
        return RedisSnapshotStorage(args.redis_url)
    if args.storage == "memory":
        return InMemoryStorage()
    return JsonFileStorage(args.data_path)


def profile_from_args(args: argparse.Namespace) -> Optional[PlayerProfile]:
    if args.command != "daily-workout":
        return None
    return PlayerProfile(
        user_id=args.user,
        position=args.position,
        goals=args.goal,
        skill_level=args.skill_level,
    )


def print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


async def run_command(store: ProgressStore, args: argparse.Namespace) -> int:
    """Execute one CLI command; returns the process exit code"""
    if args.command == "status":
        print_json({
            "snapshot": store.snapshot.to_document(),
            "xp_to_next_level": store.xp_to_next_level,
            "level_progress_percent": round(store.level_progress_percent, 1),
        })
        return 0

    if args.command == "skills":
        print_json([
            {
                **progress.model_dump(mode="json"),
                "next_level_unlocked": store.is_skill_level_unlocked(
                    progress.skill_id, progress.current_level + 1
                ),
                "next_level_pro_locked": store.is_level_pro_locked(progress.current_level + 1),
            }
            for progress in store.get_all_skills_progress()
        ])
        return 0

    if args.command == "programs":
        print_json([
            {"id": d.program.id, "title": d.program.title, "progress": d.progress}
            for d in store.get_enrolled_program_details()
        ])
        return 0

    if args.command == "daily-workout":
        workout = store.daily_workout
        print_json(workout.model_dump(mode="json") if workout else None)
        return 0

    if args.command == "complete-drill":
        result = await store.complete_drill(args.drill_id, args.minutes)
    elif args.command == "complete-workout":
        result = await store.complete_workout(args.workout_id, args.minutes, args.xp)
    elif args.command == "enroll":
        result = await store.enroll_in_program(args.program_id)
    elif args.command == "unenroll":
        result = await store.unenroll_from_program(args.program_id)
    elif args.command == "reset-week":
        result = await store.reset_weekly_progress()
    elif args.command == "reset-all":
        result = await store.reset_all_progress()
    else:
        logger.error(f"Unknown command: {args.command}")
        return 2

    print_json(result.model_dump(mode="json"))
    return 0 if result.success else 1


async def main(argv: Optional[list[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    validate_config()

    container = ServiceContainer(storage=build_storage(args))
    profile = profile_from_args(args)
    try:
        store = await container.progress_store(args.user, profile_provider=lambda: profile)
        return await run_command(store, args)
    finally:
        await container.close()


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
