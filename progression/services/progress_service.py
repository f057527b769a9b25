"""
ProgressStore - Progression Business Logic

Single read/write surface over one player's progress snapshot.

Concurrency model:
- Every mutation runs under one asyncio.Lock (single writer), so calls
  issued without awaiting each other are applied one after another
  instead of overwriting each other
- Inside the lock the new snapshot is computed synchronously and
  assigned in memory before the storage write is awaited
- The app-open tracker goes through the same lock

Failures never raise out of the mutation surface: each mutation returns
a MutationResult. A failed storage write keeps the in-memory snapshot
as the source of truth and reports persisted=False.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from progression.catalog.repository import (
    CatalogRepository,
    get_recommended_drills,
    program_progress_percent,
)
from progression.config import PROGRESS_STORAGE_KEY
from progression.exceptions import (
    InvalidInputError,
    MalformedPersistedStateError,
    PersistenceWriteError,
    ProgressionError,
    StorageError,
)
from progression.gamification.daily_workout import generate_daily_workout
from progression.gamification.skill_mastery import (
    get_current_skill_level,
    is_level_pro_locked,
    is_skill_level_unlocked,
)
from progression.gamification.streak_system import new_snapshot, next_streak, normalize
from progression.gamification.xp_system import (
    award_xp,
    level_progress_percent,
    xp_to_next_level,
)
from progression.models.catalog import Drill, SkillCategory
from progression.models.profile import PlayerProfile
from progression.models.progress import (
    DailyWorkout,
    EnrolledProgramDetails,
    MutationResult,
    ProgressSnapshot,
    SkillProgress,
)
from progression.observability import metrics
from progression.storage.snapshot_store import SnapshotStorage
from progression.utils.datetime_helpers import Clock, current_week_start, default_clock, today_key

logger = logging.getLogger(__name__)

ProfileProvider = Callable[[], Optional[PlayerProfile]]

# compute(current, now) -> (new snapshot, result)
MutationFn = Callable[[ProgressSnapshot, datetime], tuple[ProgressSnapshot, MutationResult]]


def parse_snapshot(document: str, key: str = PROGRESS_STORAGE_KEY, user_id: Optional[str] = None) -> ProgressSnapshot:
    """
    Parse a stored document, filling fields missing from older versions

    Raises:
        MalformedPersistedStateError: document is not a valid snapshot
    """
    try:
        data = json.loads(document)
    except json.JSONDecodeError as e:
        raise MalformedPersistedStateError(
            message="Stored progress is not valid JSON",
            key=key,
            user_id=user_id,
            operation="parse_snapshot",
            cause=e,
        )

    if not isinstance(data, dict):
        raise MalformedPersistedStateError(
            message=f"Stored progress is a {type(data).__name__}, expected an object",
            key=key,
            user_id=user_id,
            operation="parse_snapshot",
        )

    try:
        return ProgressSnapshot.model_validate(data)
    except ValidationError as e:
        raise MalformedPersistedStateError(
            message=f"Stored progress failed validation ({e.error_count()} errors)",
            key=key,
            user_id=user_id,
            operation="parse_snapshot",
            cause=e,
        )


def serialize_snapshot(snapshot: ProgressSnapshot) -> str:
    return json.dumps(snapshot.to_document())


class ProgressStore:
    """
    Progress store for one player.

    Responsibilities:
    - Loading and normalizing the persisted snapshot
    - Serialized mutations (drills, workouts, programs, resets, app-open time)
    - Derived queries (levels, skill mastery, programs, daily workout)
    """

    def __init__(
        self,
        user_id: str,
        storage: SnapshotStorage,
        catalog: CatalogRepository,
        clock: Clock = default_clock,
        profile_provider: Optional[ProfileProvider] = None,
        storage_key: str = PROGRESS_STORAGE_KEY
    ):
        """
        Initialize ProgressStore.

        Args:
            user_id: Player the snapshot belongs to
            storage: Snapshot persistence backend
            catalog: Read-only content catalog
            clock: Returns the current time; all day/week rules use it
            profile_provider: Returns the player's profile for the daily workout
            storage_key: Fixed key the snapshot is stored under
        """
        self.user_id = user_id
        self.storage = storage
        self.catalog = catalog
        self.clock = clock
        self.profile_provider = profile_provider
        self.storage_key = storage_key

        self._snapshot = new_snapshot(clock())
        self._lock = asyncio.Lock()
        self._loaded = False
        self._workout_key: Optional[tuple] = None
        self._workout: Optional[DailyWorkout] = None

    # ==========================================
    # Loading and persistence
    # ==========================================

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> ProgressSnapshot:
        """Read, parse and normalize the stored snapshot (defaults on failure)"""
        async with self._lock:
            now = self.clock()
            self._snapshot = await self._read_snapshot(now)
            self._loaded = True
            logger.info(
                f"Loaded progress for user {self.user_id}: xp={self._snapshot.xp}, "
                f"level={self._snapshot.level}, streak={self._snapshot.streak}"
            )
            return self.snapshot

    async def _read_snapshot(self, now: datetime) -> ProgressSnapshot:
        try:
            document = await self.storage.load(self.user_id, self.storage_key)
        except MalformedPersistedStateError:
            metrics.record_snapshot_recovery("malformed")
            return new_snapshot(now)
        except StorageError:
            metrics.record_snapshot_recovery("read_error")
            return new_snapshot(now)

        if document is None:
            logger.info(f"No stored progress for user {self.user_id}, starting fresh")
            return new_snapshot(now)

        try:
            snapshot = parse_snapshot(document, self.storage_key, self.user_id)
        except MalformedPersistedStateError:
            metrics.record_snapshot_recovery("malformed")
            return new_snapshot(now)

        return normalize(snapshot, now)

    async def _persist(self, snapshot: ProgressSnapshot) -> bool:
        """Write the snapshot; failures are logged and swallowed"""
        try:
            await self.storage.save(self.user_id, self.storage_key, serialize_snapshot(snapshot))
            return True
        except PersistenceWriteError as e:
            logger.warning(
                f"Progress for user {self.user_id} kept in memory only (request {e.request_id})"
            )
        except Exception as e:
            logger.error(f"Unexpected storage failure for user {self.user_id}: {e}", exc_info=True)
        metrics.record_persist_failure()
        return False

    async def _mutate(self, operation: str, compute: MutationFn) -> MutationResult:
        """
        Apply one mutation under the writer lock

        The held snapshot is normalized against the clock first, so day
        and week boundaries crossed since the last load or mutation are
        applied before the change. A store that was never loaded reads
        the stored snapshot first.
        """
        async with self._lock:
            now = self.clock()
            if not self._loaded:
                # First write must build on the stored snapshot
                self._snapshot = await self._read_snapshot(now)
                self._loaded = True

            try:
                current = normalize(self._snapshot, now)
                updated, result = compute(current, now)
            except ProgressionError as e:
                metrics.record_mutation(operation, success=False)
                return MutationResult(success=False, operation=operation, changed=False, error=e.to_dict())
            except Exception as e:
                logger.error(f"Error in {operation} for user {self.user_id}: {e}", exc_info=True)
                metrics.record_mutation(operation, success=False)
                return MutationResult(
                    success=False,
                    operation=operation,
                    changed=False,
                    error={"error": e.__class__.__name__, "message": str(e)},
                )

            if not result.changed:
                self._snapshot = current
                metrics.record_mutation(operation, success=True)
                return result

            self._snapshot = updated
            persisted = await self._persist(updated)
            metrics.record_mutation(operation, success=True)

            logger.info(
                f"{operation} for user {self.user_id}: xp={updated.xp}, level={updated.level}, "
                f"streak={updated.streak}, persisted={persisted}"
            )
            return result.model_copy(update={"persisted": persisted})

    # ==========================================
    # Mutations
    # ==========================================

    async def complete_drill(self, drill_id: str, duration_minutes: int) -> MutationResult:
        """
        Record a completed drill.

        XP is granted on every completion, including repeats; the drill
        joins completed_drills only once.

        Args:
            drill_id: Catalog drill id
            duration_minutes: Minutes actually trained

        Returns:
            MutationResult with xp_earned and leveled_up
        """
        def compute(current: ProgressSnapshot, now: datetime):
            _check_non_negative("duration_minutes", duration_minutes, self.user_id)
            drill = self.catalog.get_drill_by_id(drill_id)
            updated, xp_result = self._apply_completion(
                current, now, drill.xp_reward, duration_minutes
            )
            completed = current.completed_drills | {drill_id}
            updated = updated.model_copy(update={
                "completed_drills": completed,
                "drills_completed_today": (
                    1 if current.last_training_date != today_key(now)
                    else current.drills_completed_today + 1
                ),
                "program_progress": self._recompute_program_progress(current, completed),
            })
            metrics.record_xp("drill", xp_result["xp_awarded"], xp_result["leveled_up"])
            return updated, _completion_result("complete_drill", xp_result)

        return await self._mutate("complete_drill", compute)

    async def complete_workout(self, workout_id: str, total_duration: int, xp_reward: int) -> MutationResult:
        """
        Record a completed workout (e.g. the daily workout).

        Same day, streak, level and weekly session rules as a drill;
        skill drill bookkeeping is left alone.
        """
        def compute(current: ProgressSnapshot, now: datetime):
            _check_non_negative("total_duration", total_duration, self.user_id)
            _check_non_negative("xp_reward", xp_reward, self.user_id)
            updated, xp_result = self._apply_completion(current, now, xp_reward, total_duration)
            updated = updated.model_copy(update={
                "completed_workouts": current.completed_workouts | {workout_id},
            })
            metrics.record_xp("workout", xp_result["xp_awarded"], xp_result["leveled_up"])
            return updated, _completion_result("complete_workout", xp_result)

        return await self._mutate("complete_workout", compute)

    async def enroll_in_program(self, program_id: str) -> MutationResult:
        """Enroll in a catalog program; no-op when already enrolled"""
        def compute(current: ProgressSnapshot, now: datetime):
            self.catalog.get_program_by_id(program_id)
            if program_id in current.enrolled_programs:
                return current, MutationResult(success=True, operation="enroll_in_program", changed=False)

            updated = current.model_copy(update={
                "enrolled_programs": current.enrolled_programs | {program_id},
                "program_progress": {**current.program_progress, program_id: 0},
            })
            logger.info(f"User {self.user_id} enrolled in program {program_id}")
            return updated, MutationResult(success=True, operation="enroll_in_program")

        return await self._mutate("enroll_in_program", compute)

    async def unenroll_from_program(self, program_id: str) -> MutationResult:
        """Leave a program; no-op when not enrolled"""
        def compute(current: ProgressSnapshot, now: datetime):
            if program_id not in current.enrolled_programs:
                return current, MutationResult(success=True, operation="unenroll_from_program", changed=False)

            progress = dict(current.program_progress)
            progress.pop(program_id, None)
            updated = current.model_copy(update={
                "enrolled_programs": current.enrolled_programs - {program_id},
                "program_progress": progress,
            })
            logger.info(f"User {self.user_id} left program {program_id}")
            return updated, MutationResult(success=True, operation="unenroll_from_program")

        return await self._mutate("unenroll_from_program", compute)

    async def reset_weekly_progress(self) -> MutationResult:
        """Zero every weekly counter and re-anchor the week to this Monday"""
        def compute(current: ProgressSnapshot, now: datetime):
            updated = current.model_copy(update={
                "weekly_progress": 0,
                "weekly_minutes": 0,
                "sessions_this_week": 0,
                "session_dates": set(),
                "app_open_minutes_this_week": 0,
                "week_start_date": current_week_start(now),
            })
            return updated, MutationResult(success=True, operation="reset_weekly_progress")

        return await self._mutate("reset_weekly_progress", compute)

    async def reset_all_progress(self) -> MutationResult:
        """Discard all history and start again from defaults"""
        def compute(current: ProgressSnapshot, now: datetime):
            logger.warning(f"Resetting all progress for user {self.user_id}")
            return new_snapshot(now), MutationResult(success=True, operation="reset_all_progress", new_level=1)

        return await self._mutate("reset_all_progress", compute)

    async def record_app_open_minute(self) -> MutationResult:
        """Add one minute of app-open time to the current week"""
        def compute(current: ProgressSnapshot, now: datetime):
            updated = current.model_copy(update={
                "app_open_minutes_this_week": current.app_open_minutes_this_week + 1,
            })
            metrics.record_app_open_minute()
            return updated, MutationResult(success=True, operation="record_app_open_minute")

        return await self._mutate("record_app_open_minute", compute)

    def _apply_completion(
        self,
        current: ProgressSnapshot,
        now: datetime,
        xp_reward: int,
        duration: int
    ) -> tuple[ProgressSnapshot, dict]:
        """XP, level, streak, totals and weekly session bookkeeping shared by drills and workouts"""
        today = today_key(now)
        xp_result = award_xp(current.xp, current.level, xp_reward)
        session_dates = current.session_dates | {today}

        updated = current.model_copy(update={
            "xp": xp_result["new_total_xp"],
            "level": xp_result["new_level"],
            "streak": next_streak(current.streak, current.last_training_date, today),
            "last_training_date": today,
            "total_training_minutes": current.total_training_minutes + duration,
            "session_dates": session_dates,
            "sessions_this_week": len(session_dates),
            "weekly_minutes": current.weekly_minutes + duration,
            "weekly_progress": current.weekly_progress + 1,
        })
        return updated, xp_result

    def _recompute_program_progress(self, current: ProgressSnapshot, completed: set[str]) -> dict[str, int]:
        progress = dict(current.program_progress)
        for program_id in current.enrolled_programs:
            program = self.catalog.find_program(program_id)
            if program is None:
                logger.warning(f"Enrolled program {program_id} missing from catalog, keeping last progress")
                continue
            progress[program_id] = program_progress_percent(program, completed)
        return progress

    # ==========================================
    # Queries
    # ==========================================

    @property
    def snapshot(self) -> ProgressSnapshot:
        """Copy of the latest in-memory snapshot"""
        return self._snapshot.model_copy(deep=True)

    @property
    def xp_to_next_level(self) -> int:
        return xp_to_next_level(self._snapshot.xp)

    @property
    def level_progress_percent(self) -> float:
        return level_progress_percent(self._snapshot.xp)

    def is_drill_completed(self, drill_id: str) -> bool:
        return drill_id in self._snapshot.completed_drills

    def get_skill_progress(self, skill_id: SkillCategory) -> SkillProgress:
        path = self.catalog.get_skill_path(skill_id)
        return get_current_skill_level(path, self._snapshot.completed_drills)

    def get_all_skills_progress(self) -> list[SkillProgress]:
        return [
            get_current_skill_level(path, self._snapshot.completed_drills)
            for path in self.catalog.list_skill_paths()
        ]

    def is_skill_level_unlocked(self, skill_id: SkillCategory, level_number: int) -> bool:
        path = self.catalog.find_skill_path(skill_id)
        if path is None:
            return False
        return is_skill_level_unlocked(path, level_number, self._snapshot.completed_drills)

    def is_level_pro_locked(self, level_number: int) -> bool:
        return is_level_pro_locked(level_number)

    def get_enrolled_program_details(self) -> list[EnrolledProgramDetails]:
        """Enrolled programs in catalog order; ids missing from the catalog are skipped"""
        enrolled = self._snapshot.enrolled_programs
        return [
            EnrolledProgramDetails(
                program=program,
                progress=self._snapshot.program_progress.get(program.id, 0),
            )
            for program in self.catalog.list_programs()
            if program.id in enrolled
        ]

    def get_recommended_drills(self, limit: int = 3) -> list[Drill]:
        profile = self._get_profile()
        if profile is None:
            return get_recommended_drills(self.catalog, None, [], None, limit)
        return get_recommended_drills(
            self.catalog, profile.position, profile.goals, profile.skill_level, limit
        )

    @property
    def daily_workout(self) -> Optional[DailyWorkout]:
        """
        Today's recommended workout, or None without a profile

        Recomputed whenever the date, the profile or the completed drills
        change; otherwise the cached workout is returned.
        """
        profile = self._get_profile()
        if profile is None:
            return None

        now = self.clock()
        key = (
            today_key(now),
            profile.model_dump_json(),
            frozenset(self._snapshot.completed_drills),
        )
        if key != self._workout_key:
            self._workout = generate_daily_workout(
                self.catalog.list_drills(),
                profile.position,
                profile.goals,
                profile.skill_level,
                self._snapshot.completed_drills,
                now,
                user_id=self.user_id,
            )
            self._workout_key = key
        return self._workout

    def _get_profile(self) -> Optional[PlayerProfile]:
        if self.profile_provider is None:
            return None
        return self.profile_provider()


def _check_non_negative(field: str, value: int, user_id: str) -> None:
    if value < 0:
        raise InvalidInputError(
            message=f"{field} cannot be negative",
            field=field,
            value=value,
            user_id=user_id,
        )


def _completion_result(operation: str, xp_result: dict) -> MutationResult:
    return MutationResult(
        success=True,
        operation=operation,
        xp_earned=xp_result["xp_awarded"],
        leveled_up=xp_result["leveled_up"],
        new_level=xp_result["new_level"],
    )
