"""Player progression engine: XP, levels, streaks, skill mastery and daily workouts"""
