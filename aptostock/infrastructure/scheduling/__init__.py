"""Scheduling asyncio (timers cancelables)."""
