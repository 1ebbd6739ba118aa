"""
Cooldown tracking for a single combatant.
"""


class CooldownTracker:
    """
    Remembers, for each ability id, the simulated time at which it becomes
    usable again. An ability that was never used is never on cooldown.
    """

    def __init__(self) -> None:
        self._ready_at: dict[str, float] = {}

    def set_on_cooldown(self, ability_id: str, duration: float, now: float) -> None:
        """
        Puts an ability on cooldown.

        Args:
            ability_id (str):
                The ability id.
            duration (float):
                The cooldown, in seconds.
            now (float):
                The current simulated time.

        """
        self._ready_at[ability_id] = now + duration

    def is_on_cooldown(self, ability_id: str, now: float) -> bool:
        return now < self._ready_at.get(ability_id, 0)

    def get_remaining(self, ability_id: str, now: float) -> float:
        """Returns the seconds left before the ability is usable, 0 if it is."""
        return max(0.0, self._ready_at.get(ability_id, 0) - now)

    def active_cooldowns(self, now: float) -> dict[str, float]:
        """Returns the remaining time of every ability still on cooldown."""
        return {
            ability_id: ready_at - now
            for ability_id, ready_at in self._ready_at.items()
            if now < ready_at
        }

    def reset_all(self) -> None:
        """Clears every cooldown, e.g. when a new battle starts."""
        self._ready_at.clear()
