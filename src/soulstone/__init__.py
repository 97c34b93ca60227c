"""Flag-driven narrative engine: rooms, dialogue, quests, map visibility and combat."""

__version__ = "0.1.0"
