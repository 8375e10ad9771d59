"""Core engine systems: data types, the tick engine and the event bus."""
