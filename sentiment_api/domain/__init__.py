"""Domain layer: entities, services, constants and exceptions."""
