"""Domain layer - value objects, entities and the error taxonomy."""
