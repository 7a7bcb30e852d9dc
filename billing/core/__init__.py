"""Domain core: entities, interfaces, services and exceptions."""
