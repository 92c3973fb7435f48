"""Pure domain model: entities, enums, date windows and display labels."""
