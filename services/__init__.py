"""Application services built on the domain model."""
