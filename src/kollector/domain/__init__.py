"""Domain layer: model, ports and catalog services."""
