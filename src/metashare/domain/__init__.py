"""Domain layer: metadata records, package descriptor, errors."""
