"""Port interfaces consumed by the export pipeline."""
