"""Application layer: ports, services and use cases for package export."""
