"""Request/result DTOs."""
