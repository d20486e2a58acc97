"""Application layer: operators, DTOs, and backend ports."""
