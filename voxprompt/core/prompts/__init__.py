"""Enhanced prompts: models, data access, enhancement pipeline."""
