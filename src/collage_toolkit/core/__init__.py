"""Core models and error types shared by the collage builder."""
