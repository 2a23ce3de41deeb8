"""Export reading, sheet normalization and typed row binding."""
