"""Core building blocks shared across formula-commons features."""
