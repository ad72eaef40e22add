"""Feature packages for formula-commons."""
