"""Route modules, one router per area."""
