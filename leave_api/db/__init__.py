"""Engine, session factory and database bootstrap."""
