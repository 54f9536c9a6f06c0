"""Engine core: static data, session model, turn resolution, errors and events."""
