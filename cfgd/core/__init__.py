"""Core — models, engine, services and ambient infrastructure."""
