"""Q-Foods ordering service."""
