"""Annual fitness goal tracking service."""
