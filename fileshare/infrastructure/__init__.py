"""Infrastructure layer - concrete storage, fan-out and composition."""
