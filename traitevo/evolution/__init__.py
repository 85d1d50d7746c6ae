"""Evolutionary optimization: fitness, environment, operators and the engine."""
