"""Shared utilities and models for AniPoster."""
