"""Impostor admin dashboard API: live + historical game stats."""
