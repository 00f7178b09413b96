"""Folklore Garden admin back-office API."""
