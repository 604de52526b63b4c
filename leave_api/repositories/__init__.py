"""Data access repositories, one per aggregate."""
