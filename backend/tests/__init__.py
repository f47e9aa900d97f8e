"""Test suite for the PetBKK booking backend."""
