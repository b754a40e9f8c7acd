"""Domain models and services for the Bhraman travel booking backend."""
