"""FastAPI application for the Bhraman booking backend."""
