"""API-specific request/response models.

Domain models live in bhraman.models; this package holds the response
envelopes and request bodies that only the HTTP layer needs.
"""
