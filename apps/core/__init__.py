"""
Core infrastructure shared by Warden apps: base model, caching, logging,
exception handling and DRF permission enforcement.
"""
