"""Request schemas for serving risk reports over HTTP."""
