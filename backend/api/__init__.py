"""
API Package — FastAPI Router • Response Models
==============================================

Contents
--------
- fast_api
    FastAPI router with the service's single public endpoint:
      • GET / — static welcome payload

- models
    Pydantic response contracts used for validation and OpenAPI schema generation.
"""
