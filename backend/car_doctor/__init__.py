"""
Car Doctor Backend — Application Package Initializer
====================================================

What: Marks the `car_doctor` directory as a Python package.
Who:  Imported by uvicorn (`car_doctor.main:app`), pytest, and the
      `car-doctor` console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Orders, Catalog, Tokens) │  ← one store call per operation
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← request/response contracts
    ├─────────────────────────────────────┤
    │     Database (DocumentStore)        │  ← MongoDB via PyMongo async
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
