"""
Academy Ledger: lessons, payments and account statements for a tutoring academy.

The FastAPI application lives in `main.py`; run it with
    uvicorn src.academy_ledger.main:app
"""
