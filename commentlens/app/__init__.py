"""Application layer: configuration, database, dependency wiring, FastAPI app"""
