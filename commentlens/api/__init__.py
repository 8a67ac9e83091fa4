"""HTTP layer: schemas and routers"""
