"""Core gameplay primitives (journal, geography, rules, context stacking, and game views).

Kept free of FastAPI concerns so it can be reused by API routes, the game loop, and tests.
"""
