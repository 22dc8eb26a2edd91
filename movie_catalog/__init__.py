"""
Movie catalog service: a movie entity, its async repository and a thin FastAPI host.
"""
