"""
API module - FastAPI presentation adapter over the entry store and recording controller.
"""
