"""
Services module - Audio, recognition, recording, storage, and synthesis.
"""
