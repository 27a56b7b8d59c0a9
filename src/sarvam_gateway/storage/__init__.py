"""
Local filesystem collaborators.

    - audio_store.py: Generated audio files, safe retrieval, retention
    - uploads.py: Temporary staging of uploaded documents
"""
