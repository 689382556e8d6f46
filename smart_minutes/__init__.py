"""
Core package for the Smart Minutes transcription relay.

This package contains modular components used by the Cloud Storage entrypoint
to convert audio, run speech recognition, assemble and correct transcripts,
and turn them into minutes-of-meeting documents.
"""
