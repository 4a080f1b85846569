"""Transcriptions: model, data access, transcription pipeline."""
