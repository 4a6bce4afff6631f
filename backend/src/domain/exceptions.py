"""
Domain exceptions for the prediction system.
"""

class PredictionException(Exception):
    """Base exception for prediction-related errors."""
    pass

class MalformedSnapshotException(PredictionException):
    """Raised when a live fixture lacks a required section (stats, scores, time, events, teams or league)."""

    def __init__(self, fixture_id, missing: str):
        self.fixture_id = fixture_id
        self.missing = missing
        super().__init__(f"Fixture {fixture_id} is missing required section '{missing}'")

class UpstreamFetchException(PredictionException):
    """Raised when the upstream feed cannot be reached or returns an unusable response."""
    pass

class InvalidIdentifierException(PredictionException):
    """Raised when a fixture identifier is not a valid integer."""
    pass
