"""Business-rule failures raised by the match services.

Each carries a machine-readable ``code`` plus the HTTP status the API layer
answers with, so the blueprint can translate any of them in one handler.
"""


class ScoringError(Exception):
    code = 'scoring_error'
    status_code = 400

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFound(ScoringError):
    code = 'not_found'
    status_code = 404


class InvalidTransition(ScoringError):
    code = 'invalid_transition'
    status_code = 409


class InvalidState(ScoringError):
    code = 'invalid_state'
    status_code = 400
