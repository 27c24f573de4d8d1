"""
Error taxonomy for the scoring engine and its persistence boundary.
"""


class ScoringError(Exception):
    """Base class for every rejected scoring operation"""
    code = "scoring_error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.code)
        self.detail = detail or self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.detail}


class InvalidCommandForState(ScoringError):
    """Command is not legal for the current status or gating flags"""
    code = "invalid_command_for_state"


class InvalidCommandPayload(ScoringError):
    """Command values are out of range or of the wrong type"""
    code = "invalid_command_payload"


class DuplicatePlayerSelection(ScoringError):
    """Same player picked twice, or a dismissed batter picked again"""
    code = "duplicate_player_selection"


class RosterExhausted(ScoringError):
    """No eligible replacement batter remains"""
    code = "roster_exhausted"


class UnknownPlayer(ScoringError):
    """Player id is not in the roster of the side it was picked for"""
    code = "unknown_player"


class InvalidMatchSetup(ScoringError):
    """Format or toss rejected at match creation"""
    code = "invalid_match_setup"


class ConcurrentModification(ScoringError):
    """Stored match changed since the caller read it"""
    code = "concurrent_modification"


class MatchNotFound(ScoringError):
    code = "match_not_found"
