from scorebook.models.live_match import LiveMatch

__all__ = [
    "LiveMatch",
]
