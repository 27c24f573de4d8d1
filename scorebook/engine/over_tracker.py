from dataclasses import dataclass

BALLS_PER_OVER = 6


@dataclass(frozen=True)
class BallAdvance:
    """Ball/over pointer after one delivery"""
    new_over: int
    new_ball: int
    over_completed: bool = False


def track_delivery(over: int, ball: int, *, is_free_hit: bool, is_legal: bool) -> BallAdvance:
    """
    Advance the over pointer for one delivery.

    Only legal deliveries count towards the over. A free hit never moves the
    counter, whatever the outcome.
    """
    if not is_legal or is_free_hit:
        return BallAdvance(new_over=over, new_ball=ball)

    ball += 1
    if ball == BALLS_PER_OVER:
        return BallAdvance(new_over=over + 1, new_ball=0, over_completed=True)
    return BallAdvance(new_over=over, new_ball=ball)


def legal_balls(over: int, ball: int) -> int:
    return over * BALLS_PER_OVER + ball


def overs_display(over: int, ball: int) -> str:
    return f"{over}.{ball}"
