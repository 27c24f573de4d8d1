import random
from typing import Optional

from faker import Faker

from scorebook.engine.state import Player, PlayerRole, MatchFormat

fake_in = Faker('en_IN')
fake_au = Faker('en_AU')
fake_en = Faker('en_GB')


# Fictional franchise names for demo fixtures
FRANCHISE_NAMES = [
    "Mumbai Titans",
    "Chennai Kings",
    "Bangalore Warriors",
    "Kolkata Knights",
    "Delhi Capitals",
    "Hyderabad Sunrisers",
    "Rajasthan Royals",
    "Punjab Lions",
]


class RosterGenerator:
    """Generates fictional match rosters for demos and tests"""

    # Balanced XI: 1 keeper, 4 batters, 2 all-rounders, 4 bowlers
    XI_COMPOSITION = [
        (PlayerRole.KEEPER, 1),
        (PlayerRole.BATTER, 4),
        (PlayerRole.ALL_ROUNDER, 2),
        (PlayerRole.BOWLER, 4),
    ]

    # Mostly local names with a few overseas players
    NAME_SOURCES = [
        (fake_in, 80),
        (fake_au, 10),
        (fake_en, 10),
    ]

    @classmethod
    def _faker(cls) -> Faker:
        fakers, weights = zip(*cls.NAME_SOURCES)
        return random.choices(fakers, weights=weights, k=1)[0]

    @classmethod
    def roles_for(cls, size: int) -> list[PlayerRole]:
        """Batting order roles; sides bigger or smaller than an XI are trimmed or padded with batters"""
        roles = []
        for role, count in cls.XI_COMPOSITION:
            roles.extend([role] * count)
        if size <= len(roles):
            # keep the keeper and the specialist bowlers when trimming
            return roles[:1] + roles[len(roles) - size + 1:] if size > 1 else roles[:size]
        return roles + [PlayerRole.BATTER] * (size - len(roles))

    @classmethod
    def generate_roster(cls, size: int = 11, start_id: int = 1) -> tuple[Player, ...]:
        """Generate `size` players with consecutive ids from `start_id` and unique names"""
        names = set()
        players = []
        for offset, role in enumerate(cls.roles_for(size)):
            name = cls._faker().name()
            while name in names:
                name = cls._faker().name()
            names.add(name)
            players.append(Player(id=start_id + offset, name=name, role=role))
        return tuple(players)

    @classmethod
    def generate_format(
        cls,
        overs: int = 20,
        team1_name: Optional[str] = None,
        team2_name: Optional[str] = None,
        size: int = 11,
    ) -> MatchFormat:
        """Two sides with rosters; team two's ids start at 101, or after team one's for sides over 100"""
        if team1_name is None or team2_name is None:
            pool = [n for n in FRANCHISE_NAMES if n not in (team1_name, team2_name)]
            picks = random.sample(pool, 2)
            team1_name = team1_name or picks[0]
            team2_name = team2_name or picks[1]

        return MatchFormat(
            overs_per_innings=overs,
            team1_name=team1_name,
            team2_name=team2_name,
            team1_roster=cls.generate_roster(size, start_id=1),
            team2_roster=cls.generate_roster(size, start_id=max(101, size + 1)),
        )

    @staticmethod
    def seed(value: int):
        """Make generated rosters repeatable"""
        random.seed(value)
        Faker.seed(value)
