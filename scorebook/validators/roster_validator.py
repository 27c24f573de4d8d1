class RosterValidator:
    MIN_PLAYERS = 2

    @staticmethod
    def validate(match_format) -> dict:
        """
        Validate both rosters of a match format.

        Rules:
        1. At least 2 players per side
        2. Player ids unique across both sides
        3. Every player has a name
        """
        errors = []
        seen = set()

        for team, roster in (
            (match_format.team1_name, match_format.team1_roster),
            (match_format.team2_name, match_format.team2_roster),
        ):
            if len(roster) < RosterValidator.MIN_PLAYERS:
                errors.append(f"{team} needs at least {RosterValidator.MIN_PLAYERS} players, got {len(roster)}")

            for p in roster:
                if p.id in seen:
                    errors.append(f"Player id {p.id} appears more than once")
                seen.add(p.id)
                if not p.name or not p.name.strip():
                    errors.append(f"Player {p.id} in {team} has no name")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "breakdown": {
                match_format.team1_name: len(match_format.team1_roster),
                match_format.team2_name: len(match_format.team2_roster),
            },
        }
