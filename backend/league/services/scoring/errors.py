class ScoringError(Exception):
    """Base class for failures while computing tournament points."""


class TournamentNotFound(ScoringError):
    def __init__(self, tournament_id):
        super().__init__(f'Tournament {tournament_id} not found')
        self.tournament_id = tournament_id


class StorageFailure(ScoringError):
    """A read or write against the league database failed."""
