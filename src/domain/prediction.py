"""Win-probability prediction from current ratings."""

from __future__ import annotations

from sqlalchemy.orm import Session

from domain.errors import InvalidInput, PredictionPlayerNotFound
from domain.ratings.elo.calculator import EloParameters, calculate_expected_score
from domain.records import MatchPrediction
from repositories.players import get_player


class PredictionService:
    def __init__(self, params: EloParameters) -> None:
        self.params = params

    def predict(self, session: Session, player_a_id: int, player_b_id: int) -> MatchPrediction:
        if player_a_id == player_b_id:
            raise InvalidInput(f"player_id={player_a_id} cannot be predicted against themselves")

        player_a = get_player(session, player_a_id)
        if player_a is None:
            raise PredictionPlayerNotFound(f"player_a_id={player_a_id} does not exist")
        player_b = get_player(session, player_b_id)
        if player_b is None:
            raise PredictionPlayerNotFound(f"player_b_id={player_b_id} does not exist")

        expected_a = calculate_expected_score(player_a.rating, player_b.rating, self.params.scale_factor)
        return MatchPrediction(
            player_a_id=player_a.id,
            player_b_id=player_b.id,
            win_probability_a=expected_a * 100.0,
            win_probability_b=(1.0 - expected_a) * 100.0,
            elo_difference=player_a.rating - player_b.rating,
        )
