from __future__ import annotations

from typing import TYPE_CHECKING

from statemachine import State, StateMachine

from backpacker.api.models import GamePhase

if TYPE_CHECKING:
    from backpacker.game_loop import GameSession

PHASE_LABELS: dict[GamePhase, str] = {
    GamePhase.select_start_city: "Select a Starting City",
    GamePhase.location_quiz: "City Quiz",
    GamePhase.select_job: "Find a Job",
    GamePhase.job_quiz: "Job Trial",
    GamePhase.travel_planning: "Plan Your Next Trip",
    GamePhase.game_over: "Game Over",
    GamePhase.victory: "You Win!",
}

# Phases whose entry failures fall back to travel planning instead of game over.
RECOVERABLE_PHASES = frozenset({GamePhase.location_quiz, GamePhase.select_job, GamePhase.job_quiz})


def _state(phase: GamePhase, **kwargs: bool) -> State:
    return State(PHASE_LABELS[phase], value=phase.value, **kwargs)


class GameFSM(StateMachine):
    """FSM wrapper around a GameSession's phase.

    The FSM only guards transitions; state-entry work (AI calls, lookups, payouts)
    is done by the GameLoop, which then fires the follow-up event.
    """

    select_start_city = _state(GamePhase.select_start_city, initial=True)
    location_quiz = _state(GamePhase.location_quiz)
    select_job = _state(GamePhase.select_job)
    job_quiz = _state(GamePhase.job_quiz)
    travel_planning = _state(GamePhase.travel_planning)
    game_over = _state(GamePhase.game_over)
    victory = _state(GamePhase.victory)

    city_selected = select_start_city.to(location_quiz)
    # Fired both when the quiz ends and when it is skipped.
    location_quiz_finished = location_quiz.to(select_job)
    job_selected = select_job.to(job_quiz)
    no_jobs_found = select_job.to(travel_planning)
    job_quiz_finished = job_quiz.to(travel_planning)
    arrived = travel_planning.to(location_quiz)
    circumnavigated = travel_planning.to(victory)
    stranded = travel_planning.to(game_over)

    recover = (
        location_quiz.to(travel_planning)
        | select_job.to(travel_planning)
        | job_quiz.to(travel_planning)
        | travel_planning.to(game_over)
    )

    restart = (
        location_quiz.to(select_start_city)
        | select_job.to(select_start_city)
        | job_quiz.to(select_start_city)
        | travel_planning.to(select_start_city)
        | game_over.to(select_start_city)
        | victory.to(select_start_city)
    )

    def __init__(self, session: "GameSession"):
        self.session = session
        super().__init__(start_value=session.phase.value)

    @property
    def phase(self) -> GamePhase:
        return GamePhase(str(self.current_state.value))

    def sync_phase_to_model(self) -> None:
        self.session.phase = self.phase

    def fire(self, event: str) -> GamePhase:
        """Send an event and copy the resulting phase onto the session."""

        self.send(event)
        self.sync_phase_to_model()
        return self.session.phase
