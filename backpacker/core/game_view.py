from __future__ import annotations

from typing import TYPE_CHECKING

from backpacker.api.models import DashboardView, GamePhase, GameView, PanelItem, PanelView
from backpacker.core.rules import REWARD_PER_CORRECT_ANSWER, STARTING_CITIES
from backpacker.fsm import PHASE_LABELS

if TYPE_CHECKING:
    from backpacker.game_loop import GameSession


def _money(amount: int) -> str:
    return f"${amount:,}"


def render_dashboard(session: "GameSession") -> DashboardView:
    status = PHASE_LABELS[session.phase]
    journal = session.journal
    if journal is None:
        return DashboardView(status=status)
    return DashboardView(
        status=status,
        money=journal.current_money,
        location=journal.current_location.label,
        progress_percent=journal.progress_percent(),
        progress_text=journal.progress_text(),
    )


def _start_panel() -> PanelView:
    return PanelView(
        title="Choose Your Starting City",
        description="Your journey begins now. Where in the world will you start?",
        items=[
            PanelItem(action="select-city", index=i, title=c.city, subtitle=c.country)
            for i, c in enumerate(STARTING_CITIES)
        ],
    )


def _quiz_panel(session: "GameSession") -> PanelView:
    quiz = session.current_quiz
    if quiz is None:
        return PanelView(title=PHASE_LABELS[session.phase], description="Preparing your quiz...")

    q = quiz.current_question
    return PanelView(
        title=quiz.title,
        description=(
            f"Question {quiz.current_index + 1} of {len(quiz.questions)} | "
            f"Score: {quiz.score * REWARD_PER_CORRECT_ANSWER}"
        ),
        question=q.question,
        items=[PanelItem(action="answer-quiz", title=opt) for opt in q.options],
    )


def _job_panel(session: "GameSession") -> PanelView:
    return PanelView(
        title="Find a Job",
        description=(
            "Time to earn some cash. Choose a job to take on a trial. "
            f"You get {_money(REWARD_PER_CORRECT_ANSWER)} for each correct answer."
        ),
        items=[
            PanelItem(action="select-job", index=i, title=job.title, description=job.description)
            for i, job in enumerate(session.job_options)
        ],
    )


def _travel_panel(session: "GameSession") -> PanelView:
    money = session.journal.current_money if session.journal else 0
    return PanelView(
        title="Where to next?",
        description="The world is waiting. Choose your next destination.",
        items=[
            PanelItem(
                action="select-destination",
                index=i,
                title=f"{opt.city}, {opt.country}",
                subtitle=opt.mode,
                cost=opt.cost,
                disabled=money < opt.cost,
            )
            for i, opt in enumerate(session.travel_options)
        ],
    )


def render_panel(session: "GameSession") -> PanelView:
    phase = session.phase

    if phase == GamePhase.select_start_city:
        return _start_panel()
    if phase in (GamePhase.location_quiz, GamePhase.job_quiz):
        return _quiz_panel(session)
    if phase == GamePhase.select_job:
        return _job_panel(session)
    if phase == GamePhase.travel_planning:
        return _travel_panel(session)
    if phase == GamePhase.game_over:
        return PanelView(
            title="Game Over",
            description="You've run out of money or have no affordable travel options. Better luck next time!",
            items=[PanelItem(action="restart", title="Start a New Journey")],
        )
    return PanelView(
        title="Congratulations!",
        description="You've successfully circumnavigated the globe and returned home. You are a true backpacker!",
        items=[PanelItem(action="restart", title="Play Again")],
    )


def render_game_view(session: "GameSession") -> GameView:
    return GameView(
        game_id=session.game_id,
        phase=session.phase,
        dashboard=render_dashboard(session),
        panel=render_panel(session),
        map=session.map.to_view(),
        last_answer=session.last_answer,
        job_history=list(session.journal.job_history) if session.journal else [],
    )
