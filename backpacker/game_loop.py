from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from backpacker.agents.base import Agent
from backpacker.agents.generator import ContentGenerator
from backpacker.agents.job_finder import JobFinder
from backpacker.agents.quiz_master import QuizMaster
from backpacker.agents.travel_planner import TravelPlanner
from backpacker.api.models import AnswerFeedback, GamePhase, Job, JobRecord, Quiz, QuizKind, TravelOption
from backpacker.core.journal import Journal
from backpacker.core.map_overlay import MapOverlay
from backpacker.core.rules import INITIAL_MONEY, PITY_PAYMENT, REWARD_PER_CORRECT_ANSWER, STARTING_CITIES
from backpacker.fsm import RECOVERABLE_PHASES, GameFSM
from backpacker.infra.wikipedia_client import Encyclopedia

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameSession:
    """Everything one player's game needs between requests.

    Owned by the GameLoop; only the loop mutates it.
    """

    game_id: UUID = field(default_factory=uuid4)
    phase: GamePhase = GamePhase.select_start_city
    journal: Journal | None = None
    current_quiz: Quiz | None = None
    selected_job: Job | None = None
    job_options: list[Job] = field(default_factory=list)
    travel_options: list[TravelOption] = field(default_factory=list)
    map: MapOverlay = field(default_factory=MapOverlay)
    last_answer: AnswerFeedback | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def require_journal(self) -> Journal:
        if self.journal is None:
            raise ValueError("No journey in progress")
        return self.journal

    def clear_progress(self) -> None:
        self.journal = None
        self.current_quiz = None
        self.selected_job = None
        self.job_options = []
        self.travel_options = []
        self.last_answer = None
        self.map.reset()


def _pick(items: list, index: int, *, what: str):  # type: ignore[no-untyped-def]
    if not 0 <= index < len(items):
        raise ValueError(f"Unknown {what} index: {index}")
    return items[index]


@dataclass(slots=True)
class GameLoop:
    """Drives a GameSession through the game's phases.

    Public methods are the player's intents. Each validates the current phase,
    applies the intent, fires the FSM event, and then runs state-entry work
    until the game settles in a phase that waits for the player again.
    """

    travel: TravelPlanner
    job_finder: JobFinder
    quiz: QuizMaster
    starting_money: int = INITIAL_MONEY

    @classmethod
    def from_services(cls, *, agent: Agent, encyclopedia: Encyclopedia) -> "GameLoop":
        generator = ContentGenerator(agent=agent)
        return cls(
            travel=TravelPlanner(generator=generator),
            job_finder=JobFinder(generator=generator, encyclopedia=encyclopedia),
            quiz=QuizMaster(generator=generator, encyclopedia=encyclopedia),
        )

    # ---- player intents ----

    async def select_city(self, session: GameSession, index: int) -> None:
        fsm = GameFSM(session)
        if fsm.phase != GamePhase.select_start_city:
            raise ValueError("Game is not awaiting a starting city")
        start = _pick(list(STARTING_CITIES), index, what="starting city")

        session.journal = Journal.start(starting_money=self.starting_money, start_location=start)
        session.map.add_marker(start)
        session.map.fly_to(start)
        logger.info("game %s: starting in %s", session.game_id, start.label)

        await self._transition(session, fsm, "city_selected")

    async def answer_quiz(self, session: GameSession, answer: str) -> None:
        fsm = GameFSM(session)
        if fsm.phase not in (GamePhase.location_quiz, GamePhase.job_quiz) or session.current_quiz is None:
            raise ValueError("No quiz in progress")

        quiz = session.current_quiz
        question = quiz.current_question
        if answer not in question.options:
            raise ValueError("Answer must be one of the question's options")

        correct = answer == question.answer
        if correct:
            quiz.score += 1
        session.last_answer = AnswerFeedback(
            question=question.question,
            chosen=answer,
            correct_answer=question.answer,
            correct=correct,
        )

        if not quiz.is_last_question:
            quiz.current_index += 1
            return

        journal = session.require_journal()
        earnings = quiz.score * REWARD_PER_CORRECT_ANSWER
        journal.update_money(earnings)
        session.current_quiz = None
        logger.info("game %s: %s quiz done, score %d, earned %d", session.game_id, quiz.kind.value, quiz.score, earnings)

        if fsm.phase == GamePhase.job_quiz:
            title = session.selected_job.title if session.selected_job else quiz.title
            journal.record_job(
                JobRecord(title=title, score=quiz.score, question_count=len(quiz.questions), earnings=earnings)
            )
            await self._transition(session, fsm, "job_quiz_finished")
        else:
            await self._transition(session, fsm, "location_quiz_finished")

    async def select_job(self, session: GameSession, index: int) -> None:
        fsm = GameFSM(session)
        if fsm.phase != GamePhase.select_job:
            raise ValueError("Game is not awaiting a job selection")
        session.selected_job = _pick(session.job_options, index, what="job")

        await self._transition(session, fsm, "job_selected")

    async def select_destination(self, session: GameSession, index: int) -> None:
        fsm = GameFSM(session)
        if fsm.phase != GamePhase.travel_planning:
            raise ValueError("Game is not awaiting a destination")
        journal = session.require_journal()
        option: TravelOption = _pick(session.travel_options, index, what="destination")
        if option.cost > journal.current_money:
            raise ValueError(f"Cannot afford a ticket to {option.city}")

        origin = journal.current_location
        destination = option.as_location()

        journal.update_money(-option.cost)
        session.map.draw_path(origin, destination)
        session.map.add_marker(destination)
        session.map.fly_to(destination, zoom=6)
        journal.update_location(destination, origin)
        session.travel_options = []
        logger.info(
            "game %s: %s -> %s by %s for %d (total longitude %.1f)",
            session.game_id,
            origin.label,
            destination.label,
            option.mode,
            option.cost,
            journal.total_longitude_change,
        )

        if journal.has_won():
            event = "circumnavigated"
        elif journal.current_money <= 0:
            event = "stranded"
        else:
            event = "arrived"
        await self._transition(session, fsm, event)

    async def restart(self, session: GameSession) -> None:
        fsm = GameFSM(session)
        if fsm.phase != GamePhase.select_start_city:
            fsm.fire("restart")
        session.clear_progress()
        logger.info("game %s: restarted", session.game_id)

    # ---- state entry ----

    async def _transition(self, session: GameSession, fsm: GameFSM, event: str) -> None:
        fsm.fire(event)
        while (follow_up := await self._enter_with_fallback(session)) is not None:
            fsm.fire(follow_up)
        logger.info("game %s: now in %s", session.game_id, session.phase.value)

    async def _enter_with_fallback(self, session: GameSession) -> str | None:
        phase = session.phase
        try:
            return await self._enter(session)
        except Exception:
            target = "travel planning" if phase in RECOVERABLE_PHASES else "game over"
            logger.exception("game %s: entering %s failed; falling back to %s", session.game_id, phase.value, target)
            return "recover"

    async def _enter(self, session: GameSession) -> str | None:
        """Do the work for the phase just entered.

        Returns the follow-up event when the phase should be skipped, or None
        when the game now waits for the player.
        """

        phase = session.phase

        if phase == GamePhase.location_quiz:
            session.current_quiz = None
            location = session.require_journal().current_location
            questions = await self.quiz.generate_location_quiz(location)
            if not questions:
                return "location_quiz_finished"
            session.current_quiz = Quiz(title=f"Welcome to {location.city}!", kind=QuizKind.location, questions=questions)
            return None

        if phase == GamePhase.select_job:
            session.job_options = []
            session.selected_job = None
            session.job_options = await self.job_finder.find_jobs(session.require_journal().current_location)
            if not session.job_options:
                return "no_jobs_found"
            return None

        if phase == GamePhase.job_quiz:
            session.current_quiz = None
            job = session.selected_job
            if job is None:
                raise ValueError("No job selected")
            questions = await self.quiz.generate_job_quiz(job)
            if not questions:
                journal = session.require_journal()
                journal.update_money(PITY_PAYMENT)
                journal.record_job(JobRecord(title=job.title, score=0, question_count=0, earnings=PITY_PAYMENT, pity=True))
                return "job_quiz_finished"
            session.current_quiz = Quiz(title=f"Job Trial: {job.title}", kind=QuizKind.job, questions=questions)
            return None

        if phase == GamePhase.travel_planning:
            session.travel_options = []
            journal = session.require_journal()
            session.travel_options = await self.travel.get_travel_options(journal.current_location)
            if not any(o.cost <= journal.current_money for o in session.travel_options):
                return "stranded"
            return None

        return None
