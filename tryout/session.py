"""
Exam session: answer capture, navigation and a countdown that auto-submits.
The countdown is a timer owned by the session; expiry finishes the exam and calls on_timeout once.
"""
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from engine import (
    ANSWER_LETTERS,
    CATEGORIES,
    EXAM_DURATION_SECONDS,
    TIME_CRITICAL_SECONDS,
    TIME_WARNING_SECONDS,
)
from tryout.packages import exam_type_for
from tryout.scoring import calculate_category_scores

logger = logging.getLogger(__name__)


def format_time(seconds: float) -> str:
    """MM:SS."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def time_color(seconds: float) -> str:
    if seconds <= TIME_CRITICAL_SECONDS:
        return "red"
    if seconds <= TIME_WARNING_SECONDS:
        return "orange"
    return "normal"


class ExamSession:
    """Manages a single tryout: answers, current position, countdown and the final scoring."""

    def __init__(self, questions: List[Dict], duration: int = EXAM_DURATION_SECONDS,
                 on_timeout: Optional[Callable[[Dict], None]] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            questions: Question rows for this exam (id, category, difficulty, weight, correct_answer, ...)
            duration: Time limit in seconds
            on_timeout: Called with the exam result when time runs out
            clock: Monotonic seconds source
        """
        self.exam_id = f"exam_{uuid4().hex}"
        self.questions = list(questions or [])
        self.duration = duration
        self.on_timeout = on_timeout
        self._clock = clock

        self.answers: Dict[str, str] = {}
        self.current_index = 0
        self.started_at: Optional[str] = None
        self._started_clock: Optional[float] = None
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._result: Optional[Dict] = None

    # --- lifecycle ---

    @property
    def is_active(self) -> bool:
        return self._started_clock is not None and self._result is None

    @property
    def is_finished(self) -> bool:
        return self._result is not None

    def start(self) -> None:
        """Start the countdown. Calling start on a running or finished session does nothing."""
        if self._started_clock is not None:
            logger.warning("Exam %s already started", self.exam_id)
            return
        self.started_at = datetime.now(timezone.utc).isoformat()
        self._arm(self.duration)
        logger.info("Exam %s started: %d questions, %ds", self.exam_id, len(self.questions), self.duration)

    def _arm(self, remaining: float) -> None:
        # time_left reads from _started_clock, so back-date it by the time already used
        self._started_clock = self._clock() - (self.duration - remaining)
        self._timer = threading.Timer(remaining, self._expire)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        """Abandon the exam without scoring it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._started_clock = None
            self.answers = {}
            self.current_index = 0
        logger.info("Exam %s cancelled", self.exam_id)

    def _expire(self) -> None:
        result, submitted = self._finish(expired=True)
        if not submitted:
            return
        logger.info("Exam %s: time is up, submitted", self.exam_id)
        if self.on_timeout is not None:
            self.on_timeout(result)

    def snapshot(self) -> Dict:
        """State needed to resume this exam later with restore()."""
        with self._lock:
            return {
                "exam_id": self.exam_id,
                "started_at": self.started_at,
                "answers": dict(self.answers),
                "current_index": self.current_index,
                "time_left": self.time_left,
                "duration": self.duration,
            }

    @classmethod
    def restore(cls, questions: List[Dict], state: Dict,
                on_timeout: Optional[Callable[[Dict], None]] = None,
                clock: Callable[[], float] = time.monotonic) -> "ExamSession":
        """
        Resume an exam from a snapshot() dict.

        The countdown restarts with only the seconds that were left. With no time left
        the exam is submitted right away and on_timeout fires before this returns.
        Answers for questions not in `questions` are dropped.
        """
        state = state or {}
        session = cls(questions, duration=state.get("duration") or EXAM_DURATION_SECONDS,
                      on_timeout=on_timeout, clock=clock)
        session.exam_id = state.get("exam_id") or session.exam_id
        session.started_at = state.get("started_at") or datetime.now(timezone.utc).isoformat()

        ids = session._question_ids()
        saved_answers = state.get("answers") if isinstance(state.get("answers"), dict) else {}
        session.answers = {
            qid: letter for qid, letter in saved_answers.items()
            if qid in ids and letter in ANSWER_LETTERS
        }
        try:
            session.go_to(int(state.get("current_index") or 0))
        except (TypeError, ValueError):
            logger.warning("Exam %s: bad current_index %r, starting at the first question",
                           session.exam_id, state.get("current_index"))
        try:
            remaining = float(state.get("time_left", session.duration))
        except (TypeError, ValueError):
            remaining = 0
        remaining = min(max(0, remaining), session.duration)

        if remaining > 0:
            session._arm(remaining)
            logger.info("Exam %s resumed: %d answered, %ds left", session.exam_id,
                        session.answered_count, remaining)
        else:
            session._started_clock = clock() - session.duration
            session._expire()
        return session

    @property
    def time_left(self) -> int:
        if self._started_clock is None:
            return self.duration
        if self._result is not None:
            return max(0, self.duration - self._result["duration"])
        elapsed = self._clock() - self._started_clock
        return max(0, int(self.duration - elapsed))

    def finish(self) -> Dict:
        """
        Stop the countdown and score the exam. A second call returns the same result.

        Returns:
            {exam_id, started_at, ended_at, duration, questions, answered, scores, answers}
        """
        return self._finish()[0]

    def _finish(self, expired: bool = False) -> tuple:
        """(result, True if this call did the scoring). A timer that fires after cancel() scores nothing."""
        with self._lock:
            if self._result is not None:
                return self._result, False
            if expired and self._started_clock is None:
                return None, False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

            used = 0
            if self._started_clock is not None:
                used = min(self.duration, int(self._clock() - self._started_clock))

            self._result = {
                "exam_id": self.exam_id,
                "started_at": self.started_at,
                "ended_at": datetime.now(timezone.utc).isoformat(),
                "duration": used,
                "questions": len(self.questions),
                "answered": self.answered_count,
                "scores": calculate_category_scores(self.questions, self.answers),
                "answers": dict(self.answers),
            }
        logger.info("Exam %s finished: total=%s, answered %d/%d", self.exam_id,
                    self._result["scores"]["total"], self._result["answered"], self._result["questions"])
        return self._result, True

    # --- answers ---

    def _question_ids(self) -> List:
        return [q.get("id") for q in self.questions]

    def set_answer(self, question_id, letter: str) -> bool:
        """Record the chosen letter (A-E). Returns False when the answer is refused."""
        if not self.is_active:
            state = "already finished" if self.is_finished else "not running"
            logger.error("Exam %s %s, answer for %s ignored", self.exam_id, state, question_id)
            return False
        if question_id not in self._question_ids():
            logger.error("Question %s not found in exam %s", question_id, self.exam_id)
            return False
        if letter not in ANSWER_LETTERS:
            logger.error("Invalid answer %r for question %s", letter, question_id)
            return False
        self.answers[question_id] = letter
        return True

    def is_answered(self, question_id) -> bool:
        return question_id in self.answers

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    # --- navigation ---

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Dict]:
        if self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    def go_to(self, index: int) -> None:
        if 0 <= index < len(self.questions):
            self.current_index = index

    def next_question(self) -> None:
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1

    def prev_question(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    # --- storage ---

    def to_result_row(self, user_id, package_id: Optional[str] = None) -> Dict:
        """Row for the exam_results table. Finishes the exam first if needed."""
        result = self.finish()
        scores = result["scores"]
        return {
            "user_id": str(user_id),
            "exam_type": exam_type_for(package_id),
            "score_total": scores["total"],
            "category_scores": {cat: scores.get(cat) or 0 for cat in CATEGORIES},
            "answers": result["answers"],
        }


def result_from_row(row: Dict) -> Dict:
    """Rebuild an exam result from a stored exam_results row (enough to rerun the ranker)."""
    answers = row.get("answers") or {}
    scores = {"total": row.get("score_total") or 0}
    scores.update(row.get("category_scores") or {})
    return {
        "exam_id": row.get("id"),
        "started_at": row.get("created_at"),
        "ended_at": row.get("created_at"),
        "duration": 0,
        "questions": 0,
        "answered": len(answers),
        "scores": scores,
        "answers": answers,
    }
