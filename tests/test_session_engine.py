"""Unit tests for the quiz/learn session state machine."""
import pytest
from app.data.vocabulary import WordEntry
from app.exceptions import InvalidOptionError, InvalidStateError
from app.services.session_engine import (
    LEARN_POLICY,
    QUIZ_POLICY,
    Phase,
    SessionEngine,
    SessionMode,
    create_session,
    policy_for
)
from app.constants import CORRECT_DWELL_SECONDS, RETRY_DWELL_SECONDS, QUIZ_WRONG_DWELL_SECONDS


def wrong_option(question):
    return next(o for o in question.options if o.id != question.target.id)


@pytest.fixture
def events():
    return {"snapshots": [], "results": []}


@pytest.fixture
def make_engine(questions, scheduler, speaker, events):
    def factory(policy=QUIZ_POLICY, **kwargs):
        engine = SessionEngine(
            questions,
            policy=policy,
            scheduler=scheduler,
            speaker=kwargs.pop("speaker", speaker),
            on_change=events["snapshots"].append,
            on_complete=events["results"].append,
            **kwargs
        )
        engine.start()
        return engine
    return factory


class TestStart:

    def test_starts_answering_first_question(self, make_engine, questions):
        engine = make_engine()
        assert engine.phase == Phase.ANSWERING
        assert engine.current_index == 0
        assert engine.current_question == questions[0]
        assert engine.score_correct == 0
        assert engine.score_wrong == 0

    def test_first_word_is_pronounced(self, make_engine, speaker, questions):
        make_engine()
        assert speaker.spoken == [questions[0].target.word]

    def test_start_is_idempotent(self, make_engine, speaker):
        engine = make_engine()
        engine.start()
        assert len(speaker.spoken) == 1

    def test_empty_question_list_rejected(self, scheduler):
        with pytest.raises(ValueError):
            SessionEngine([], scheduler=scheduler)

    def test_questions_are_copied(self, questions, scheduler):
        engine = SessionEngine(questions, scheduler=scheduler)
        questions.pop()
        assert engine.total_questions == 5


class TestCorrectAnswer:

    def test_enters_feedback_and_scores(self, make_engine, questions, scheduler):
        engine = make_engine()
        feedback = engine.select(questions[0].target)

        assert feedback.is_correct is True
        assert feedback.selected_option == questions[0].target
        assert engine.phase == Phase.FEEDBACK
        assert engine.score_correct == 1
        assert engine.current_index == 0
        assert scheduler.pending[0].delay == CORRECT_DWELL_SECONDS

    def test_advances_after_dwell(self, make_engine, questions, scheduler, speaker):
        engine = make_engine()
        engine.select(questions[0].target)
        scheduler.run_pending()

        assert engine.phase == Phase.ANSWERING
        assert engine.current_index == 1
        assert engine.feedback is None
        assert speaker.spoken == [questions[0].target.word, questions[1].target.word]


class TestQuizMode:

    def test_all_correct_scenario(self, make_engine, questions, scheduler, events):
        """5 questions answered correctly on the first try -> (5, 5), one completion."""
        engine = make_engine(QUIZ_POLICY)
        for question in questions:
            engine.select(question.target)
            scheduler.run_pending()

        assert engine.phase == Phase.COMPLETE
        assert len(events["results"]) == 1
        result = events["results"][0]
        assert (result.score_correct, result.total_questions) == (5, 5)
        assert result.score_wrong == 0
        assert result.accuracy == 1.0

    def test_wrong_answer_advances(self, make_engine, questions, scheduler):
        engine = make_engine(QUIZ_POLICY)
        engine.select(wrong_option(questions[0]))

        assert scheduler.pending[0].delay == QUIZ_WRONG_DWELL_SECONDS
        scheduler.run_pending()
        assert engine.current_index == 1
        assert engine.score_wrong == 1

    @pytest.mark.parametrize("pattern", [
        [True, True, True, True, True],
        [False, False, False, False, False],
        [True, False, True, False, True],
        [False, True, True, True, False],
    ])
    def test_scores_sum_to_total(self, make_engine, questions, scheduler, events, pattern):
        engine = make_engine(QUIZ_POLICY)
        for question, correct in zip(questions, pattern):
            engine.select(question.target if correct else wrong_option(question))
            scheduler.run_pending()

        result = events["results"][0]
        assert len(events["results"]) == 1
        assert result.score_correct + result.score_wrong == result.total_questions
        assert result.score_correct == sum(pattern)


class TestLearnMode:

    def test_wrong_twice_then_correct_scenario(self, make_engine, questions, scheduler):
        engine = make_engine(LEARN_POLICY)
        first = questions[0]

        engine.select(wrong_option(first))
        assert scheduler.pending[0].delay == RETRY_DWELL_SECONDS
        scheduler.run_pending()
        assert engine.current_index == 0
        assert engine.phase == Phase.ANSWERING

        engine.select(wrong_option(first))
        scheduler.run_pending()
        assert engine.current_index == 0

        engine.select(first.target)
        assert engine.current_index == 0
        scheduler.run_pending()

        assert engine.current_index == 1
        assert engine.score_wrong == 2
        assert engine.score_correct == 1

    def test_retry_does_not_pronounce_again(self, make_engine, questions, scheduler, speaker):
        engine = make_engine(LEARN_POLICY)
        engine.select(wrong_option(questions[0]))
        scheduler.run_pending()
        assert speaker.spoken == [questions[0].target.word]

    def test_mistakes_can_exceed_question_count(self, make_engine, questions, scheduler, events):
        engine = make_engine(LEARN_POLICY)
        for question in questions:
            for _ in range(2):
                engine.select(wrong_option(question))
                scheduler.run_pending()
            engine.select(question.target)
            scheduler.run_pending()

        result = events["results"][0]
        assert result.mode == SessionMode.LEARN
        assert result.mistakes == 10
        assert result.score_wrong > result.total_questions
        assert result.score_correct == 5

    def test_index_only_moves_on_correct(self, make_engine, questions, scheduler, events):
        engine = make_engine(LEARN_POLICY)
        engine.select(wrong_option(questions[0]))
        scheduler.run_pending()
        engine.select(questions[0].target)
        scheduler.run_pending()

        indices = [s.current_index for s in events["snapshots"]]
        assert indices == sorted(indices)
        assert engine.current_index == 1


class TestFeedbackGuard:

    def test_select_during_feedback_is_ignored(self, make_engine, questions):
        engine = make_engine()
        engine.select(wrong_option(questions[0]))

        assert engine.select(questions[0].target) is None
        assert engine.select(wrong_option(questions[0])) is None
        assert engine.score_correct == 0
        assert engine.score_wrong == 1

    def test_only_one_transition_pending(self, make_engine, questions, scheduler):
        engine = make_engine()
        engine.select(questions[0].target)
        engine.select(questions[0].target)
        assert len(scheduler.pending) == 1

    def test_select_by_id_during_feedback_is_ignored(self, make_engine, questions):
        engine = make_engine()
        engine.select(questions[0].target)
        assert engine.select_by_id(999) is None


class TestErrors:

    def test_option_not_in_question(self, make_engine, questions):
        engine = make_engine()
        before = engine.snapshot()
        stranger = WordEntry(id=6, word="cow", meaning="소")

        with pytest.raises(InvalidOptionError):
            engine.select(stranger)

        assert engine.snapshot() == before

    def test_same_id_different_entry_rejected(self, make_engine, questions):
        engine = make_engine()
        target = questions[0].target
        impostor = WordEntry(id=target.id, word=target.word, meaning="wrong")
        with pytest.raises(InvalidOptionError):
            engine.select(impostor)

    def test_unknown_option_id(self, make_engine):
        engine = make_engine()
        with pytest.raises(InvalidOptionError):
            engine.select_by_id(999)

    def test_select_after_complete(self, make_engine, questions, scheduler):
        engine = make_engine()
        for question in questions:
            engine.select(question.target)
            scheduler.run_pending()

        with pytest.raises(InvalidStateError):
            engine.select(questions[-1].target)
        with pytest.raises(InvalidStateError):
            engine.select_by_id(questions[-1].target.id)

    def test_select_after_close(self, make_engine, questions):
        engine = make_engine()
        engine.close()
        with pytest.raises(InvalidStateError):
            engine.select(questions[0].target)


class TestCompletion:

    def test_complete_state(self, make_engine, questions, scheduler):
        engine = make_engine()
        for question in questions:
            engine.select(question.target)
            scheduler.run_pending()

        snapshot = engine.snapshot()
        assert snapshot.phase == Phase.COMPLETE
        assert snapshot.current_question is None
        assert snapshot.current_index == snapshot.total == 5
        assert snapshot.progress == 1.0
        assert engine.result.total_questions == 5

    def test_last_answer_does_not_complete_before_dwell(self, make_engine, questions, scheduler, events):
        engine = make_engine()
        for question in questions[:-1]:
            engine.select(question.target)
            scheduler.run_pending()
        engine.select(questions[-1].target)

        assert engine.phase == Phase.FEEDBACK
        assert events["results"] == []


class TestCancellation:

    def test_close_cancels_pending_transition(self, make_engine, questions, scheduler):
        engine = make_engine()
        engine.select(questions[0].target)
        handle = scheduler.pending[0]

        engine.close()

        assert handle.cancelled
        assert not engine.has_pending_transition

    def test_late_callback_does_not_mutate_closed_session(self, make_engine, questions, scheduler, events):
        engine = make_engine()
        for question in questions[:-1]:
            engine.select(question.target)
            scheduler.run_pending()
        engine.select(questions[-1].target)
        late = scheduler.pending[0]

        engine.close()
        late.callback()

        assert engine.phase == Phase.FEEDBACK
        assert engine.current_index == 4
        assert events["results"] == []

    def test_close_is_idempotent(self, make_engine):
        engine = make_engine()
        engine.close()
        engine.close()
        assert engine.is_closed


class TestSpeech:

    def test_broken_speaker_does_not_block(self, make_engine, questions, scheduler, broken_speaker):
        engine = make_engine(speaker=broken_speaker)

        engine.select(questions[0].target)
        scheduler.run_pending()

        assert broken_speaker.calls == 2
        assert engine.current_index == 1

    def test_no_speaker(self, questions, scheduler):
        engine = SessionEngine(questions, scheduler=scheduler)
        engine.start()
        engine.select(questions[0].target)
        scheduler.run_pending()
        assert engine.current_index == 1


class TestSnapshots:

    def test_snapshot_after_every_transition(self, make_engine, questions, scheduler, events):
        engine = make_engine()
        engine.select(questions[0].target)
        scheduler.run_pending()

        phases = [s.phase for s in events["snapshots"]]
        assert phases == [Phase.ANSWERING, Phase.FEEDBACK, Phase.ANSWERING]
        assert events["snapshots"][1].feedback.is_correct is True

    def test_progress(self, make_engine, questions, scheduler):
        engine = make_engine()
        engine.select(questions[0].target)
        scheduler.run_pending()
        assert engine.snapshot().progress == pytest.approx(0.2)


class TestCreateSession:

    def test_builds_and_starts(self, day1_words, scheduler, speaker, rng):
        engine = create_session(day1_words, SessionMode.LEARN, scheduler=scheduler, speaker=speaker, rng=rng)

        assert engine.policy is LEARN_POLICY
        assert engine.total_questions == len(day1_words)
        assert speaker.spoken == [engine.current_question.target.word]

    def test_policy_for(self):
        assert policy_for(SessionMode.QUIZ) is QUIZ_POLICY
        assert policy_for("learn") is LEARN_POLICY
