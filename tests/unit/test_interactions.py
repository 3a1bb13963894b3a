"""Unit tests for block dispatch and per-block interactions."""
import pytest

from lessons.blocks import LessonBlock
from lessons.dispatch import BlockDispatcher, build_dispatcher
from lessons.interactions import (
    InteractionError,
    MultipleChoiceInteraction,
    PresentationInteraction,
    SpellingChallengeInteraction,
    UnsupportedInteraction,
)


@pytest.mark.unit
class TestDispatcher:
    def test_auto_completing_types(self):
        dispatcher = build_dispatcher()
        for block_type in ("discovery", "pronunciation", "recap"):
            assert dispatcher.resolve(block_type).auto_completes is True
        for block_type in ("multiple-choice", "spelling-challenge"):
            assert dispatcher.resolve(block_type).auto_completes is False

    def test_unknown_type_resolves_to_unsupported(self):
        policy = build_dispatcher().resolve("video")
        assert not policy.supported
        assert policy.auto_completes is False
        block = LessonBlock(id="v", type="video", content=None)
        assert isinstance(policy.create(block), UnsupportedInteraction)

    def test_duplicate_registration_rejected(self):
        dispatcher = BlockDispatcher()
        dispatcher.register("recap", PresentationInteraction, auto_completes=True)
        with pytest.raises(ValueError):
            dispatcher.register("recap", PresentationInteraction)

    def test_list_types(self):
        assert set(build_dispatcher().list_types()) == {
            "discovery", "pronunciation", "multiple-choice", "spelling-challenge", "recap",
        }


@pytest.mark.unit
class TestMultipleChoice:
    @pytest.fixture
    def interaction(self, lesson_content):
        return MultipleChoiceInteraction(lesson_content.blocks[2])

    def test_wrong_then_right(self, interaction):
        wrong = interaction.select("Cześć")
        assert not wrong.correct and not wrong.completes_block
        assert wrong.correct_answer == "Dziękuję"
        assert not interaction.complete

        right = interaction.select("Dziękuję")
        assert right.correct and right.completes_block
        assert right.correct_answer is None
        assert interaction.complete
        assert interaction.attempts == 2

    def test_locked_after_correct(self, interaction):
        interaction.select("Dziękuję")
        with pytest.raises(InteractionError):
            interaction.select("Proszę")

    def test_unknown_option_rejected(self, interaction):
        with pytest.raises(InteractionError):
            interaction.select("Hello")
        assert interaction.attempts == 0

    def test_state_round_trip(self, interaction, lesson_content):
        interaction.select("Proszę")
        restored = MultipleChoiceInteraction(lesson_content.blocks[2])
        restored.load_state(interaction.to_state())
        assert restored.selected == "Proszę"
        assert restored.correct is False
        assert restored.attempts == 1


@pytest.mark.unit
class TestSpellingChallenge:
    @pytest.fixture
    def interaction(self, lesson_content):
        return SpellingChallengeInteraction(lesson_content.blocks[3])

    def test_full_sequence(self, interaction):
        first = interaction.select("Czesc")
        assert not first.correct and not first.completes_block
        assert first.question_index == 0
        assert not interaction.complete

        assert interaction.next_question() == 1
        last = interaction.select("Dziękuję")
        assert last.correct and last.completes_block
        assert interaction.complete
        assert interaction.score == 1

    def test_completes_even_when_last_answer_wrong(self, interaction):
        interaction.select("Cześć")
        interaction.next_question()
        feedback = interaction.select("Dzienkuje")
        assert not feedback.correct
        assert feedback.completes_block
        assert interaction.complete

    def test_one_answer_per_question(self, interaction):
        interaction.select("Cześć")
        with pytest.raises(InteractionError):
            interaction.select("Czesc")

    def test_cannot_skip_unanswered_question(self, interaction):
        with pytest.raises(InteractionError):
            interaction.next_question()

    def test_cannot_go_past_last_question(self, interaction):
        interaction.select("Cześć")
        interaction.next_question()
        interaction.select("Dziękuję")
        with pytest.raises(InteractionError):
            interaction.next_question()


@pytest.mark.unit
class TestPresentationAndUnsupported:
    def test_presentation_always_complete(self, lesson_content):
        interaction = PresentationInteraction(lesson_content.blocks[0])
        assert interaction.complete
        with pytest.raises(InteractionError):
            interaction.select("anything")

    def test_unsupported_proceed(self):
        interaction = UnsupportedInteraction(LessonBlock(id="v", type="video", content=None))
        assert not interaction.complete
        interaction.proceed()
        assert interaction.complete
