"""Divination pipeline orchestrator

Runs the five agents in a fixed order with one bounded feedback loop:

    ┌────────────┐     ┌─────────┐     ┌────┐     ┌────────────────┐     ┌─────────────┐
    │ QUESTION   │────▶│ LIU YAO │────▶│ QA │────▶│ CONTEXTUALIZER │────▶│ SYNTHESIZER │
    │ PROCESSOR  │     │ EXPERT  │     └─┬──┘     └────────────────┘     └─────────────┘
    └────────────┘     └─────────┘       │
                            ▲            │ inconsistent (up to max_review_iterations)
                            └────────────┘

Only generation failures abort a run. Malformed model output degrades inside
the agent parsers, and a QA loop that never approves still produces an
answer with qa_satisfied=False.
"""

import logging
from enum import Enum
from typing import List, Optional

from .generation import GenerationClient
from .invocation import execute_agent
from .prompts import (
    DEFAULT_QA_FEEDBACK,
    contextualizer_agent,
    liu_yao_expert_agent,
    qa_agent,
    question_processor_agent,
    synthesizer_agent,
)
from .types import AgentRuntimeInput, AgentStep, OrchestrationResult, QaEvaluation

logger = logging.getLogger(__name__)

DEFAULT_MAX_REVIEW_ITERATIONS = 3


class ReviewState(str, Enum):
    """States of the QA review loop"""
    REVIEWING = "reviewing"
    REVISING = "revising"
    APPROVED = "approved"
    EXHAUSTED = "exhausted"


class ReviewLoop:
    """
    Bookkeeping for the QA review loop.

    REVIEWING -> APPROVED on a consistent evaluation, otherwise -> REVISING.
    REVISING -> REVIEWING once the revised analysis is in, or -> EXHAUSTED
    when the review budget is spent. APPROVED and EXHAUSTED are terminal.
    """

    def __init__(self, max_iterations: int):
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, int):
            raise ValueError(
                f"max_review_iterations must be an integer, got {max_iterations!r}"
            )
        if max_iterations < 0:
            raise ValueError(
                f"max_review_iterations must be >= 0, got {max_iterations}"
            )

        self.max_iterations = max_iterations
        self.iterations = 0
        self.feedback: Optional[str] = None
        self.state = ReviewState.REVIEWING if max_iterations > 0 else ReviewState.EXHAUSTED

    @property
    def is_terminal(self) -> bool:
        return self.state in (ReviewState.APPROVED, ReviewState.EXHAUSTED)

    @property
    def approved(self) -> bool:
        return self.state is ReviewState.APPROVED

    def record_review(self, evaluation: QaEvaluation) -> ReviewState:
        """Apply one QA verdict and return the new state."""
        if self.state is not ReviewState.REVIEWING:
            raise RuntimeError(f"Cannot record a review while {self.state.value}")

        self.iterations += 1
        if evaluation.consistent:
            self.state = ReviewState.APPROVED
        else:
            self.feedback = (
                evaluation.feedback
                if evaluation.feedback is not None
                else DEFAULT_QA_FEEDBACK
            )
            self.state = ReviewState.REVISING
        return self.state

    def record_revision(self) -> ReviewState:
        """Mark the revised analysis as produced and return the new state."""
        if self.state is not ReviewState.REVISING:
            raise RuntimeError(f"Cannot record a revision while {self.state.value}")

        if self.iterations < self.max_iterations:
            self.state = ReviewState.REVIEWING
        else:
            self.state = ReviewState.EXHAUSTED
        return self.state


class DivinationOrchestrator:
    """
    Drives one question through the divination agents.

    Instances hold no per-run state, so a single orchestrator can serve
    concurrent runs.
    """

    def __init__(
        self,
        client: GenerationClient,
        max_review_iterations: int = DEFAULT_MAX_REVIEW_ITERATIONS,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            client: Generation backend used by every agent
            max_review_iterations: Maximum number of QA reviews per run
            logger: Receives debug/warning diagnostics (module logger by default)
        """
        # Validates the budget
        ReviewLoop(max_review_iterations)

        self.client = client
        self.max_review_iterations = max_review_iterations
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    async def run(self, question: str) -> OrchestrationResult:
        """
        Run the full pipeline for a question.

        Args:
            question: The seeker's question

        Returns:
            OrchestrationResult with the final answer, QA flag and all steps

        Raises:
            AgentInvocationError: If any generation call fails
        """
        steps: List[AgentStep] = []

        # Stage 1: Intake
        logger.info(f"Stage 1: Refining question: {question[:100]}")
        processing = await execute_agent(
            question_processor_agent,
            self.client,
            AgentRuntimeInput(question=question, previous_steps=tuple(steps)),
        )
        refined_question = (
            processing.output if isinstance(processing.output, str) else question
        )
        steps.append(processing.step)

        # Stage 2: Analysis
        logger.info("Stage 2: Running Liu Yao analysis")
        liu_yao_analysis = await self._run_liu_yao_agent(steps, refined_question, None)

        # Stage 3: QA review loop
        review = ReviewLoop(self.max_review_iterations)
        while not review.is_terminal:
            logger.info(
                f"Stage 3: QA review {review.iterations + 1}/{review.max_iterations}"
            )
            qa_result = await execute_agent(
                qa_agent,
                self.client,
                AgentRuntimeInput(
                    question=refined_question,
                    liu_yao_analysis=liu_yao_analysis,
                    qa_feedback=review.feedback,
                    previous_steps=tuple(steps),
                ),
            )
            steps.append(qa_result.step)

            if review.record_review(qa_result.output) is ReviewState.APPROVED:
                self.logger.debug(
                    f"QA iteration {review.iterations} approved the Liu Yao analysis."
                )
                break

            self.logger.warning(
                f"QA iteration {review.iterations} detected inconsistencies. "
                f"Feedback: {review.feedback}"
            )
            liu_yao_analysis = await self._run_liu_yao_agent(
                steps, refined_question, review.feedback
            )
            review.record_revision()

        if not review.approved:
            self.logger.warning(
                f"QA loop ended without full approval after {review.iterations} "
                f"iteration(s). Proceeding with best available analysis."
            )

        # Stage 4: Real-world context
        logger.info("Stage 4: Mapping reading to real-world context")
        context_result = await execute_agent(
            contextualizer_agent,
            self.client,
            AgentRuntimeInput(
                question=refined_question,
                liu_yao_analysis=liu_yao_analysis,
                qa_feedback=review.feedback,
                previous_steps=tuple(steps),
            ),
        )
        context_notes = (
            context_result.output
            if isinstance(context_result.output, str)
            else context_result.step.response
        )
        steps.append(context_result.step)

        # Stage 5: Synthesis
        logger.info("Stage 5: Synthesizing final answer")
        synthesizer_result = await execute_agent(
            synthesizer_agent,
            self.client,
            AgentRuntimeInput(
                question=refined_question,
                liu_yao_analysis=liu_yao_analysis,
                qa_feedback=review.feedback,
                context_notes=context_notes,
                previous_steps=tuple(steps),
            ),
        )
        final_answer = (
            synthesizer_result.output
            if isinstance(synthesizer_result.output, str)
            else synthesizer_result.step.response
        )
        steps.append(synthesizer_result.step)

        logger.info(
            f"Divination pipeline completed in {len(steps)} steps "
            f"(qa_satisfied={review.approved}, reviews={review.iterations})"
        )

        return OrchestrationResult(
            final_answer=final_answer,
            qa_satisfied=review.approved,
            steps=tuple(steps),
        )

    async def _run_liu_yao_agent(
        self,
        steps: List[AgentStep],
        refined_question: str,
        feedback: Optional[str],
    ) -> str:
        """Run the analyzer, append its step and return the analysis text."""
        result = await execute_agent(
            liu_yao_expert_agent,
            self.client,
            AgentRuntimeInput(
                question=refined_question,
                qa_feedback=feedback,
                previous_steps=tuple(steps),
            ),
        )
        steps.append(result.step)
        self.logger.debug(
            "Re-running Liu Yao agent with QA feedback applied."
            if feedback
            else "Executed Liu Yao agent."
        )
        return result.output if isinstance(result.output, str) else result.step.response


async def run_divination_orchestration(
    question: str,
    client: GenerationClient,
    max_review_iterations: int = DEFAULT_MAX_REVIEW_ITERATIONS,
    logger: Optional[logging.Logger] = None,
) -> OrchestrationResult:
    """
    Run the divination pipeline once.

    Args:
        question: The seeker's question
        client: Generation backend
        max_review_iterations: Maximum number of QA reviews (default 3)
        logger: Optional diagnostics logger

    Returns:
        OrchestrationResult
    """
    orchestrator = DivinationOrchestrator(
        client,
        max_review_iterations=max_review_iterations,
        logger=logger,
    )
    return await orchestrator.run(question)
