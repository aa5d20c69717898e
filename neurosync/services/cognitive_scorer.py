"""
Cognitive State Scorer: dorsal/ventral score updates from extraction analysis.
"""

from neurosync.models.extraction import ExtractionAnalysis
from neurosync.models.state import CognitiveLoad, SystemState
from neurosync.services.state_container import StateContainer

SCORE_MIN = 0.0
SCORE_MAX = 100.0
ANALYSIS_THRESHOLD = 50.0
REINFORCE_STEP = 5.0
DECAY_STEP = -2.0


def clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return max(low, min(high, value))


def derive_cognitive_load(dorsal_score: float, ventral_score: float) -> CognitiveLoad:
    """Display-only load bucket from the mean of both scores."""
    mean = (dorsal_score + ventral_score) / 2
    if mean < 30:
        return CognitiveLoad.LOW
    if mean <= 70:
        return CognitiveLoad.OPTIMAL
    if mean <= 85:
        return CognitiveLoad.HIGH
    return CognitiveLoad.OVERLOAD


def apply_analysis(state: SystemState, analysis: ExtractionAnalysis) -> SystemState:
    """
    Return a new state with both scores moved by one step.

    rigidity > 50 reinforces dorsal (+5), otherwise dorsal decays (-2);
    chaos drives ventral the same way. Both are clamped to [0, 100].
    """
    dorsal = clamp(
        state.dorsal_score
        + (REINFORCE_STEP if analysis.rigidity > ANALYSIS_THRESHOLD else DECAY_STEP)
    )
    ventral = clamp(
        state.ventral_score + (REINFORCE_STEP if analysis.chaos > ANALYSIS_THRESHOLD else DECAY_STEP)
    )
    return state.model_copy(
        update={
            "dorsal_score": dorsal,
            "ventral_score": ventral,
            "cognitive_load": derive_cognitive_load(dorsal, ventral),
        }
    )


class CognitiveStateScorer:
    """Applies analysis results to the shared SystemState."""

    def __init__(self, container: StateContainer):
        self.container = container

    def apply(self, analysis: ExtractionAnalysis) -> SystemState:
        return self.container.update_state(lambda state: apply_analysis(state, analysis))
