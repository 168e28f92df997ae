"""
The editorial workflow that a submission moves through.

Each stage id is also a value of :attr:`.Submission.status`. A submission is
in exactly one stage at a time; stages before it are considered complete, and
stages after it are pending. Statuses that are not stages (``draft``, and the
terminal rejection statuses) are outside of the workflow altogether.
"""

from typing import List, Optional, Tuple

from dataclasses import dataclass, field

COMPLETED = 'completed'
ACTIVE = 'active'
PENDING = 'pending'


@dataclass(frozen=True)
class Stage:
    """A step in the editorial workflow."""

    id: str
    name: str
    description: str
    depends_on: Tuple[str, ...] = field(default_factory=tuple)


SUBMITTED = 'submitted'
EDITORIAL_REVIEW = 'editorial_review'
REVIEWER_ASSIGNMENT = 'reviewer_assignment'
PEER_REVIEW = 'peer_review'
EDITORIAL_DECISION = 'editorial_decision'
REVISION_REQUESTED = 'revision_requested'
ACCEPTED = 'accepted'
COPYEDITING = 'copyediting'
PROOFREADING = 'proofreading'
TYPESETTING = 'typesetting'
PUBLISHED = 'published'

STAGES: List[Stage] = [
    Stage(SUBMITTED, 'Submitted', 'Initial submission received'),
    Stage(EDITORIAL_REVIEW, 'Editorial Review', 'Editor initial assessment'),
    Stage(REVIEWER_ASSIGNMENT, 'Reviewer Assignment',
          'Assign qualified reviewers', (EDITORIAL_REVIEW,)),
    Stage(PEER_REVIEW, 'Peer Review', 'Reviewers evaluate manuscript',
          (REVIEWER_ASSIGNMENT,)),
    Stage(EDITORIAL_DECISION, 'Editorial Decision',
          'Editor makes final decision', (PEER_REVIEW,)),
    Stage(REVISION_REQUESTED, 'Revision Request',
          'Author revisions if needed', (EDITORIAL_DECISION,)),
    Stage(ACCEPTED, 'Acceptance', 'Manuscript accepted for publication',
          (EDITORIAL_DECISION,)),
    Stage(COPYEDITING, 'Copyediting', 'Professional copyediting', (ACCEPTED,)),
    Stage(PROOFREADING, 'Proofreading', 'Final proofreading', (COPYEDITING,)),
    Stage(TYPESETTING, 'Typesetting', 'Format for publication',
          (PROOFREADING,)),
    Stage(PUBLISHED, 'Published', 'Article published', (TYPESETTING,)),
]

STAGE_IDS = [stage.id for stage in STAGES]
MAX_NEXT_STATES = 3


def get_stage(stage_id: str) -> Stage:
    """Get a :class:`.Stage` by id; raises ``KeyError`` if there is none."""
    for stage in STAGES:
        if stage.id == stage_id:
            return stage
    raise KeyError(f'No such workflow stage: {stage_id}')


def _index(status: Optional[str]) -> int:
    try:
        return STAGE_IDS.index(status)
    except ValueError:
        return -1


def is_stage(status: Optional[str]) -> bool:
    return _index(status) >= 0


def stage_state(stage_id: str, current: Optional[str]) -> str:
    """
    Get the state of a stage relative to the ``current`` status.

    Returns
    -------
    str
        One of :const:`COMPLETED`, :const:`ACTIVE`, or :const:`PENDING`.

    """
    position, here = _index(stage_id), _index(current)
    if here < 0:
        return PENDING
    if position < here:
        return COMPLETED
    if position == here:
        return ACTIVE
    return PENDING


def stages_for(current: Optional[str]) -> List[Tuple[Stage, str]]:
    """All stages, paired with their state relative to ``current``."""
    return [(stage, stage_state(stage.id, current)) for stage in STAGES]


def can_transition_to(current: Optional[str], target: str) -> bool:
    """
    Determine whether a submission at ``current`` may move to ``target``.

    The target must lie ahead of the current stage, and each of its
    dependencies must have been reached (i.e. be completed or active).
    """
    here, there = _index(current), _index(target)
    if here < 0 or there <= here:
        return False
    return all(stage_state(dep, current) in (COMPLETED, ACTIVE)
               for dep in get_stage(target).depends_on)


def next_states(current: Optional[str]) -> List[Stage]:
    """Up to three stages to which the submission may move next."""
    here = _index(current)
    if here < 0:
        return []
    return [stage for stage in STAGES[here + 1:]
            if can_transition_to(current, stage.id)][:MAX_NEXT_STATES]


def progress(current: Optional[str]) -> float:
    """Percentage of workflow stages that are complete."""
    completed = [s for s, state in stages_for(current) if state == COMPLETED]
    return len(completed) / len(STAGES) * 100
