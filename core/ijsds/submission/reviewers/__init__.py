"""
Tools that help editors run peer review.

These are plain, stateless functions over domain objects: they suggest and
score, but never change a submission. Acting on a suggestion means creating
events (e.g. :class:`.InviteReviewer`), which :func:`.assignment.auto_assign`
does for the common case.
"""

from .matching import ReviewerMatch, ReviewHistory, match_reviewers, \
    match_band
from .conflicts import ConflictReport, detect_conflicts
from .quality import QualityScore, score_review
from .performance import ReviewerPerformance, reviewer_performance
from .rounds import RoundSummary, round_summaries, current_round
from .assignment import auto_assign
