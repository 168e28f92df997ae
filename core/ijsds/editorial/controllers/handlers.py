"""
Translation of the submission payload into events.

Each handler accepts the value of the field that it handles (anything that
can be deserialized from JSON), and a dict of ``creator``, ``proxy`` and
``client`` agents to use when creating events. :func:`handle_submission`
delegates to the handlers according to ``HANDLERS``, at the end of this
module.

Handlers check only that structured fields have the right shape (raising
:class:`werkzeug.exceptions.BadRequest` if not); events validate content.
"""

from typing import Any, Dict, List, Tuple

from werkzeug.exceptions import BadRequest

import ijsds.submission as ev

AUTHOR_FIELDS = ('name', 'email', 'affiliation', 'orcid')


def handle_submission(data: dict, agents: dict) -> Tuple[ev.Event, ...]:
    """
    Handle the submission payload.

    Parameters
    ----------
    data : dict
    agents : dict
        Values are :class:`.Agent` instances.

    Returns
    -------
    tuple
        Zero or more uncommitted :class:`.Event` instances, in the order of
        ``HANDLERS``.

    """
    _events: List[ev.Event] = []
    for key, handler in HANDLERS:
        value = data.get(key)
        if value is None:
            continue
        _events += handler(value, agents)
    return tuple(_events)


def handle_title(data: str, agents: dict) -> Tuple[ev.Event, ...]:
    return ev.SetTitle(**agents, title=data),


def handle_abstract(data: str, agents: dict) -> Tuple[ev.Event, ...]:
    return ev.SetAbstract(**agents, abstract=data),


def handle_keywords(data: Any, agents: dict) -> Tuple[ev.Event, ...]:
    """Keywords may be a list, or a comma-delimited string."""
    return ev.SetKeywords(**agents, keywords=data),


def handle_subject_area(data: str, agents: dict) -> Tuple[ev.Event, ...]:
    return ev.SetSubjectArea(**agents, subject_area=data),


def handle_authors(data: List[Dict[str, Any]], agents: dict) \
        -> Tuple[ev.Event, ...]:
    """
    Handle the ``authors`` field in the submission payload.

    One author may be flagged ``"corresponding": true``; otherwise the first
    author is the corresponding author.
    """
    if not isinstance(data, list):
        raise BadRequest('authors must be a list')
    authors = []
    corresponding = None
    for datum in data:
        if not isinstance(datum, dict):
            raise BadRequest('Each author must be an object')
        values = {key: datum.get(key) for key in AUTHOR_FIELDS
                  if datum.get(key) is not None}
        for key, value in values.items():
            if not isinstance(value, str):
                raise BadRequest(f'Author {key} must be a string')
        if datum.get('corresponding', False):
            corresponding = values.get('email')
        authors.append(ev.Author(**values))
    return ev.SetAuthors(**agents, authors=authors,
                         corresponding_author_email=corresponding),


def handle_cover_letter(data: str, agents: dict) -> Tuple[ev.Event, ...]:
    return ev.SetCoverLetter(**agents, cover_letter=data),


def handle_reviewer_suggestions(data: str, agents: dict) \
        -> Tuple[ev.Event, ...]:
    return ev.SetReviewerSuggestions(**agents, reviewer_suggestions=data),


def handle_funding(data: str, agents: dict) -> Tuple[ev.Event, ...]:
    return ev.SetFunding(**agents, funding_info=data),


def handle_conflicts_of_interest(data: str, agents: dict) \
        -> Tuple[ev.Event, ...]:
    return ev.SetConflictsOfInterest(**agents, conflicts_of_interest=data),


def handle_manuscript(data: Dict[str, Any], agents: dict) \
        -> Tuple[ev.Event, ...]:
    """The manuscript has already been uploaded to object storage."""
    if not isinstance(data, dict):
        raise BadRequest('manuscript must be an object')
    return ev.AttachManuscript(**agents,
                               file_name=data.get('file_name', ''),
                               file_url=data.get('file_url', ''),
                               description=data.get('description')),


HANDLERS = [
    ('title', handle_title),
    ('abstract', handle_abstract),
    ('keywords', handle_keywords),
    ('subject_area', handle_subject_area),
    ('authors', handle_authors),
    ('cover_letter', handle_cover_letter),
    ('reviewer_suggestions', handle_reviewer_suggestions),
    ('funding_info', handle_funding),
    ('conflicts_of_interest', handle_conflicts_of_interest),
    ('manuscript', handle_manuscript),
]
