"""
Validation of user-supplied form data.

Forms are described by a schema that maps each field name onto a list of
:class:`Rule` instances. Rules other than ``required`` and ``custom`` only
apply when the field has a value, so an optional field may be left blank.

.. code-block:: python

   >>> from ijsds.submission.validation import validate_form, PROFILE_FORM
   >>> errors = validate_form({'full_name': 'Ama Mensah', 'email': 'ama@'},
   ...                        PROFILE_FORM)
   >>> [(e.field, e.message) for e in errors]
   [('email', 'Enter a valid email address')]

"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, \
    Union

from dataclasses import dataclass, field

REQUIRED = 'required'
EMAIL = 'email'
MIN_LENGTH = 'min_length'
MAX_LENGTH = 'max_length'
PATTERN = 'pattern'
CUSTOM = 'custom'

ERROR = 'error'
SUCCESS = 'success'
DEFAULT = 'default'

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
ORCID_PATTERN = re.compile(r'^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$')


@dataclass
class ValidationError:
    """A problem with the value of a single field."""

    field: str
    message: str
    type: str = ERROR


@dataclass
class Rule:
    """A single constraint on the value of a field."""

    type: str
    message: str
    value: Optional[Union[int, str, Pattern]] = None
    """Length limit for ``min_length`` and ``max_length``, or a regex."""

    validator: Optional[Callable[[Any], bool]] = field(default=None)
    """For ``custom`` rules; returns ``True`` if the value is acceptable."""

    def __post_init__(self) -> None:
        if self.type == PATTERN and isinstance(self.value, str):
            self.value = re.compile(self.value)
        if self.type == CUSTOM and self.validator is None:
            raise ValueError('Custom rules require a validator')

    def check(self, value: Any) -> bool:
        """Determine whether ``value`` satisfies this rule."""
        if self.type == REQUIRED:
            return not _is_blank(value)
        if self.type == CUSTOM:
            assert self.validator is not None
            return bool(self.validator(value))
        if _is_blank(value):
            return True
        if self.type == EMAIL:
            return bool(EMAIL_PATTERN.match(str(value)))
        if self.type == MIN_LENGTH:
            return not isinstance(value, str) or len(value) >= self.value
        if self.type == MAX_LENGTH:
            return not isinstance(value, str) or len(value) <= self.value
        if self.type == PATTERN:
            return bool(self.value.match(str(value)))
        raise ValueError(f'Unknown rule type: {self.type}')


Schema = Mapping[str, List[Rule]]


def _is_blank(value: Any) -> bool:
    return not value or (isinstance(value, str) and not value.strip())


def validate_field(name: str, value: Any, rules: List[Rule]) \
        -> Optional[ValidationError]:
    """Get the first rule violated by ``value``, if any."""
    for rule in rules:
        if not rule.check(value):
            return ValidationError(field=name, message=rule.message)
    return None


def validate_form(data: Mapping[str, Any], schema: Schema) \
        -> List[ValidationError]:
    """
    Validate form data against a schema.

    Parameters
    ----------
    data : dict
        Field values, keyed by field name. Missing fields are treated as
        blank.
    schema : dict
        Lists of :class:`Rule`, keyed by field name.

    Returns
    -------
    list
        Every :class:`ValidationError` found, in schema order. The form is
        valid if this is empty.

    """
    errors: List[ValidationError] = []
    for name, rules in schema.items():
        value = data.get(name)
        errors.extend(ValidationError(field=name, message=rule.message)
                      for rule in rules if not rule.check(value))
    return errors


def field_status(name: str, value: Any, rules: List[Rule]) -> str:
    """``error`` if invalid, ``success`` if valid and filled in."""
    if validate_field(name, value, rules) is not None:
        return ERROR
    if value:
        return SUCCESS
    return DEFAULT


def errors_by_field(errors: List[ValidationError]) -> Dict[str, List[str]]:
    """Group error messages by field, e.g. for a JSON response."""
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error.message)
    return grouped


def _few_enough_keywords(value: Any) -> bool:
    if isinstance(value, str):
        value = [k for k in value.split(',') if k.strip()]
    return len(value or []) <= 10


SUBMISSION_FORM: Schema = {
    'title': [
        Rule(REQUIRED, 'Title is required'),
        Rule(MIN_LENGTH, 'Title must be at least 10 characters', 10),
        Rule(MAX_LENGTH, 'Title must be at most 300 characters', 300),
    ],
    'abstract': [
        Rule(REQUIRED, 'Abstract is required'),
        Rule(MIN_LENGTH, 'Abstract must be at least 100 characters', 100),
        Rule(MAX_LENGTH, 'Abstract must be at most 5000 characters', 5000),
    ],
    'keywords': [
        Rule(REQUIRED, 'At least one keyword is required'),
        Rule(CUSTOM, 'No more than 10 keywords',
             validator=_few_enough_keywords),
    ],
    'corresponding_author_email': [
        Rule(REQUIRED, 'Corresponding author email is required'),
        Rule(EMAIL, 'Enter a valid email address'),
    ],
}

REVIEW_FORM: Schema = {
    'recommendation': [
        Rule(REQUIRED, 'A recommendation is required'),
        Rule(PATTERN, 'Unknown recommendation',
             r'^(accept|minor_revisions|major_revisions|reject)$'),
    ],
    'comments_to_author': [
        Rule(REQUIRED, 'Comments to the author are required'),
        Rule(MIN_LENGTH, 'Comments must be at least 50 characters', 50),
    ],
}

PROFILE_FORM: Schema = {
    'full_name': [
        Rule(REQUIRED, 'Full name is required'),
        Rule(MAX_LENGTH, 'Full name must be at most 200 characters', 200),
    ],
    'email': [
        Rule(REQUIRED, 'Email is required'),
        Rule(EMAIL, 'Enter a valid email address'),
    ],
    'orcid_id': [
        Rule(PATTERN, 'ORCID iD must look like 0000-0002-1825-0097',
             ORCID_PATTERN),
    ],
}
