"""Tests for :mod:`ijsds.editorial.controllers.handlers`."""

from unittest import TestCase

from werkzeug.exceptions import BadRequest

import ijsds.submission as ev
from ijsds.submission import User

from ..controllers import handlers


class TestHandleSubmission(TestCase):
    """The submission payload is turned into events."""

    def setUp(self):
        """Agents for the events."""
        self.agents = {'creator': User('1', 'ama@uni.edu'), 'proxy': None,
                       'client': None}

    def test_empty(self):
        """No fields, no events."""
        self.assertEqual(handlers.handle_submission({}, self.agents), ())

    def test_order_and_types(self):
        """Events are generated in a fixed order, regardless of payload."""
        data = {
            'manuscript': {'file_name': 'paper.pdf',
                           'file_url': 'https://files.ijsds.org/1.pdf'},
            'keywords': 'survey methods, data quality',
            'title': 'Measuring trust in open data portals',
            'unrecognized': 'ignored',
        }
        events = handlers.handle_submission(data, self.agents)
        self.assertEqual([type(e) for e in events],
                         [ev.SetTitle, ev.SetKeywords, ev.AttachManuscript])
        self.assertEqual(events[1].keywords,
                         ['survey methods', 'data quality'])
        self.assertEqual(events[2].file_name, 'paper.pdf')
        for event in events:
            self.assertEqual(event.creator, self.agents['creator'])

    def test_authors(self):
        """The flagged author is the corresponding author."""
        data = {'authors': [
            {'name': 'Ama Mensah', 'email': 'ama@uni.edu'},
            {'name': 'Kofi Boateng', 'email': 'kofi@uni.edu',
             'affiliation': 'University of Ghana', 'corresponding': True},
        ]}
        event, = handlers.handle_submission(data, self.agents)
        self.assertIsInstance(event, ev.SetAuthors)
        self.assertEqual(event.corresponding_author_email, 'kofi@uni.edu')
        self.assertEqual([a.order for a in event.authors], [0, 1])
        self.assertEqual(event.authors[1].affiliation, 'University of Ghana')

    def test_authors_without_flag(self):
        """The corresponding author is left for the event to decide."""
        data = {'authors': [{'name': 'Ama Mensah', 'email': 'ama@uni.edu'}]}
        event, = handlers.handle_submission(data, self.agents)
        self.assertIsNone(event.corresponding_author_email)

    def test_authors_with_nulls(self):
        """Missing values are left for the event to complain about."""
        data = {'authors': [{'name': 'Ama Mensah', 'email': None,
                             'affiliation': None}]}
        event, = handlers.handle_submission(data, self.agents)
        self.assertEqual(event.authors[0].name, 'Ama Mensah')
        self.assertEqual(event.authors[0].email, '')
        self.assertEqual(event.authors[0].affiliation, '')

    def test_malformed_authors(self):
        """Authors that are not a list of objects are a bad request."""
        for authors in ('Ama Mensah', {'name': 'Ama Mensah'}, ['Ama Mensah'],
                        [{'name': 'Ama Mensah', 'email': 42}]):
            with self.assertRaises(BadRequest):
                handlers.handle_submission({'authors': authors}, self.agents)

    def test_malformed_manuscript(self):
        """The manuscript must be described by an object."""
        with self.assertRaises(BadRequest):
            handlers.handle_submission({'manuscript': 'paper.pdf'},
                                       self.agents)
