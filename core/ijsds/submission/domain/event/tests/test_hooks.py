"""Test callback hook functionality on :class:`Event`."""

from unittest import TestCase, mock

from dataclasses import dataclass

from ..base import Event
from ...agent import System, User
from ...submission import Submission


class TestCommitEvent(TestCase):
    """Tests for :func:`Event.bind` and :class:`Event.commit`."""

    def _save(self):
        return mock.MagicMock(
            side_effect=lambda event, before, after: (event, after)
        )

    def test_commit_event(self):
        """Test a simple commit hook."""
        @dataclass
        class ChildEvent(Event):
            def _should_apply_callbacks(self):
                return True

        @dataclass
        class OtherChildEvent(Event):
            def _should_apply_callbacks(self):
                return True

        callback = mock.MagicMock(return_value=[], __name__='test')
        ChildEvent.bind(lambda *a: True)(callback)     # Register callback.

        event = ChildEvent(creator=System('system'))
        event.after = mock.MagicMock()
        OtherChildEvent(creator=System('system'))
        event.commit(self._save())
        self.assertEqual(callback.call_count, 1,
                         "Callback is only executed on the class to which it"
                         " is bound")

    def test_callback_inheritance(self):
        """Callback is inherited by subclasses."""
        @dataclass
        class ParentEvent(Event):
            def _should_apply_callbacks(self):
                return True

        @dataclass
        class ChildEvent(ParentEvent):
            def _should_apply_callbacks(self):
                return True

        callback = mock.MagicMock(return_value=[], __name__='test')
        ParentEvent.bind(lambda *a: True)(callback)     # Register callback.

        event = ChildEvent(creator=System('system'))
        event.after = mock.MagicMock()
        event.commit(self._save())
        self.assertEqual(callback.call_count, 1,
                         "Callback bound to parent class is called when child"
                         " is committed")

    def test_default_condition(self):
        """By default, events created by the system do not trigger."""
        @dataclass
        class SomeEvent(Event):
            def _should_apply_callbacks(self):
                return True

        callback = mock.MagicMock(return_value=[], __name__='test')
        SomeEvent.bind()(callback)

        by_system = SomeEvent(creator=System('system'))
        by_system.after = mock.MagicMock()
        by_system.commit(self._save())
        self.assertEqual(callback.call_count, 0)

        by_user = SomeEvent(creator=User('1', 'a@b.org'))
        by_user.after = mock.MagicMock()
        by_user.commit(self._save())
        self.assertEqual(callback.call_count, 1)
        creator = callback.call_args[0][3]
        self.assertIsInstance(creator, System, "Callback acts as the system")
        self.assertIn('SomeEvent::', creator.native_id)

    def test_callbacks_disabled(self):
        """Callbacks are off unless ENABLE_CALLBACKS is set."""
        @dataclass
        class QuietEvent(Event):
            pass

        callback = mock.MagicMock(return_value=[], __name__='test')
        QuietEvent.bind(lambda *a: True)(callback)
        event = QuietEvent(creator=User('1', 'a@b.org'))
        event.after = mock.MagicMock()
        with mock.patch.dict('os.environ', {'ENABLE_CALLBACKS': '0'}):
            _, consequences = event.commit(self._save())
        self.assertEqual(consequences, [])
        self.assertEqual(callback.call_count, 0)
        self.assertTrue(event.committed)

    def test_consequences(self):
        """Events generated by callbacks are applied and committed."""
        @dataclass
        class Trigger(Event):
            def _should_apply_callbacks(self):
                return True

        @dataclass
        class Consequence(Event):
            def validate(self, submission):
                pass

            def project(self, submission):
                submission.editor_notes.append('consequence')
                return submission

        @Trigger.bind()
        def react(event, before, after, creator):
            return [Consequence(creator=creator)]

        user = User('1', 'a@b.org')
        event = Trigger(creator=user)
        event.after = Submission(creator=user, owner=user)
        save = self._save()
        after, consequences = event.commit(save)
        self.assertEqual(len(consequences), 1)
        self.assertIsNotNone(consequences[0].created)
        self.assertEqual(after.editor_notes, ['consequence'])
        self.assertEqual(save.call_count, 2)
