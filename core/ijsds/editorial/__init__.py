"""
JSON API for the journal's editorial office.

Authors create and finalize submissions; editors move them through the
workflow, find and invite reviewers, and record decisions; reviewers respond
to invitations and submit their reports. Every mutation is expressed as
events from :mod:`ijsds.submission`, committed with
:func:`ijsds.submission.save`.
"""
