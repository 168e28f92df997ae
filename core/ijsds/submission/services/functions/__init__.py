"""Integration with the serverless handlers of the hosted platform."""

from .functions import Functions, DOIRegistration
