"""Shared constants for the calendar feed."""

# Identity of the exported calendar
APP_SLUG = "fhwien"
UID_DOMAIN = "dashboard.fhwien.ac.at"
PRODID = "-//FH Wien Dashboard//Calendar Export//DE"
CALENDAR_NAME = "FH Wien Dashboard"
CALENDAR_DESCRIPTION = "Termine aus dem FH Wien Dashboard"

# Civil timezone all schedule times are expressed in
TZID = "Europe/Vienna"

# HTTP delivery
ICS_CONTENT_TYPE = "text/calendar; charset=utf-8"
ICS_FILENAME = "fhwien-calendar.ics"

TOKEN_LENGTH = 32
SEQUENCE_MODULUS = 1_000_000
