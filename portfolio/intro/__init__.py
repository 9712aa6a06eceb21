"""Intro controller: typed intro, skip handling and background media."""
