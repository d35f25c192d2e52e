"""
UI package for the Ultimate sideline scorekeeper.

This package contains the Flask web server that adapts the match controller
to a JSON API.
"""
from .web_app import create_app, run_web_app, start_ticker

__all__ = ["create_app", "run_web_app", "start_ticker"]
