#!/usr/bin/env python3
"""
Main entry point for the Ultimate sideline scorekeeper web application.

This script launches the Flask-based web server. Deployment settings come
from ULTISCORE_* environment variables.
"""
import os

from ultiscore.ui.web_app import run_web_app

if __name__ == "__main__":
    # Serve static files from the project root
    project_root = os.path.dirname(os.path.abspath(__file__))
    run_web_app(static_folder=project_root)
