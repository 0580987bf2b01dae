#!/usr/bin/env python3
"""
Main entry point for the Kickabout Teams web application.

This script launches the Flask-based web server. Configuration is read from
the KICKABOUT_* environment variables.
"""
from kickabout.ui.web_app import run_web_app

if __name__ == "__main__":
    run_web_app()
