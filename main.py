#!/usr/bin/env python3
"""
Main entry point for the pseudoserver link
"""

from pseudoserver.main import run

if __name__ == "__main__":
    run()
