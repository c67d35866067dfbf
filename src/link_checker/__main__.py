"""
Hauptmodul für die Kommandozeilenausführung des Link Checkers.
"""

from link_checker.main import main

if __name__ == "__main__":
    main()
