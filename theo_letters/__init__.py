"""
Theo Letters - Big Digits and Letters for Small Children

A Textual TUI application:
- Type a digit or a letter, see it big on screen
- Hear it spoken in English or German

Designed for toddlers learning their first numbers and letters.
"""

__version__ = "1.0.0"
