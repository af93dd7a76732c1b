"""
Games module - Game-specific data and rules.

Each game has its own subpackage with:
- Map and card definitions
- Deck storage
- Legality queries and scoring
- Card event resolution
"""
